"""Click CLI commands for tastream."""

from __future__ import annotations

import csv
import decimal
from collections.abc import Mapping
from dataclasses import fields, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError

from tastream.config import Settings
from tastream.errors import (
    DataItemError,
    DataItemIncompleteError,
    DataItemInvalidError,
    InvalidParameterError,
)
from tastream.indicators.panel import IndicatorPanel
from tastream.indicators.registry import INDICATORS, available_indicators
from tastream.numeric import NUMERIC_TYPES, NumericType, coerce, resolve_numeric
from tastream.types import DataItem
from tastream.utils.logging import get_logger, series_context, setup_logging

log = get_logger(__name__)

MISSING_OUTPUT = "-"


@click.group()
def cli() -> None:
    """tastream: streaming technical-analysis indicators."""


@cli.command("list")
def list_indicators() -> None:
    """List every indicator with its default label."""
    for name in available_indicators():
        click.echo(INDICATORS[name].default().label)


@cli.command()
@click.argument(
    "csv_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-i",
    "--indicator",
    "labels",
    multiple=True,
    required=True,
    help="Indicator label, e.g. 'EMA(9)'. Repeat for several.",
)
@click.option(
    "--numeric",
    type=click.Choice(sorted(NUMERIC_TYPES), case_sensitive=False),
    default=None,
    help="Number type of the stream (default: TASTREAM_NUMERIC or float).",
)
@click.option(
    "--places",
    type=click.IntRange(0, 12),
    default=None,
    help="Decimal places in the output (default: TASTREAM_OUTPUT_PLACES or 6).",
)
@click.option(
    "--strict/--no-strict",
    default=False,
    help="Abort on the first invalid row instead of skipping it.",
)
def run(
    csv_path: Path,
    labels: tuple[str, ...],
    numeric: str | None,
    places: int | None,
    strict: bool,
) -> None:
    """Stream CSV_PATH through the given indicators, one output line per row.

    The CSV needs open/high/low/close/volume columns, or a single
    'value' column for a plain number series.
    """
    try:
        settings = Settings()
    except ValidationError as e:
        raise click.ClickException(str(e)) from e
    setup_logging(settings.log_level, settings.log_format)

    numeric_type = resolve_numeric(numeric or settings.numeric)
    if places is None:
        places = settings.output_places

    with series_context(csv_path.name), decimal.localcontext() as ctx:
        ctx.prec = settings.decimal_precision
        # Indicator constants (EMA k, SMMA divisors) are rounded here too.
        try:
            panel = IndicatorPanel.from_labels(labels, numeric=numeric_type)
        except InvalidParameterError as e:
            raise click.ClickException(str(e)) from e
        _stream(csv_path, panel, numeric_type, places, strict)


def _stream(
    csv_path: Path,
    panel: IndicatorPanel,
    numeric: NumericType,
    places: int,
    strict: bool,
) -> None:
    click.echo("\t".join(["row", *panel.labels]))
    rejected = 0

    with csv_path.open(newline="", encoding="utf-8") as fh:
        reader = csv.DictReader(fh)
        scalar = "value" in (reader.fieldnames or [])
        log.info(
            "stream_started",
            path=str(csv_path),
            indicators=list(panel.labels),
            scalar=scalar,
        )

        for row_number, row in enumerate(reader, start=1):
            try:
                item = _read_row(row, scalar, numeric)
            except DataItemError as e:
                if strict:
                    raise click.ClickException(f"row {row_number}: {e}") from e
                log.warning("row_rejected", row=row_number, error=str(e))
                rejected += 1
                continue

            try:
                snapshot = panel.process(item)
            except TypeError as e:
                raise click.ClickException(str(e)) from e

            outputs = (format_output(v, places) for v in snapshot.values.values())
            click.echo("\t".join([str(row_number), *outputs]))

    log.info("stream_finished", rows=panel.bar_count, rejected=rejected)


def _read_row(row: Mapping[str, Any], scalar: bool, numeric: NumericType) -> Any:
    if not scalar:
        return DataItem.from_mapping(row, numeric=numeric)

    raw = row.get("value")
    if raw in (None, ""):
        raise DataItemIncompleteError(["value"])
    try:
        return coerce(numeric, raw)
    except (ValueError, ArithmeticError) as e:
        raise DataItemInvalidError(f"Invalid value: {raw!r}") from e


def format_output(value: Any, places: int) -> str:
    """Render one indicator output as text.

    Composite outputs (MACD, bands, candles, Ichimoku records) are joined
    with commas; unset Ichimoku fields print as '-'.
    """
    if value is None:
        return MISSING_OUTPUT
    if isinstance(value, Enum):
        return str(value.value)
    if is_dataclass(value) and not isinstance(value, type):
        return ",".join(format_output(getattr(value, f.name), places) for f in fields(value))
    if isinstance(value, tuple):
        return ",".join(format_output(v, places) for v in value)
    return format(value, f".{places}f")
