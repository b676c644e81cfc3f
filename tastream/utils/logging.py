"""Logging for tastream: structlog routed through the stdlib root logger.

setup_logging() picks the renderer: "json" writes one object per line,
"console" writes plain key=value text. Entries go to stderr so that the
CLI's stdout carries only indicator output.

series_context() names the stream being processed (the CLI uses the CSV
file name); every entry logged inside it gets a ``series`` key.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import IO, Any

import structlog

_series: ContextVar[str] = ContextVar("series", default="")


def set_series(name: str) -> None:
    """Set the series name for the current context."""
    _series.set(name)


def get_series() -> str:
    """Get the series name for the current context."""
    return _series.get()


@contextmanager
def series_context(name: str) -> Iterator[None]:
    """Tag every entry logged inside the block with ``series=name``."""
    token = _series.set(name)
    try:
        yield
    finally:
        _series.reset(token)


def _add_series(
    logger: structlog.types.WrappedLogger,
    method_name: str,
    event_dict: structlog.types.EventDict,
) -> structlog.types.EventDict:
    series = get_series()
    if series:
        event_dict.setdefault("series", series)
    return event_dict


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def setup_logging(
    level: str = "INFO",
    log_format: str = "console",
    stream: IO[str] | None = None,
) -> None:
    """Route structlog through the stdlib root logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: "json" or "console".
        stream: Destination; stderr by default so stdout stays data-only.
    """
    shared: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        _add_series,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_format),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper()))


def get_logger(name: str, **initial_values: Any) -> structlog.stdlib.BoundLogger:
    """Logger named ``name`` whose entries always carry ``initial_values``.

    Stays lazy: the configuration in force at the first log call applies,
    so module-level loggers created before setup_logging() still route
    through it.
    """
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name, **initial_values)
    return logger
