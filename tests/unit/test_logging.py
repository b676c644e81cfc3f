"""Tests for structured logging setup."""

from __future__ import annotations

import io
import json

from structlog.testing import capture_logs

from tastream.numeric import sqrt
from tastream.utils.logging import (
    get_logger,
    get_series,
    series_context,
    set_series,
    setup_logging,
)


def _lines(stream: io.StringIO) -> list[dict[str, object]]:
    return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]


class TestSetupLogging:
    """Test logging configuration."""

    def test_setup_logging_returns_none(self) -> None:
        assert setup_logging(level="INFO", log_format="json") is None

    def test_get_logger_returns_bound_logger(self) -> None:
        setup_logging(level="INFO", log_format="json")
        assert get_logger("test") is not None

    def test_initial_values_on_every_entry(self) -> None:
        stream = io.StringIO()
        logger = get_logger("test_initial", component="reader")
        setup_logging(level="INFO", log_format="json", stream=stream)
        logger.info("first")
        logger.info("second")
        assert [e["component"] for e in _lines(stream)] == ["reader", "reader"]


class TestJsonFormat:
    """JSON lines carry the standard keys."""

    def test_json_output_is_valid(self) -> None:
        stream = io.StringIO()
        setup_logging(level="INFO", log_format="json", stream=stream)
        get_logger("test_json").info("test message", extra_key="extra_value")

        (entry,) = _lines(stream)
        assert entry["event"] == "test message"
        assert entry["extra_key"] == "extra_value"
        assert entry["level"] == "info"
        assert entry["logger"] == "test_json"
        assert "timestamp" in entry

    def test_level_filters(self) -> None:
        stream = io.StringIO()
        setup_logging(level="WARNING", log_format="json", stream=stream)
        logger = get_logger("test_level")
        logger.info("dropped")
        logger.warning("kept")
        assert [e["event"] for e in _lines(stream)] == ["kept"]

    def test_console_format_is_plain_text(self) -> None:
        stream = io.StringIO()
        setup_logging(level="INFO", log_format="console", stream=stream)
        get_logger("test_console").info("hello", answer=42)
        output = stream.getvalue()
        assert "hello" in output
        assert "answer=42" in output


class TestSeries:
    """The series name is stamped onto entries while set."""

    def test_set_and_get(self) -> None:
        with series_context("outer"):
            set_series("prices.csv")
            assert get_series() == "prices.csv"

    def test_context_restores_previous(self) -> None:
        with series_context("a.csv"):
            with series_context("b.csv"):
                assert get_series() == "b.csv"
            assert get_series() == "a.csv"
        assert get_series() == ""

    def test_series_in_entries(self) -> None:
        stream = io.StringIO()
        setup_logging(level="INFO", log_format="json", stream=stream)
        with series_context("prices.csv"):
            get_logger("test_series").info("inside")
        get_logger("test_series").info("outside")
        inside, outside = _lines(stream)
        assert inside["series"] == "prices.csv"
        assert "series" not in outside


class TestLibraryEvents:
    """Library modules log through structlog."""

    def test_sqrt_zero_seed_is_logged(self) -> None:
        with capture_logs() as logs:
            sqrt(0.0)
        assert logs == [{"event": "sqrt_zero_seed", "log_level": "debug", "value": "0.0"}]
