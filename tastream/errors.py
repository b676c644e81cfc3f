"""Error hierarchy for tastream.

All package exceptions inherit from TaError. Configuration problems are
raised at construction time only; stepping an indicator never raises
for numeric reasons.
"""

from __future__ import annotations


class TaError(Exception):
    """Base exception for all tastream errors."""


class InvalidParameterError(TaError, ValueError):
    """Indicator constructed with an invalid length, multiplier or label."""


class DataItemError(TaError, ValueError):
    """Base for bar record construction failures."""


class DataItemIncompleteError(DataItemError):
    """One or more OHLCV fields are missing.

    Stores the names of the missing fields.
    """

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"Data item is missing fields: {', '.join(missing)}")


class DataItemInvalidError(DataItemError):
    """OHLCV values are inconsistent (e.g. low above high, negative volume)."""
