"""Indicator lifecycle contract.

Every indicator is a small state machine: construct it with its window
lengths, feed one input per period through update(), call reset() to
start over. Inputs must arrive in chronological order; an indicator
has no way to check that.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Generic, Self, TypeVar

from tastream.errors import InvalidParameterError
from tastream.numeric import NumericType, format_number, is_number
from tastream.types import HasClose, missing_fields, read_field

OutT = TypeVar("OutT")


def check_length(name: str, value: object) -> int:
    """Validate a window length: an int >= 1 (bool is rejected)."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidParameterError(
            f"{name} must be an integer >= 1, got {value!r}"
        )
    return value


class Indicator(ABC, Generic[OutT]):
    """Base class for streaming indicators.

    update() accepts either a bare number or a bar-like record. Numbers go
    to _update_value(); records go to _update_bar(), which by default feeds
    the record's close price to _update_value(). Indicators that need other
    fields override _update_bar(); bar-only indicators leave _update_value()
    alone so that a bare number raises TypeError.

    ``capability`` is the bar protocol _update_bar() reads. A record that
    does not satisfy it is rejected before any state changes.
    """

    name: ClassVar[str]
    defaults: ClassVar[tuple[Any, ...]] = ()
    capability: ClassVar[type] = HasClose

    def __init__(self, *, numeric: NumericType = float) -> None:
        self._numeric = numeric

    @classmethod
    def default(cls, *, numeric: NumericType = float) -> Self:
        """Build the indicator with its conventional parameters."""
        return cls(*cls.defaults, numeric=numeric)

    @property
    def numeric(self) -> NumericType:
        """Number type of the stream this indicator was built for."""
        return self._numeric

    @property
    def params(self) -> tuple[Any, ...]:
        """Configured parameters, in constructor order."""
        return ()

    @property
    def label(self) -> str:
        """Canonical label, e.g. ``EMA(9)`` or ``MACD(12, 26, 9)``."""
        args = ", ".join(format_number(p) for p in self.params)
        return f"{self.name}({args})"

    def update(self, item: Any) -> OutT:
        """Consume one number or bar and return the updated output."""
        if is_number(item):
            return self._update_value(item)
        missing = missing_fields(item, self.capability)
        if missing:
            raise TypeError(
                f"{self.label} requires {self.capability.__name__}: "
                f"{type(item).__name__} does not expose "
                + ", ".join(repr(f) for f in missing)
            )
        return self._update_bar(item)

    def _update_value(self, value: Any) -> OutT:
        raise TypeError(
            f"{self.label} requires a bar record, got {type(value).__name__}"
        )

    def _update_bar(self, bar: Any) -> OutT:
        return self._update_value(read_field(bar, "close"))

    @abstractmethod
    def reset(self) -> None:
        """Restore the state the indicator had right after construction."""

    def __str__(self) -> str:
        return self.label

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.label}>"
