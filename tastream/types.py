"""Bar capability protocols and the OHLCV data item.

Indicators never require a concrete bar class. Each one reads only the
fields it needs (open, high, low, close, volume) from whatever record
it is given, so a broker's bar, a namedtuple or a DataItem all work.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from tastream.errors import DataItemIncompleteError, DataItemInvalidError
from tastream.numeric import NumericType, coerce, is_finite

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)

BAR_FIELDS = ("open", "high", "low", "close", "volume")


@runtime_checkable
class HasOpen(Protocol[T_co]):
    """Record exposing the opening price of a period."""

    @property
    def open(self) -> T_co: ...


@runtime_checkable
class HasHigh(Protocol[T_co]):
    """Record exposing the highest price of a period."""

    @property
    def high(self) -> T_co: ...


@runtime_checkable
class HasLow(Protocol[T_co]):
    """Record exposing the lowest price of a period."""

    @property
    def low(self) -> T_co: ...


@runtime_checkable
class HasClose(Protocol[T_co]):
    """Record exposing the closing price of a period."""

    @property
    def close(self) -> T_co: ...


@runtime_checkable
class HasVolume(Protocol[T_co]):
    """Record exposing the traded volume of a period."""

    @property
    def volume(self) -> T_co: ...


@runtime_checkable
class HasHighLowClose(HasHigh[T_co], HasLow[T_co], HasClose[T_co], Protocol[T_co]):
    """Record with the range and close of a period."""


@runtime_checkable
class HasCloseVolume(HasClose[T_co], HasVolume[T_co], Protocol[T_co]):
    """Record with the close and traded volume of a period."""


@runtime_checkable
class HasOhlc(
    HasOpen[T_co], HasHigh[T_co], HasLow[T_co], HasClose[T_co], Protocol[T_co]
):
    """Record with all four prices of a period."""


def missing_fields(item: object, capability: type) -> list[str]:
    """Bar fields declared by the ``capability`` protocol that ``item`` lacks."""
    return [
        name
        for name in BAR_FIELDS
        if hasattr(capability, name) and not hasattr(item, name)
    ]


def read_field(item: object, name: str) -> Any:
    """Read one capability from a bar-like record.

    Raises TypeError naming the field when the record does not expose it.
    """
    try:
        return getattr(item, name)
    except AttributeError:
        raise TypeError(
            f"{type(item).__name__} does not expose '{name}'"
        ) from None


@dataclass(frozen=True)
class DataItem(Generic[T]):
    """Validated OHLCV bar.

    Invariants: every field finite; low <= open, close, high;
    high >= open, close; volume >= 0; low >= 0.
    """

    open: T
    high: T
    low: T
    close: T
    volume: T

    def __post_init__(self) -> None:
        o, h, lo, c, v = self.open, self.high, self.low, self.close, self.volume
        bad = [name for name in BAR_FIELDS if not is_finite(getattr(self, name))]
        if bad:
            raise DataItemInvalidError(
                f"Non-finite value for {', '.join(bad)}"
            )
        if not (
            lo <= o  # type: ignore[operator]
            and lo <= c  # type: ignore[operator]
            and lo <= h  # type: ignore[operator]
            and h >= o  # type: ignore[operator]
            and h >= c  # type: ignore[operator]
            and v >= 0  # type: ignore[operator]
            and lo >= 0  # type: ignore[operator]
        ):
            raise DataItemInvalidError(
                f"Inconsistent bar: open={o} high={h} low={lo} close={c} volume={v}"
            )

    @classmethod
    def from_mapping(
        cls,
        row: Mapping[str, Any],
        numeric: NumericType = float,
    ) -> DataItem[Any]:
        """Build a DataItem from a mapping such as a CSV row.

        Values may be strings or numbers; they are converted to ``numeric``.
        """
        missing = [name for name in BAR_FIELDS if row.get(name) in (None, "")]
        if missing:
            raise DataItemIncompleteError(missing)

        values: dict[str, Any] = {}
        for name in BAR_FIELDS:
            raw = row[name]
            try:
                values[name] = coerce(numeric, raw)
            except (ValueError, ArithmeticError) as e:
                raise DataItemInvalidError(
                    f"Invalid value for {name}: {raw!r}"
                ) from e
        return cls(**values)
