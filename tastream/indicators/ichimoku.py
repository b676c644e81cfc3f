"""Ichimoku Kinko Hyo.

Ichimoku plots values both behind and ahead of the current bar, so it
keeps a window of kijun + senkou_b records instead of a single output.
Logical index senkou_b - 1 is the current bar; the chikou span is written
kijun periods behind it and the senkou spans kijun periods ahead.

The lines are all midpoints, (highest high + lowest low) / 2, over:
    tenkan sen     the last tenkan bars
    kijun sen      the last kijun bars
    senkou span A  (tenkan sen + kijun sen) / 2
    senkou span B  the last senkou_b bars
    chikou span    the close itself
Nothing is computed until senkou_b bars have been seen.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Generic, TypeVar

from tastream.errors import InvalidParameterError
from tastream.indicators.base import Indicator, check_length
from tastream.numeric import NumericType, from_int
from tastream.types import HasHighLowClose, read_field

T = TypeVar("T")


class KumoColor(str, Enum):
    GREEN = "green"
    RED = "red"


@dataclass
class IchimokuOutput:
    """One plotted period. Fields stay None until something is drawn there."""

    close: Any = None
    high: Any = None
    low: Any = None
    tenkan_sen: Any = None
    kijun_sen: Any = None
    senkou_span_a: Any = None
    senkou_span_b: Any = None
    chikou_span: Any = None
    kumo_color: KumoColor | None = None


class CircularQueue(Generic[T]):
    """Fixed-capacity ring addressed by logical index, 0 being the oldest slot."""

    def __init__(self, capacity: int, factory: Callable[[], T]) -> None:
        self._capacity = capacity
        self._factory = factory
        self._shift = 0
        self._data = [factory() for _ in range(capacity)]

    def __len__(self) -> int:
        return self._capacity

    def _physical(self, index: int) -> int:
        if not 0 <= index < self._capacity:
            raise IndexError(
                f"index {index} out of range for capacity {self._capacity}"
            )
        return (self._shift + index) % self._capacity

    def __getitem__(self, index: int) -> T:
        return self._data[self._physical(index)]

    def __setitem__(self, index: int, value: T) -> None:
        self._data[self._physical(index)] = value

    def shift_left(self) -> None:
        """Drop the oldest slot; it comes back, blank, as the newest one."""
        self._data[self._shift] = self._factory()
        self._shift = (self._shift + 1) % self._capacity


class Ichimoku(Indicator[IchimokuOutput]):
    """Ichimoku cloud over high/low/close bars.

    update() returns a snapshot of the current bar's record. The whole
    plotted window is readable by index (0 = oldest) or by iteration;
    every access returns a copy. Bar-only: a bare number raises TypeError.
    """

    name = "ICHIMOKU"
    capability = HasHighLowClose
    defaults = (9, 26, 52)

    def __init__(
        self,
        tenkan_length: int,
        kijun_length: int,
        senkou_b_length: int,
        *,
        numeric: NumericType = float,
    ) -> None:
        super().__init__(numeric=numeric)
        check_length("ICHIMOKU tenkan length", tenkan_length)
        check_length("ICHIMOKU kijun length", kijun_length)
        check_length("ICHIMOKU senkou B length", senkou_b_length)
        if not tenkan_length < kijun_length < senkou_b_length:
            raise InvalidParameterError(
                "ICHIMOKU lengths must satisfy tenkan < kijun < senkou B, "
                f"got {tenkan_length}, {kijun_length}, {senkou_b_length}"
            )
        self._tenkan = tenkan_length
        self._kijun = kijun_length
        self._senkou_b = senkou_b_length
        self._two = from_int(numeric, 2)
        self.reset()

    @property
    def params(self) -> tuple[Any, ...]:
        return (self._tenkan, self._kijun, self._senkou_b)

    @property
    def bar_count(self) -> int:
        return self._count

    def reset(self) -> None:
        self._data: CircularQueue[IchimokuOutput] = CircularQueue(
            self._kijun + self._senkou_b, IchimokuOutput
        )
        self._count = 0

    def __len__(self) -> int:
        return len(self._data)

    def __getitem__(self, index: int) -> IchimokuOutput:
        return replace(self._data[index])

    def __iter__(self) -> Iterator[IchimokuOutput]:
        for i in range(len(self._data)):
            yield replace(self._data[i])

    def _midpoint(self, span: int) -> Any:
        high: Any = None
        low: Any = None
        for i in range(self._senkou_b - span, self._senkou_b):
            row = self._data[i]
            if high is None or row.high > high:
                high = row.high
            if low is None or row.low < low:
                low = row.low
        return (high + low) / self._two

    def _update_bar(self, bar: HasHighLowClose[Any]) -> IchimokuOutput:
        close = read_field(bar, "close")
        high = read_field(bar, "high")
        low = read_field(bar, "low")

        self._count += 1
        if self._count > self._senkou_b:
            self._data.shift_left()

        current = min(self._count, self._senkou_b) - 1
        row = self._data[current]
        row.close = close
        row.high = high
        row.low = low

        if self._count >= self._senkou_b:
            tenkan = self._midpoint(self._tenkan)
            kijun = self._midpoint(self._kijun)
            span_a = (tenkan + kijun) / self._two
            span_b = self._midpoint(self._senkou_b)

            row.tenkan_sen = tenkan
            row.kijun_sen = kijun

            self._data[current - self._kijun].chikou_span = close

            ahead = self._data[current + self._kijun]
            ahead.senkou_span_a = span_a
            ahead.senkou_span_b = span_b
            ahead.kumo_color = KumoColor.GREEN if span_a > span_b else KumoColor.RED

        return replace(row)
