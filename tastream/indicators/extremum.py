"""Rolling minimum and maximum over a fixed ring buffer.

The index of the current extremum is cached. A new value that beats it
takes its place in O(1); only when the ring overwrites the cached slot
is the whole window rescanned.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any, ClassVar

from tastream.indicators.base import Indicator, check_length
from tastream.numeric import NumericType
from tastream.types import HasHigh, HasLow, read_field


class _RollingExtremum(Indicator[Any]):
    """Shared ring-buffer logic for Minimum and Maximum."""

    defaults = (14,)
    bar_field: ClassVar[str]

    def __init__(self, length: int, *, numeric: NumericType = float) -> None:
        super().__init__(numeric=numeric)
        self._length = check_length(f"{self.name} length", length)
        self.reset()

    @property
    def length(self) -> int:
        return self._length

    @property
    def params(self) -> tuple[Any, ...]:
        return (self._length,)

    def reset(self) -> None:
        self._buf: list[Any | None] = [None] * self._length
        self._index = 0
        self._extremum_index = 0

    @abstractmethod
    def _beats(self, candidate: Any, current: Any) -> bool:
        """True if candidate should replace current as the extremum."""

    def _rescan(self) -> int:
        best_index = self._index
        best = self._buf[self._index]
        for i, value in enumerate(self._buf):
            if value is not None and self._beats(value, best):
                best_index, best = i, value
        return best_index

    def _update_value(self, value: Any) -> Any:
        self._index = (self._index + 1) % self._length
        self._buf[self._index] = value

        current = self._buf[self._extremum_index]
        if self._extremum_index == self._index:
            # The cached extremum was just evicted.
            self._extremum_index = self._rescan()
        elif current is None or self._beats(value, current):
            self._extremum_index = self._index
        return self._buf[self._extremum_index]

    def _update_bar(self, bar: HasLow[Any] | HasHigh[Any]) -> Any:
        return self._update_value(read_field(bar, self.bar_field))


class Minimum(_RollingExtremum):
    """Lowest value of the last ``length`` inputs (bars: lowest low)."""

    name = "MIN"
    bar_field = "low"
    capability = HasLow

    def _beats(self, candidate: Any, current: Any) -> bool:
        return bool(candidate < current)


class Maximum(_RollingExtremum):
    """Highest value of the last ``length`` inputs (bars: highest high)."""

    name = "MAX"
    bar_field = "high"
    capability = HasHigh

    def _beats(self, candidate: Any, current: Any) -> bool:
        return bool(candidate > current)
