"""Moving averages: simple (ring buffer) and the two recursive filters.

SMA keeps a fixed ring buffer with a running sum, O(1) per update.
EMA and SMMA keep one scalar each. Their smoothing weights differ
(2/(n+1) versus 1/n) and they are kept as separate classes.
"""

from __future__ import annotations

from typing import Any

from tastream.indicators.base import Indicator, check_length
from tastream.numeric import NumericType, from_int


class SimpleMovingAverage(Indicator[Any]):
    """Simple Moving Average via ring buffer with running sum. O(1) per update.

    Until the window fills, the average is taken over the samples seen so
    far, so the first output equals the first input.

    Note: Running-sum approach may accumulate negligible float drift over very
    long series (100K+ updates). Use numeric=Decimal where that matters.
    """

    name = "SMA"
    defaults = (9,)

    def __init__(self, length: int, *, numeric: NumericType = float) -> None:
        super().__init__(numeric=numeric)
        self._length = check_length("SMA length", length)
        self.reset()

    @property
    def length(self) -> int:
        return self._length

    @property
    def params(self) -> tuple[Any, ...]:
        return (self._length,)

    @property
    def count(self) -> int:
        """Number of populated slots (max = length)."""
        return self._count

    @property
    def is_warm(self) -> bool:
        """True once the window holds a full length of values."""
        return self._count >= self._length

    def reset(self) -> None:
        zero = from_int(self._numeric, 0)
        self._buf: list[Any] = [zero] * self._length
        self._index = 0
        self._count = 0
        self._sum = zero

    def _update_value(self, value: Any) -> Any:
        self._index = (self._index + 1) % self._length
        old = self._buf[self._index]
        self._buf[self._index] = value

        if self._count < self._length:
            self._count += 1

        self._sum = self._sum - old + value
        return self._sum / from_int(self._numeric, self._count)


class ExponentialMovingAverage(Indicator[Any]):
    """Exponential moving average, k = 2 / (length + 1).

    The first input seeds the average as is; afterwards
    current = k * input + (1 - k) * current.
    """

    name = "EMA"
    defaults = (9,)

    def __init__(self, length: int, *, numeric: NumericType = float) -> None:
        super().__init__(numeric=numeric)
        self._length = check_length("EMA length", length)
        self._one = from_int(numeric, 1)
        self._k = from_int(numeric, 2) / (from_int(numeric, length) + self._one)
        self.reset()

    @property
    def length(self) -> int:
        return self._length

    @property
    def params(self) -> tuple[Any, ...]:
        return (self._length,)

    def reset(self) -> None:
        self._current = from_int(self._numeric, 0)
        self._is_new = True

    def _update_value(self, value: Any) -> Any:
        if self._is_new:
            self._is_new = False
            self._current = value
        else:
            self._current = self._k * value + (self._one - self._k) * self._current
        return self._current


class SmoothedMovingAverage(Indicator[Any]):
    """Smoothed (modified) moving average.

    The first input seeds the average as is; afterwards
    current = (current * (length - 1) + input) / length.
    """

    name = "SMMA"
    defaults = (9,)

    def __init__(self, length: int, *, numeric: NumericType = float) -> None:
        super().__init__(numeric=numeric)
        self._length = check_length("SMMA length", length)
        self._n = from_int(numeric, length)
        self._n_minus_one = self._n - from_int(numeric, 1)
        self.reset()

    @property
    def length(self) -> int:
        return self._length

    @property
    def params(self) -> tuple[Any, ...]:
        return (self._length,)

    def reset(self) -> None:
        self._current = from_int(self._numeric, 0)
        self._is_new = True

    def _update_value(self, value: Any) -> Any:
        if self._is_new:
            self._is_new = False
            self._current = value
        else:
            self._current = (self._current * self._n_minus_one + value) / self._n
        return self._current
