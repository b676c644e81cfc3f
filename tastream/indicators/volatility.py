"""Volatility indicators: standard deviation, Bollinger Bands, true range, ATR.

StandardDeviation runs Welford's online algorithm over a fixed window:
while the window fills it is the textbook update, afterwards the value
leaving the window is subtracted in the same pass.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from tastream.errors import InvalidParameterError
from tastream.indicators.base import Indicator, check_length
from tastream.indicators.moving_average import ExponentialMovingAverage
from tastream.numeric import NumericType, coerce, from_int, max3, sqrt
from tastream.types import HasHighLowClose, read_field

T = TypeVar("T")


class StandardDeviation(Indicator[Any]):
    """Population standard deviation of the last ``length`` inputs."""

    name = "SD"
    defaults = (9,)

    def __init__(self, length: int, *, numeric: NumericType = float) -> None:
        super().__init__(numeric=numeric)
        self._length = check_length("SD length", length)
        self._zero = from_int(numeric, 0)
        self._n = from_int(numeric, length)
        self.reset()

    @property
    def length(self) -> int:
        return self._length

    @property
    def params(self) -> tuple[Any, ...]:
        return (self._length,)

    @property
    def mean(self) -> Any:
        """Running mean of the current window."""
        return self._mean

    def reset(self) -> None:
        self._buf: list[Any] = [self._zero] * self._length
        self._index = 0
        self._count = 0
        self._mean = self._zero
        self._m2 = self._zero

    def _update_value(self, value: Any) -> Any:
        self._index = (self._index + 1) % self._length
        old = self._buf[self._index]
        self._buf[self._index] = value

        if self._count < self._length:
            self._count += 1
            delta = value - self._mean
            self._mean = self._mean + delta / from_int(self._numeric, self._count)
            delta2 = value - self._mean
            self._m2 = self._m2 + delta * delta2
        else:
            delta = value - old
            old_mean = self._mean
            self._mean = self._mean + delta / self._n
            delta2 = value - self._mean + old - old_mean
            self._m2 = self._m2 + delta * delta2

        variance = self._m2 / from_int(self._numeric, self._count)
        # Rounding can leave m2 a hair below zero on a flat window.
        if variance < self._zero:
            variance = self._zero
        return sqrt(variance, self._numeric)


@dataclass(frozen=True)
class BollingerBandsOutput(Generic[T]):
    """Middle band and the two envelopes for one period."""

    average: T
    upper: T
    lower: T


class BollingerBands(Indicator[BollingerBandsOutput[Any]]):
    """Mean of the window +/- multiplier standard deviations."""

    name = "BB"
    defaults = (9, 2)

    def __init__(
        self,
        length: int,
        multiplier: Any,
        *,
        numeric: NumericType = float,
    ) -> None:
        super().__init__(numeric=numeric)
        self._length = check_length("BB length", length)
        try:
            mult = coerce(numeric, multiplier)
        except (TypeError, ValueError, ArithmeticError) as e:
            raise InvalidParameterError(
                f"BB multiplier must be a number, got {multiplier!r}"
            ) from e
        if not mult > from_int(numeric, 0):
            raise InvalidParameterError(
                f"BB multiplier must be > 0, got {multiplier!r}"
            )
        self._multiplier = mult
        self._sd = StandardDeviation(length, numeric=numeric)

    @property
    def length(self) -> int:
        return self._length

    @property
    def multiplier(self) -> Any:
        return self._multiplier

    @property
    def params(self) -> tuple[Any, ...]:
        return (self._length, self._multiplier)

    def reset(self) -> None:
        self._sd.reset()

    def _update_value(self, value: Any) -> BollingerBandsOutput[Any]:
        sd = self._sd.update(value)
        average = self._sd.mean
        return BollingerBandsOutput(
            average=average,
            upper=average + sd * self._multiplier,
            lower=average - sd * self._multiplier,
        )


class TrueRange(Indicator[Any]):
    """Greatest of high - low and the gaps to the previous close.

    A bare number is treated as a degenerate bar: the output is the
    distance to the previous number, 0 on the first sample. Both entry
    points share one previous-close slot.
    """

    name = "TRUE_RANGE"
    capability = HasHighLowClose

    def __init__(self, *, numeric: NumericType = float) -> None:
        super().__init__(numeric=numeric)
        self._zero = from_int(numeric, 0)
        self.reset()

    def reset(self) -> None:
        self._prev_close: Any | None = None

    def _update_value(self, value: Any) -> Any:
        distance = self._zero if self._prev_close is None else abs(value - self._prev_close)
        self._prev_close = value
        return distance

    def _update_bar(self, bar: HasHighLowClose[Any]) -> Any:
        high = read_field(bar, "high")
        low = read_field(bar, "low")
        close = read_field(bar, "close")

        if self._prev_close is None:
            distance = high - low
        else:
            distance = max3(
                high - low,
                abs(high - self._prev_close),
                abs(low - self._prev_close),
            )
        self._prev_close = close
        return distance


class AverageTrueRange(Indicator[Any]):
    """EMA of the true range."""

    name = "ATR"
    capability = HasHighLowClose
    defaults = (14,)

    def __init__(self, length: int, *, numeric: NumericType = float) -> None:
        super().__init__(numeric=numeric)
        check_length("ATR length", length)
        self._true_range = TrueRange(numeric=numeric)
        self._ema = ExponentialMovingAverage(length, numeric=numeric)

    @property
    def length(self) -> int:
        return self._ema.length

    @property
    def params(self) -> tuple[Any, ...]:
        return (self._ema.length,)

    def reset(self) -> None:
        self._true_range.reset()
        self._ema.reset()

    def _update_value(self, value: Any) -> Any:
        return self._ema.update(self._true_range.update(value))

    def _update_bar(self, bar: HasHighLowClose[Any]) -> Any:
        return self._ema.update(self._true_range.update(bar))
