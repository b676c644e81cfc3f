"""Momentum oscillators: RSI, stochastics, MACD, efficiency ratio, ROC.

Composite indicators own their sub-indicators outright and forward
reset() to them. Ratios that would divide by zero on a degenerate window
return a fixed sentinel instead of raising.
"""

from __future__ import annotations

from abc import abstractmethod
from collections import deque
from itertools import islice
from typing import Any, NamedTuple

from tastream.indicators.base import Indicator, check_length
from tastream.indicators.extremum import Maximum, Minimum
from tastream.indicators.moving_average import (
    ExponentialMovingAverage,
    SmoothedMovingAverage,
)
from tastream.numeric import NumericType, from_float, from_int
from tastream.types import HasHighLowClose, read_field


class _StrengthIndex(Indicator[Any]):
    """Shared RSI skeleton: smooth the up and down moves, take their ratio."""

    defaults = (14,)
    seed_up: float
    seed_down: float

    def __init__(self, length: int, *, numeric: NumericType = float) -> None:
        super().__init__(numeric=numeric)
        self._length = check_length(f"{self.name} length", length)
        self._up = self._smoother(length, numeric)
        self._down = self._smoother(length, numeric)
        self._zero = from_int(numeric, 0)
        self._fifty = from_int(numeric, 50)
        self._hundred = from_int(numeric, 100)
        self._seed_up = from_float(numeric, self.seed_up)
        self._seed_down = from_float(numeric, self.seed_down)
        self.reset()

    @abstractmethod
    def _smoother(self, length: int, numeric: NumericType) -> Indicator[Any]:
        """Build one of the two averaging indicators."""

    @abstractmethod
    def _moves(self, value: Any) -> tuple[Any, Any]:
        """Split the change from the previous input into (up, down)."""

    @property
    def length(self) -> int:
        return self._length

    @property
    def params(self) -> tuple[Any, ...]:
        return (self._length,)

    def reset(self) -> None:
        self._up.reset()
        self._down.reset()
        self._prev = self._zero
        self._is_new = True

    def _update_value(self, value: Any) -> Any:
        if self._is_new:
            self._is_new = False
            up, down = self._seed_up, self._seed_down
        else:
            up, down = self._moves(value)
        self._prev = value

        up_avg = self._up.update(up)
        down_avg = self._down.update(down)
        total = up_avg + down_avg
        if total == self._zero:
            return self._fifty
        return self._hundred * up_avg / total


class RelativeStrengthIndex(_StrengthIndex):
    """RSI with EMA smoothing of up and down moves.

    The first input has no predecessor; both averages are seeded with 0.1
    so the first output is 50. An unchanged price counts as a zero down move.
    """

    name = "RSI"
    seed_up = 0.1
    seed_down = 0.1

    def _smoother(self, length: int, numeric: NumericType) -> Indicator[Any]:
        return ExponentialMovingAverage(length, numeric=numeric)

    def _moves(self, value: Any) -> tuple[Any, Any]:
        if value > self._prev:
            return value - self._prev, self._zero
        return self._zero, self._prev - value


class RelativeStrengthIndexSmma(_StrengthIndex):
    """RSI with Wilder (SMMA) smoothing.

    Seeds are 1e-9 up and 1e-8 down, so the first output is about 9.09.
    An unchanged price moves neither average.
    """

    name = "RSI_SMMA"
    seed_up = 1e-9
    seed_down = 1e-8

    def _smoother(self, length: int, numeric: NumericType) -> Indicator[Any]:
        return SmoothedMovingAverage(length, numeric=numeric)

    def _moves(self, value: Any) -> tuple[Any, Any]:
        if value > self._prev:
            return value - self._prev, self._zero
        if value < self._prev:
            return self._zero, self._prev - value
        return self._zero, self._zero


class FastStochastic(Indicator[Any]):
    """Position of the close inside the window's range, 0..100.

    Bars use the highest high and lowest low; a bare number is its own
    high and low. A flat window returns 50.
    """

    name = "FAST_STOCH"
    capability = HasHighLowClose
    defaults = (14,)

    def __init__(self, length: int, *, numeric: NumericType = float) -> None:
        super().__init__(numeric=numeric)
        self._length = check_length("FAST_STOCH length", length)
        self._minimum = Minimum(length, numeric=numeric)
        self._maximum = Maximum(length, numeric=numeric)
        self._fifty = from_int(numeric, 50)
        self._hundred = from_int(numeric, 100)

    @property
    def length(self) -> int:
        return self._length

    @property
    def params(self) -> tuple[Any, ...]:
        return (self._length,)

    def reset(self) -> None:
        self._minimum.reset()
        self._maximum.reset()

    def _position(self, value: Any, lowest: Any, highest: Any) -> Any:
        if highest == lowest:
            return self._fifty
        return (value - lowest) / (highest - lowest) * self._hundred

    def _update_value(self, value: Any) -> Any:
        lowest = self._minimum.update(value)
        highest = self._maximum.update(value)
        return self._position(value, lowest, highest)

    def _update_bar(self, bar: HasHighLowClose[Any]) -> Any:
        highest = self._maximum.update(bar)
        lowest = self._minimum.update(bar)
        return self._position(read_field(bar, "close"), lowest, highest)


class SlowStochastic(Indicator[Any]):
    """Fast stochastic smoothed by an EMA."""

    name = "SLOW_STOCH"
    capability = HasHighLowClose
    defaults = (14, 3)

    def __init__(
        self,
        stochastic_length: int,
        ema_length: int,
        *,
        numeric: NumericType = float,
    ) -> None:
        super().__init__(numeric=numeric)
        check_length("SLOW_STOCH stochastic length", stochastic_length)
        check_length("SLOW_STOCH ema length", ema_length)
        self._fast = FastStochastic(stochastic_length, numeric=numeric)
        self._ema = ExponentialMovingAverage(ema_length, numeric=numeric)

    @property
    def params(self) -> tuple[Any, ...]:
        return (self._fast.length, self._ema.length)

    def reset(self) -> None:
        self._fast.reset()
        self._ema.reset()

    def _update_value(self, value: Any) -> Any:
        return self._ema.update(self._fast.update(value))

    def _update_bar(self, bar: HasHighLowClose[Any]) -> Any:
        return self._ema.update(self._fast.update(bar))


class MacdOutput(NamedTuple):
    """MACD line, its signal line, and their difference."""

    macd: Any
    signal: Any
    histogram: Any


class MovingAverageConvergenceDivergence(Indicator[MacdOutput]):
    """Difference of a fast and a slow EMA, plus an EMA of that difference."""

    name = "MACD"
    defaults = (12, 26, 9)

    def __init__(
        self,
        fast_length: int,
        slow_length: int,
        signal_length: int,
        *,
        numeric: NumericType = float,
    ) -> None:
        super().__init__(numeric=numeric)
        check_length("MACD fast length", fast_length)
        check_length("MACD slow length", slow_length)
        check_length("MACD signal length", signal_length)
        self._fast = ExponentialMovingAverage(fast_length, numeric=numeric)
        self._slow = ExponentialMovingAverage(slow_length, numeric=numeric)
        self._signal = ExponentialMovingAverage(signal_length, numeric=numeric)

    @property
    def params(self) -> tuple[Any, ...]:
        return (self._fast.length, self._slow.length, self._signal.length)

    def reset(self) -> None:
        self._fast.reset()
        self._slow.reset()
        self._signal.reset()

    def _update_value(self, value: Any) -> MacdOutput:
        fast = self._fast.update(value)
        slow = self._slow.update(value)
        macd = fast - slow
        signal = self._signal.update(macd)
        return MacdOutput(macd=macd, signal=signal, histogram=macd - signal)


class EfficiencyRatio(Indicator[Any]):
    """Kaufman efficiency ratio: net move divided by the path travelled.

    Returns 1 until three inputs are held, and 1 for a flat window.
    """

    name = "ER"
    defaults = (14,)

    def __init__(self, length: int, *, numeric: NumericType = float) -> None:
        super().__init__(numeric=numeric)
        self._length = check_length("ER length", length)
        self._zero = from_int(numeric, 0)
        self._one = from_int(numeric, 1)
        self.reset()

    @property
    def length(self) -> int:
        return self._length

    @property
    def params(self) -> tuple[Any, ...]:
        return (self._length,)

    def reset(self) -> None:
        self._prices: deque[Any] = deque()

    def _update_value(self, value: Any) -> Any:
        prices = self._prices
        prices.append(value)
        if len(prices) <= 2:
            return self._one

        first = prices[0]
        volatility = self._zero
        prev = first
        for price in islice(prices, 1, None):
            volatility = volatility + abs(prev - price)
            prev = price
        direction = abs(first - value)

        if len(prices) > self._length:
            prices.popleft()

        if volatility == self._zero:
            return self._one
        return direction / volatility


class RateOfChange(Indicator[Any]):
    """Percent change against the input ``length`` periods back."""

    name = "ROC"
    defaults = (9,)

    def __init__(self, length: int, *, numeric: NumericType = float) -> None:
        super().__init__(numeric=numeric)
        self._length = check_length("ROC length", length)
        self._zero = from_int(numeric, 0)
        self._hundred = from_int(numeric, 100)
        self.reset()

    @property
    def length(self) -> int:
        return self._length

    @property
    def params(self) -> tuple[Any, ...]:
        return (self._length,)

    def reset(self) -> None:
        self._prices: deque[Any] = deque()

    def _update_value(self, value: Any) -> Any:
        prices = self._prices
        prices.append(value)
        if len(prices) == 1:
            return self._zero

        if len(prices) > self._length:
            anchor = prices.popleft()
        else:
            anchor = prices[0]

        if anchor == self._zero:
            return self._zero
        return (value - anchor) / anchor * self._hundred
