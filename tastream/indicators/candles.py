"""Heikin-Ashi candle transform."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from tastream.indicators.base import Indicator
from tastream.numeric import NumericType, from_int
from tastream.types import HasOhlc, read_field

T = TypeVar("T")


class HeikinAshiColor(str, Enum):
    GREEN = "green"
    RED = "red"


@dataclass(frozen=True)
class HeikinAshiCandle(Generic[T]):
    """One smoothed candle."""

    open: T
    close: T
    high: T
    low: T
    color: HeikinAshiColor


class HeikinAshi(Indicator[HeikinAshiCandle[Any]]):
    """Turn raw bars into Heikin-Ashi candles.

    open  = (previous HA open + previous HA close) / 2, the raw close
            for the very first candle
    close = (open + close + high + low) / 4 of the raw bar
    high  = max(raw high, HA open, HA close)
    low   = min(raw low, HA open, HA close)

    A candle is GREEN when its open is below its close, RED otherwise.
    Bar-only: a bare number raises TypeError.
    """

    name = "HA"
    capability = HasOhlc

    def __init__(self, *, numeric: NumericType = float) -> None:
        super().__init__(numeric=numeric)
        self._two = from_int(numeric, 2)
        self._four = from_int(numeric, 4)
        self.reset()

    def reset(self) -> None:
        self._prev: tuple[Any, Any] | None = None

    def _update_bar(self, bar: HasOhlc[Any]) -> HeikinAshiCandle[Any]:
        open_ = read_field(bar, "open")
        high = read_field(bar, "high")
        low = read_field(bar, "low")
        close = read_field(bar, "close")

        if self._prev is None:
            ha_open = close
        else:
            prev_open, prev_close = self._prev
            ha_open = (prev_open + prev_close) / self._two
        ha_close = (open_ + close + high + low) / self._four
        self._prev = (ha_open, ha_close)

        return HeikinAshiCandle(
            open=ha_open,
            close=ha_close,
            high=max(high, ha_open, ha_close),
            low=min(low, ha_open, ha_close),
            color=HeikinAshiColor.GREEN if ha_open < ha_close else HeikinAshiColor.RED,
        )
