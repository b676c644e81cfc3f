"""Volume-based indicators."""

from __future__ import annotations

from typing import Any

from tastream.indicators.base import Indicator
from tastream.numeric import NumericType, from_int
from tastream.types import HasCloseVolume, read_field


class OnBalanceVolume(Indicator[Any]):
    """Cumulative volume, signed by the direction of the close.

    Volume is added on an up close and subtracted on a down close; an
    unchanged close leaves the total alone. The previous close starts at
    zero, so the first bar with a positive close adds its volume.
    Bar-only: a bare number raises TypeError.
    """

    name = "OBV"
    capability = HasCloseVolume

    def __init__(self, *, numeric: NumericType = float) -> None:
        super().__init__(numeric=numeric)
        self._zero = from_int(numeric, 0)
        self.reset()

    @property
    def label(self) -> str:
        return self.name

    def reset(self) -> None:
        self._obv = self._zero
        self._prev_close = self._zero

    def _update_bar(self, bar: HasCloseVolume[Any]) -> Any:
        close = read_field(bar, "close")
        volume = read_field(bar, "volume")

        if close > self._prev_close:
            self._obv = self._obv + volume
        elif close < self._prev_close:
            self._obv = self._obv - volume

        self._prev_close = close
        return self._obv
