"""Streaming technical-analysis indicators."""

from tastream.indicators.base import Indicator
from tastream.indicators.candles import HeikinAshi, HeikinAshiCandle, HeikinAshiColor
from tastream.indicators.extremum import Maximum, Minimum
from tastream.indicators.ichimoku import Ichimoku, IchimokuOutput, KumoColor
from tastream.indicators.momentum import (
    EfficiencyRatio,
    FastStochastic,
    MacdOutput,
    MovingAverageConvergenceDivergence,
    RateOfChange,
    RelativeStrengthIndex,
    RelativeStrengthIndexSmma,
    SlowStochastic,
)
from tastream.indicators.moving_average import (
    ExponentialMovingAverage,
    SimpleMovingAverage,
    SmoothedMovingAverage,
)
from tastream.indicators.panel import IndicatorPanel, PanelSnapshot
from tastream.indicators.registry import available_indicators, create_indicator
from tastream.indicators.volatility import (
    AverageTrueRange,
    BollingerBands,
    BollingerBandsOutput,
    StandardDeviation,
    TrueRange,
)
from tastream.indicators.volume import OnBalanceVolume

__all__ = [
    "AverageTrueRange",
    "BollingerBands",
    "BollingerBandsOutput",
    "EfficiencyRatio",
    "ExponentialMovingAverage",
    "FastStochastic",
    "HeikinAshi",
    "HeikinAshiCandle",
    "HeikinAshiColor",
    "Ichimoku",
    "IchimokuOutput",
    "Indicator",
    "IndicatorPanel",
    "KumoColor",
    "MacdOutput",
    "Maximum",
    "Minimum",
    "MovingAverageConvergenceDivergence",
    "OnBalanceVolume",
    "PanelSnapshot",
    "RateOfChange",
    "RelativeStrengthIndex",
    "RelativeStrengthIndexSmma",
    "SimpleMovingAverage",
    "SlowStochastic",
    "SmoothedMovingAverage",
    "StandardDeviation",
    "TrueRange",
    "available_indicators",
    "create_indicator",
]
