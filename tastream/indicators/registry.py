"""Build indicators from their text labels.

A label is the indicator name, optionally followed by parenthesised
parameters: ``EMA(9)``, ``bb(20, 2.5)``, ``OBV``. Names are matched
case-insensitively. A bare name builds the indicator with its defaults.
"""

from __future__ import annotations

import re
from typing import Any

from tastream.errors import InvalidParameterError
from tastream.indicators.base import Indicator
from tastream.indicators.candles import HeikinAshi
from tastream.indicators.extremum import Maximum, Minimum
from tastream.indicators.ichimoku import Ichimoku
from tastream.indicators.momentum import (
    EfficiencyRatio,
    FastStochastic,
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
from tastream.indicators.volatility import (
    AverageTrueRange,
    BollingerBands,
    StandardDeviation,
    TrueRange,
)
from tastream.indicators.volume import OnBalanceVolume
from tastream.numeric import NumericType, coerce

INDICATORS: dict[str, type[Indicator[Any]]] = {
    cls.name: cls
    for cls in (
        SimpleMovingAverage,
        ExponentialMovingAverage,
        SmoothedMovingAverage,
        StandardDeviation,
        Minimum,
        Maximum,
        RelativeStrengthIndex,
        RelativeStrengthIndexSmma,
        FastStochastic,
        SlowStochastic,
        TrueRange,
        AverageTrueRange,
        MovingAverageConvergenceDivergence,
        EfficiencyRatio,
        RateOfChange,
        BollingerBands,
        OnBalanceVolume,
        HeikinAshi,
        Ichimoku,
    )
}

_LABEL_RE = re.compile(r"^\s*([A-Za-z_]+)\s*(?:\((.*)\))?\s*$")
_INT_RE = re.compile(r"^[+-]?\d+$")


def available_indicators() -> list[str]:
    """Registered indicator names, sorted."""
    return sorted(INDICATORS)


def _parse_param(text: str, numeric: NumericType) -> Any:
    text = text.strip()
    if _INT_RE.match(text):
        return int(text)
    try:
        return coerce(numeric, text)
    except (ValueError, ArithmeticError) as e:
        raise InvalidParameterError(f"Invalid indicator parameter: {text!r}") from e


def create_indicator(label: str, numeric: NumericType = float) -> Indicator[Any]:
    """Parse ``label`` and build the matching indicator.

    Raises InvalidParameterError for unknown names, malformed labels, a
    wrong number of parameters, or parameters the indicator rejects.
    """
    match = _LABEL_RE.match(label)
    if match is None:
        raise InvalidParameterError(f"Malformed indicator label: {label!r}")

    name, args = match.groups()
    cls = INDICATORS.get(name.upper())
    if cls is None:
        raise InvalidParameterError(
            f"Unknown indicator {name!r}; expected one of {available_indicators()}"
        )

    if args is None:
        return cls.default(numeric=numeric)

    params = [_parse_param(a, numeric) for a in args.split(",")] if args.strip() else []
    try:
        return cls(*params, numeric=numeric)
    except TypeError as e:
        raise InvalidParameterError(
            f"{cls.name} does not take {len(params)} parameter(s): {label!r}"
        ) from e
