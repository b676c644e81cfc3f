"""Tests for the label registry and IndicatorPanel."""

from __future__ import annotations

from dataclasses import FrozenInstanceError
from decimal import Decimal

import pytest

from tastream.errors import InvalidParameterError
from tastream.indicators import (
    BollingerBands,
    ExponentialMovingAverage,
    IndicatorPanel,
    MacdOutput,
    OnBalanceVolume,
    SimpleMovingAverage,
)
from tastream.indicators.registry import INDICATORS, available_indicators, create_indicator
from tests.factories import make_bar


class TestCreateIndicator:
    """Parse labels into configured indicators."""

    @pytest.mark.parametrize(
        ("label", "expected"),
        [
            ("EMA(9)", "EMA(9)"),
            ("ema( 9 )", "EMA(9)"),
            ("  sma(4)  ", "SMA(4)"),
            ("MACD(12, 26, 9)", "MACD(12, 26, 9)"),
            ("bb(20,2.5)", "BB(20, 2.5)"),
            ("BB(10, 3.0)", "BB(10, 3)"),
            ("HA()", "HA()"),
            ("TRUE_RANGE()", "TRUE_RANGE()"),
            ("OBV", "OBV"),
            ("rsi_smma(7)", "RSI_SMMA(7)"),
            ("ICHIMOKU(2, 4, 8)", "ICHIMOKU(2, 4, 8)"),
        ],
    )
    def test_parses_label(self, label: str, expected: str) -> None:
        assert create_indicator(label).label == expected

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("SMA", "SMA(9)"),
            ("SLOW_STOCH", "SLOW_STOCH(14, 3)"),
            ("MACD", "MACD(12, 26, 9)"),
            ("BB", "BB(9, 2)"),
            ("ICHIMOKU", "ICHIMOKU(9, 26, 52)"),
        ],
    )
    def test_bare_name_builds_default(self, name: str, expected: str) -> None:
        assert create_indicator(name).label == expected

    @pytest.mark.parametrize(
        "label",
        [
            "NOPE(3)",
            "EMA(",
            "EMA(x)",
            "EMA()",
            "EMA(1, 2)",
            "SMA(0)",
            "BB(9, -2)",
            "BB(9, nan)",
            "",
            "9",
        ],
    )
    def test_rejects_bad_label(self, label: str) -> None:
        with pytest.raises(InvalidParameterError):
            create_indicator(label)

    def test_round_trips_every_default(self) -> None:
        for cls in INDICATORS.values():
            indicator = cls.default()
            assert create_indicator(str(indicator)).label == indicator.label

    def test_numeric_is_forwarded(self) -> None:
        bb = create_indicator("BB(3, 2.5)", numeric=Decimal)
        assert isinstance(bb, BollingerBands)
        assert bb.multiplier == Decimal("2.5")
        assert bb.numeric is Decimal

    def test_available_indicators_sorted(self) -> None:
        names = available_indicators()
        assert names == sorted(names)
        assert "RSI_SMMA" in names
        assert len(names) == 19


class TestIndicatorPanel:
    """Several indicators stepped over one stream."""

    def test_rejects_duplicate_labels(self) -> None:
        with pytest.raises(InvalidParameterError, match="Duplicate"):
            IndicatorPanel([SimpleMovingAverage(3), SimpleMovingAverage(3)])

    def test_rejects_empty(self) -> None:
        with pytest.raises(InvalidParameterError):
            IndicatorPanel([])

    def test_process_keys_outputs_by_label(self) -> None:
        panel = IndicatorPanel([SimpleMovingAverage(2), ExponentialMovingAverage(3)])
        panel.process(2.0)
        snapshot = panel.process(5.0)
        assert snapshot.bar_count == 2
        assert list(snapshot.values) == ["SMA(2)", "EMA(3)"]
        assert snapshot.values["SMA(2)"] == pytest.approx(3.5)
        assert snapshot.values["EMA(3)"] == pytest.approx(3.5)

    def test_snapshot_is_read_only(self) -> None:
        snapshot = IndicatorPanel([SimpleMovingAverage(2)]).process(1.0)
        with pytest.raises(FrozenInstanceError):
            snapshot.bar_count = 7  # type: ignore[misc]
        with pytest.raises(TypeError):
            snapshot.values["SMA(2)"] = 0.0  # type: ignore[index]

    def test_bars_reach_every_indicator(self) -> None:
        panel = IndicatorPanel.from_labels(["OBV", "MACD(3, 6, 4)"])
        snapshot = panel.process(make_bar(close=2.0, high=2.0, low=2.0, volume=100.0))
        assert snapshot.values["OBV"] == 100.0
        assert isinstance(snapshot.values["MACD(3, 6, 4)"], MacdOutput)

    def test_reset(self) -> None:
        panel = IndicatorPanel([SimpleMovingAverage(3), OnBalanceVolume()])
        bars = [make_bar(close=c, volume=10.0) for c in (1.0, 2.0, 3.0)]
        first = [dict(panel.process(b).values) for b in bars]
        panel.reset()
        assert panel.bar_count == 0
        assert [dict(panel.process(b).values) for b in bars] == first

    def test_lookup_by_label(self) -> None:
        panel = IndicatorPanel.from_labels(["SMA(3)", "ema(5)"])
        assert panel.labels == ("SMA(3)", "EMA(5)")
        assert len(panel) == 2
        assert isinstance(panel["EMA(5)"], ExponentialMovingAverage)
