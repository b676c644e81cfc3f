"""Tests for numeric helpers, bar access and DataItem."""

from __future__ import annotations

import math
from collections import namedtuple
from dataclasses import FrozenInstanceError
from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from tastream.errors import (
    DataItemError,
    DataItemIncompleteError,
    DataItemInvalidError,
    TaError,
)
from tastream.numeric import (
    coerce,
    format_number,
    from_float,
    from_int,
    is_finite,
    is_number,
    max3,
    resolve_numeric,
    sqrt,
)
from tastream.types import (
    DataItem,
    HasClose,
    HasCloseVolume,
    HasHighLowClose,
    HasOhlc,
    HasVolume,
    missing_fields,
    read_field,
)
from tests.factories import CloseOnly, make_bar


class TestConversions:
    """Constants enter the stream type without binary noise."""

    def test_from_int(self) -> None:
        assert from_int(Decimal, 100) == Decimal(100)
        assert from_int(float, 2) == 2.0

    def test_from_float_uses_literal_for_decimal(self) -> None:
        assert from_float(Decimal, 0.1) == Decimal("0.1")
        assert from_float(Decimal, 1e-9) == Decimal("1e-9")

    def test_from_float_passthrough(self) -> None:
        assert from_float(float, 0.1) == 0.1

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(" 1.25 ", Decimal("1.25")), (3, Decimal(3)), (0.1, Decimal("0.1"))],
    )
    def test_coerce_decimal(self, raw: object, expected: Decimal) -> None:
        assert coerce(Decimal, raw) == expected

    def test_resolve_numeric(self) -> None:
        assert resolve_numeric("Decimal") is Decimal
        assert resolve_numeric("float") is float
        with pytest.raises(ValueError, match="numeric"):
            resolve_numeric("fraction")

    @pytest.mark.parametrize("item", [1, 1.5, Decimal("2")])
    def test_numbers_are_numbers(self, item: object) -> None:
        assert is_number(item)

    @pytest.mark.parametrize("item", [make_bar(), "1.5", None])
    def test_non_numbers(self, item: object) -> None:
        assert not is_number(item)


class TestSqrt:
    """Fixed-iteration Heron square root."""

    def test_zero(self) -> None:
        assert sqrt(0.0) == 0.0

    @pytest.mark.parametrize("value", [1.0, 2.0, 25.0, 1e-4, 12345.678])
    def test_float(self, value: float) -> None:
        assert sqrt(value) == pytest.approx(math.sqrt(value), rel=1e-12)

    def test_decimal(self) -> None:
        assert sqrt(Decimal(2), Decimal) == pytest.approx(Decimal(2).sqrt())

    @given(st.floats(min_value=1e-6, max_value=1e9))
    def test_matches_math_sqrt(self, value: float) -> None:
        assert sqrt(value) == pytest.approx(math.sqrt(value), rel=1e-9)


class TestMax3:
    def test_picks_largest(self) -> None:
        assert max3(1.0, 3.0, 2.0) == 3.0
        assert max3(3.0, 1.0, 2.0) == 3.0
        assert max3(1.0, 2.0, 3.0) == 3.0


class TestFormatNumber:
    @pytest.mark.parametrize(
        ("value", "text"),
        [
            (3, "3"),
            (3.0, "3"),
            (2.5, "2.5"),
            (Decimal("3.00"), "3"),
            (Decimal("2.50"), "2.5"),
        ],
    )
    def test_format(self, value: object, text: str) -> None:
        assert format_number(value) == text


class TestReadField:
    """Capability access on arbitrary records."""

    def test_reads_attribute(self) -> None:
        assert read_field(CloseOnly(4.0), "close") == 4.0

    def test_namedtuple_bar(self) -> None:
        Candle = namedtuple("Candle", "open high low close volume")
        assert read_field(Candle(1, 2, 0, 1.5, 10), "high") == 2

    def test_missing_field_names_it(self) -> None:
        with pytest.raises(TypeError, match="CloseOnly does not expose 'volume'"):
            read_field(CloseOnly(4.0), "volume")

    def test_protocols_are_runtime_checkable(self) -> None:
        assert isinstance(CloseOnly(1.0), HasClose)
        assert not isinstance(CloseOnly(1.0), HasVolume)


class TestDataItem:
    """Validated OHLCV bar."""

    def test_valid_bar(self) -> None:
        item = DataItem(open=2.0, high=3.0, low=1.0, close=2.5, volume=100.0)
        assert item.close == 2.5

    def test_is_frozen(self) -> None:
        item = DataItem(open=2.0, high=3.0, low=1.0, close=2.5, volume=100.0)
        with pytest.raises(FrozenInstanceError):
            item.close = 9.0  # type: ignore[misc]

    @pytest.mark.parametrize(
        "fields",
        [
            {"open": 0.5, "high": 3.0, "low": 1.0, "close": 2.0, "volume": 1.0},
            {"open": 2.0, "high": 3.0, "low": 1.0, "close": 0.5, "volume": 1.0},
            {"open": 4.0, "high": 3.0, "low": 1.0, "close": 2.0, "volume": 1.0},
            {"open": 2.0, "high": 3.0, "low": 1.0, "close": 4.0, "volume": 1.0},
            {"open": 2.0, "high": 3.0, "low": 1.0, "close": 2.0, "volume": -1.0},
            {"open": -1.0, "high": 3.0, "low": -2.0, "close": 2.0, "volume": 1.0},
        ],
    )
    def test_rejects_inconsistent_bar(self, fields: dict[str, float]) -> None:
        with pytest.raises(DataItemInvalidError):
            DataItem(**fields)

    def test_from_mapping(self) -> None:
        row = {"open": "2", "high": "3", "low": "1", "close": "2.5", "volume": "100"}
        item = DataItem.from_mapping(row, numeric=Decimal)
        assert item == DataItem(
            open=Decimal(2),
            high=Decimal(3),
            low=Decimal(1),
            close=Decimal("2.5"),
            volume=Decimal(100),
        )

    def test_from_mapping_lists_missing_fields(self) -> None:
        with pytest.raises(DataItemIncompleteError) as excinfo:
            DataItem.from_mapping({"open": "1", "close": "1", "volume": ""})
        assert excinfo.value.missing == ["high", "low", "volume"]

    def test_from_mapping_rejects_garbage(self) -> None:
        row = {"open": "x", "high": "3", "low": "1", "close": "2", "volume": "1"}
        with pytest.raises(DataItemInvalidError, match="open"):
            DataItem.from_mapping(row)

    def test_error_hierarchy(self) -> None:
        assert issubclass(DataItemIncompleteError, DataItemError)
        assert issubclass(DataItemInvalidError, DataItemError)
        assert issubclass(DataItemError, TaError)
        assert issubclass(DataItemError, ValueError)


class TestNonFinite:
    """NaN and infinities never enter a stream through conversion."""

    @pytest.mark.parametrize("raw", ["nan", "NaN", "sNaN", "inf", "-Infinity"])
    @pytest.mark.parametrize("numeric", [float, Decimal])
    def test_coerce_rejects_text(self, numeric: type, raw: str) -> None:
        with pytest.raises(ValueError):
            coerce(numeric, raw)

    @pytest.mark.parametrize("raw", [math.nan, math.inf])
    def test_coerce_rejects_float_values(self, raw: float) -> None:
        with pytest.raises(ValueError):
            coerce(float, raw)
        with pytest.raises(ValueError):
            coerce(Decimal, raw)

    def test_is_finite(self) -> None:
        assert is_finite(1.5)
        assert is_finite(Decimal("2"))
        assert not is_finite(Decimal("sNaN"))
        assert not is_finite(math.inf)

    @pytest.mark.parametrize("numeric", [float, Decimal])
    def test_from_mapping_rejects_nan(self, numeric: type) -> None:
        row = {"open": "nan", "high": "3", "low": "1", "close": "2", "volume": "1"}
        with pytest.raises(DataItemInvalidError, match="open"):
            DataItem.from_mapping(row, numeric=numeric)

    def test_direct_decimal_nan_is_a_data_item_error(self) -> None:
        with pytest.raises(DataItemInvalidError, match="close"):
            DataItem(
                open=Decimal(2),
                high=Decimal(3),
                low=Decimal(1),
                close=Decimal("NaN"),
                volume=Decimal(1),
            )


class TestCapabilities:
    """Composed protocols and the missing-field report."""

    def test_full_bar_satisfies_every_protocol(self) -> None:
        bar = make_bar()
        for protocol in (HasHighLowClose, HasCloseVolume, HasOhlc):
            assert isinstance(bar, protocol)

    def test_close_only_satisfies_none(self) -> None:
        for protocol in (HasHighLowClose, HasCloseVolume, HasOhlc):
            assert not isinstance(CloseOnly(1.0), protocol)

    def test_missing_fields(self) -> None:
        assert missing_fields(CloseOnly(1.0), HasHighLowClose) == ["high", "low"]
        assert missing_fields(CloseOnly(1.0), HasCloseVolume) == ["volume"]
        assert missing_fields(CloseOnly(1.0), HasClose) == []
        assert missing_fields(make_bar(), HasOhlc) == []
