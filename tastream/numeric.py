"""Numeric capability shared by every indicator.

Indicators are generic over the stream's number type. float and Decimal
are supported. Every constant an indicator needs is converted into the
stream type, so a Decimal stream never mixes with float arithmetic.
"""

from __future__ import annotations

import math
import numbers
from collections.abc import Callable
from decimal import Decimal
from typing import Any, Protocol, Self, TypeVar

import structlog

log = structlog.get_logger()

# Heron iterations per square root. Fixed, not a convergence test.
SQRT_ITERATIONS = 32

NumericType = Callable[[Any], Any]

NUMERIC_TYPES: dict[str, NumericType] = {
    "float": float,
    "decimal": Decimal,
}


class Real(Protocol):
    """Operations an indicator relies on: field arithmetic, sign, ordering."""

    def __add__(self, other: Self, /) -> Self: ...

    def __sub__(self, other: Self, /) -> Self: ...

    def __mul__(self, other: Self, /) -> Self: ...

    def __truediv__(self, other: Self, /) -> Self: ...

    def __neg__(self) -> Self: ...

    def __abs__(self) -> Self: ...

    def __lt__(self, other: Self, /) -> bool: ...

    def __le__(self, other: Self, /) -> bool: ...

    def __gt__(self, other: Self, /) -> bool: ...

    def __ge__(self, other: Self, /) -> bool: ...


T = TypeVar("T", bound=Real)


def from_int(numeric: NumericType, value: int) -> Any:
    """Convert an integer constant into the stream type."""
    return numeric(value)


def from_float(numeric: NumericType, value: float) -> Any:
    """Convert a float constant into the stream type.

    Non-float types receive the shortest decimal literal (``str(value)``)
    instead of the binary expansion, e.g. Decimal("0.1") for 0.1.
    """
    if numeric is float:
        return value
    return numeric(str(value))


def coerce(numeric: NumericType, value: Any) -> Any:
    """Convert a str, int, float or Decimal into the stream type.

    Raises ValueError for NaN (quiet or signaling) and infinities.
    """
    if isinstance(value, float):
        result = from_float(numeric, value)
    elif isinstance(value, str):
        result = numeric(value.strip())
    else:
        result = numeric(value)
    if not is_finite(result):
        raise ValueError(f"not a finite number: {value!r}")
    return result


def is_finite(value: Any) -> bool:
    if isinstance(value, Decimal):
        return value.is_finite()
    return math.isfinite(value)


def resolve_numeric(name: str) -> NumericType:
    """Look up a numeric type by its configuration name."""
    try:
        return NUMERIC_TYPES[name.lower()]
    except KeyError:
        raise ValueError(
            f"numeric must be one of {sorted(NUMERIC_TYPES)}, got {name}"
        ) from None


def is_number(item: object) -> bool:
    """True for bare scalars (float, int, Decimal), False for bar records."""
    return isinstance(item, numbers.Number)


def sqrt(value: T, numeric: NumericType = float) -> T:
    """Square root by a fixed number of Heron (Newton-Raphson) steps.

    x[n+1] = 1/2 * (x[n] + value / x[n]), seeded with value itself.
    A zero seed short-circuits to zero.
    """
    zero = from_int(numeric, 0)
    half = from_int(numeric, 1) / from_int(numeric, 2)
    root = value
    for _ in range(SQRT_ITERATIONS):
        if root == zero:
            log.debug("sqrt_zero_seed", value=str(value))
            return zero  # type: ignore[no-any-return]
        root = half * (root + value / root)
    return root


def max3(a: T, b: T, c: T) -> T:
    """Largest of three values, compared pairwise left to right."""
    first = a if a > b else b
    return first if first > c else c


def format_number(value: object) -> str:
    """Render a parameter for an indicator label.

    Integral values print without a fractional part (3.0 -> "3").
    """
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    if isinstance(value, Decimal):
        if value.is_finite() and value == value.to_integral_value():
            return str(int(value))
        return str(value.normalize())
    return str(value)
