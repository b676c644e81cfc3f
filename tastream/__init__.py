"""tastream: streaming technical-analysis indicators for float or Decimal series."""

from tastream.errors import (
    DataItemError,
    DataItemIncompleteError,
    DataItemInvalidError,
    InvalidParameterError,
    TaError,
)
from tastream.types import DataItem

__all__ = [
    "DataItem",
    "DataItemError",
    "DataItemIncompleteError",
    "DataItemInvalidError",
    "InvalidParameterError",
    "TaError",
]
