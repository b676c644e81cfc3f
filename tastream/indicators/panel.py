"""Run several indicators side by side over one stream.

The panel feeds each input to every indicator in registration order
and collects the outputs under each indicator's label.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

import structlog

from tastream.errors import InvalidParameterError
from tastream.indicators.base import Indicator
from tastream.indicators.registry import create_indicator
from tastream.numeric import NumericType

log = structlog.get_logger()


@dataclass(frozen=True)
class PanelSnapshot:
    """Outputs of every indicator for one input, keyed by label."""

    values: Mapping[str, Any] = field(default_factory=dict)
    bar_count: int = 0


class IndicatorPanel:
    """Owns a set of uniquely-labelled indicators fed from the same stream."""

    def __init__(self, indicators: Iterable[Indicator[Any]]) -> None:
        self._indicators: dict[str, Indicator[Any]] = {}
        for indicator in indicators:
            label = indicator.label
            if label in self._indicators:
                raise InvalidParameterError(f"Duplicate indicator label: {label}")
            self._indicators[label] = indicator
        if not self._indicators:
            raise InvalidParameterError("IndicatorPanel needs at least one indicator")
        self._bar_count = 0

    @classmethod
    def from_labels(
        cls,
        labels: Iterable[str],
        numeric: NumericType = float,
    ) -> IndicatorPanel:
        return cls(create_indicator(label, numeric=numeric) for label in labels)

    @property
    def labels(self) -> tuple[str, ...]:
        return tuple(self._indicators)

    @property
    def bar_count(self) -> int:
        return self._bar_count

    def __len__(self) -> int:
        return len(self._indicators)

    def __getitem__(self, label: str) -> Indicator[Any]:
        return self._indicators[label]

    def process(self, item: Any) -> PanelSnapshot:
        """Feed one input to every indicator."""
        values = {label: ind.update(item) for label, ind in self._indicators.items()}
        self._bar_count += 1
        return PanelSnapshot(values=MappingProxyType(values), bar_count=self._bar_count)

    def reset(self) -> None:
        for label, indicator in self._indicators.items():
            indicator.reset()
            log.debug("indicator_reset", indicator=label)
        self._bar_count = 0
