"""Internal metric sample produced by the upstream aggregation pipeline."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any


class MetricType(str, enum.Enum):
    """Kind of an aggregated sample. Sinks carry it through unchanged."""

    COUNTER = "counter"
    GAUGE = "gauge"
    HISTOGRAM = "histogram"
    SET = "set"
    TIMER = "timer"
    STATUS = "status"


@dataclass(frozen=True)
class InterMetric:
    """A single aggregated metric observation, ready to be flushed."""

    name: str
    timestamp: int
    value: float
    tags: tuple[str, ...] = field(default_factory=tuple)
    type: MetricType = MetricType.GAUGE

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "timestamp": self.timestamp,
            "value": self.value,
            "tags": list(self.tags),
            "type": self.type.value,
        }
