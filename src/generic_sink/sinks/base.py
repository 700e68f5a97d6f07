"""Base interface for metric sinks."""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Any, Sequence

from ..samplers.base import InterMetric

if TYPE_CHECKING:
    from opentelemetry.context import Context
    from opentelemetry.trace import Tracer


class MetricSink(abc.ABC):
    """Abstract base for sinks that receive flushed metric samples."""

    @abc.abstractmethod
    def name(self) -> str:
        """Identifier used in configuration and logs."""

    @abc.abstractmethod
    def start(self, tracer: Tracer | None) -> None:
        """Attach the tracer used for outgoing requests."""

    @abc.abstractmethod
    def flush(self, metrics: Sequence[InterMetric], context: Context | None = None) -> None:
        """Deliver a set of aggregated metrics."""

    @abc.abstractmethod
    def flush_other_samples(self, samples: Sequence[Any], context: Context | None = None) -> None:
        """Deliver non-metric samples (spans, events) if the sink supports them."""
