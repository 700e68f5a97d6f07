"""Generic sink – flushes batches of metrics as JSON to a configured endpoint."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Sequence

import httpx

from ..config import GenericSinkConfig
from ..samplers.base import InterMetric
from ..samplers.tags import parse_tag_slice_to_map
from ..transport import post_helper
from .base import MetricSink

if TYPE_CHECKING:
    from opentelemetry.context import Context
    from opentelemetry.trace import Tracer

logger = logging.getLogger(__name__)


@dataclass
class GenericMetric:
    """A single metric in the collector's format."""

    metric: str
    value: float
    source: str
    at: float
    tags: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "metric": self.metric,
            "value": self.value,
            "source": self.source,
            "at": self.at,
            "tags": dict(self.tags),
        }


@dataclass
class GenericMetrics:
    """A batch of metrics with their common environment and namespace."""

    metrics: list[GenericMetric]
    environment: str
    namespace: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "metrics": [m.to_dict() for m in self.metrics],
            "environment": self.environment,
            "namespace": self.namespace,
        }


@dataclass(frozen=True)
class BatchResult:
    """Outcome of delivering one batch."""

    metrics: int
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def convert(metrics: Sequence[InterMetric], config: GenericSinkConfig) -> GenericMetrics:
    """Convert internal samples to the collector's batch format.

    Server tags from *config* are applied after each sample's own tags, so
    they win on key collisions. Neither argument is modified.
    """
    gen_metrics = [
        GenericMetric(
            metric=m.name,
            value=m.value,
            source=config.source,
            at=float(m.timestamp),
            tags=parse_tag_slice_to_map([*m.tags, *config.tags]),
        )
        for m in metrics
    ]
    return GenericMetrics(
        metrics=gen_metrics,
        environment=config.environment,
        namespace=config.namespace,
    )


class GenericMetricSink(MetricSink):
    """Posts metrics to an HTTP collector in batches of ``config.batch_size``.

    A failed batch is logged and skipped; the remaining batches are still
    sent and :meth:`flush` does not raise. Use :meth:`flush_batches` to see
    per-batch outcomes.
    """

    def __init__(
        self,
        config: GenericSinkConfig,
        http_client: httpx.Client,
        log: logging.Logger | None = None,
    ) -> None:
        self._config = config
        self._http_client = http_client
        self._log = log or logger
        self._tracer: Tracer | None = None

    @classmethod
    def new(
        cls,
        log: logging.Logger | None,
        http_client: httpx.Client,
        tags: Sequence[str],
        endpoint: str,
        batch_size: int,
        source: str,
        environment: str,
        namespace: str,
    ) -> GenericMetricSink:
        """Build a sink from individual settings.

        Raises :class:`~generic_sink.config.ConfigError` for an invalid
        endpoint, a batch size below 1 or
        server tags that are not a list of strings.
        """
        config = GenericSinkConfig(
            endpoint=endpoint,
            batch_size=batch_size,
            tags=tags,
            source=source,
            environment=environment,
            namespace=namespace,
        )
        return cls(config, http_client, log)

    @property
    def config(self) -> GenericSinkConfig:
        return self._config

    def name(self) -> str:
        return "generic"

    def start(self, tracer: Tracer | None) -> None:
        self._tracer = tracer

    def flush(self, metrics: Sequence[InterMetric], context: Context | None = None) -> None:
        self.flush_batches(metrics, context)

    def flush_batches(
        self, metrics: Sequence[InterMetric], context: Context | None = None
    ) -> list[BatchResult]:
        """Flush *metrics* and return one result per batch, in send order."""
        batch_size = self._config.batch_size
        results: list[BatchResult] = []
        for start in range(0, len(metrics), batch_size):
            batch = metrics[start:start + batch_size]
            results.append(self._flush_batch(batch, context))
        return results

    def _flush_batch(self, metrics: Sequence[InterMetric], context: Context | None) -> BatchResult:
        try:
            gen_metrics = convert(metrics, self._config)
            post_helper(
                context,
                self._http_client,
                self._tracer,
                "POST",
                self._config.endpoint,
                gen_metrics,
                "flush_metrics",
                False,
                None,
                self._log,
            )
        except Exception as exc:
            self._log.warning(
                "Error flushing generic metrics",
                exc_info=exc,
                extra={"metrics": len(metrics), "error": str(exc)},
            )
            return BatchResult(metrics=len(metrics), error=exc)

        self._log.info("Completed flushing generic metrics", extra={"metrics": len(metrics)})
        return BatchResult(metrics=len(metrics))

    def flush_other_samples(self, samples: Sequence[Any], context: Context | None = None) -> None:
        """Does nothing; this sink only supports metrics."""
