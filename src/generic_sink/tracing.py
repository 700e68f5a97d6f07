"""OpenTelemetry tracing setup – exports request spans via OTLP/HTTP."""

from __future__ import annotations

import logging
from typing import Any

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from .config import TracingSettings

logger = logging.getLogger(__name__)


def build_tracer(settings: TracingSettings) -> tuple[trace.Tracer | None, TracerProvider | None]:
    """Create a tracer whose spans are exported to ``settings.endpoint``.

    Returns ``(None, None)`` when tracing is disabled. The provider is not
    installed globally; callers own it and must call ``shutdown()`` on it.
    """
    if not settings.enabled:
        return None, None

    resource = Resource.create({SERVICE_NAME: settings.service_name})
    exporter_kwargs: dict[str, Any] = {
        "endpoint": f"{settings.endpoint.rstrip('/')}/v1/traces",
    }
    if settings.headers:
        exporter_kwargs["headers"] = settings.headers

    provider = TracerProvider(resource=resource)
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(**exporter_kwargs)))
    tracer = provider.get_tracer("generic_sink")

    logger.info(
        "Tracing initialized → %s (service=%s)",
        settings.endpoint,
        settings.service_name,
    )
    return tracer, provider
