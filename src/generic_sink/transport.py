"""HTTP delivery helper shared by sinks.

:func:`post_helper` serializes a payload to JSON, optionally deflates it, sends
it with the caller's :class:`httpx.Client` and wraps the request in an
OpenTelemetry client span when a tracer is attached. Any failure is reported
as a single :class:`DeliveryError`; retries, pooling and timeouts are the
client's business.
"""

from __future__ import annotations

import json
import logging
import time
import zlib
from typing import Any, Mapping

import httpx
from opentelemetry import trace
from opentelemetry.context import Context

logger = logging.getLogger(__name__)

_MAX_ERROR_BODY = 512


class DeliveryError(Exception):
    """A payload could not be delivered to its endpoint."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _encode(payload: Any, action: str) -> bytes:
    if hasattr(payload, "to_dict"):
        payload = payload.to_dict()
    try:
        # NaN and infinities are not valid JSON
        return json.dumps(payload, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise DeliveryError(f"could not serialize {action} payload: {exc}") from exc


def _send(
    client: httpx.Client,
    method: str,
    endpoint: str,
    body: bytes,
    action: str,
    compress: bool,
    headers: Mapping[str, str] | None,
    log: logging.Logger,
    span: trace.Span | None,
) -> None:
    req_headers = {"Content-Type": "application/json"}
    if compress:
        body = zlib.compress(body)
        req_headers["Content-Encoding"] = "deflate"
    if headers:
        req_headers.update(headers)

    if span is not None:
        span.set_attribute("http.request.body.size", len(body))

    start = time.monotonic()
    try:
        response = client.request(method, endpoint, content=body, headers=req_headers)
    except httpx.HTTPError as exc:
        raise DeliveryError(f"{action}: {method} {endpoint} failed: {exc}") from exc
    elapsed_ms = (time.monotonic() - start) * 1000
    log.debug("%s: %s %s -> %d in %.1f ms", action, method, endpoint, response.status_code, elapsed_ms)

    if span is not None:
        span.set_attribute("http.response.status_code", response.status_code)
    if not response.is_success:
        text = response.text[:_MAX_ERROR_BODY]
        raise DeliveryError(
            f"{action}: {method} {endpoint} returned {response.status_code}: {text}",
            status_code=response.status_code,
        )


def post_helper(
    context: Context | None,
    client: httpx.Client,
    tracer: trace.Tracer | None,
    method: str,
    endpoint: str,
    payload: Any,
    action: str,
    compress: bool = False,
    headers: Mapping[str, str] | None = None,
    log: logging.Logger | None = None,
) -> None:
    """Send *payload* as JSON to *endpoint*.

    Raises :class:`DeliveryError` if the payload cannot be serialized, the
    request fails, or the response status is not 2xx. *context* is used as
    the parent of the request span.
    """
    log = log or logger
    body = _encode(payload, action)

    if tracer is None:
        _send(client, method, endpoint, body, action, compress, headers, log, None)
        return

    with tracer.start_as_current_span(
        f"http.{action}",
        context=context,
        kind=trace.SpanKind.CLIENT,
    ) as span:
        span.set_attribute("http.request.method", method)
        span.set_attribute("url.full", endpoint)
        _send(client, method, endpoint, body, action, compress, headers, log, span)
