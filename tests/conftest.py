"""Shared fixtures for generic_sink tests."""

from __future__ import annotations

import json
import zlib

import httpx
import pytest


class RecordingCollector:
    """Fake HTTP collector backed by :class:`httpx.MockTransport`.

    Records the decoded JSON body of every request it receives. Requests
    whose sequence number is listed in *fail_on* get a 500 response.
    """

    def __init__(self, fail_on: set[int] | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self.bodies: list[dict] = []
        self.fail_on = fail_on or set()

    def handler(self, request: httpx.Request) -> httpx.Response:
        seq = len(self.requests)
        self.requests.append(request)
        raw = request.content
        if request.headers.get("Content-Encoding") == "deflate":
            raw = zlib.decompress(raw)
        self.bodies.append(json.loads(raw))
        if seq in self.fail_on:
            return httpx.Response(500, text="collector unavailable")
        return httpx.Response(200)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def collector() -> RecordingCollector:
    return RecordingCollector()


@pytest.fixture
def make_collector():
    """Factory for collectors that fail selected requests."""

    def _make(fail_on: set[int] | None = None) -> RecordingCollector:
        return RecordingCollector(fail_on)

    return _make
