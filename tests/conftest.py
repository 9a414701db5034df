"""
Shared fixtures: a controllable clock and a recording fake of the TecDoc endpoint.
"""

import json
from typing import Any, Callable, Dict, List

import httpx
import pytest

from agents.tecdoc.cache import ResponseCache
from agents.tecdoc.client import TecDocClient


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingHandler:
    """httpx.MockTransport handler that remembers every request it answered."""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response]):
        self.respond = respond
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)

    @property
    def bodies(self) -> List[Dict[str, Any]]:
        return [json.loads(request.content) for request in self.requests]


def ok(payload: Dict[str, Any]) -> Callable[[httpx.Request], httpx.Response]:
    return lambda request: httpx.Response(200, json=payload)


def no_network(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected upstream call: {request.content!r}")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> ResponseCache:
    return ResponseCache(ttl_seconds=3600, max_entries=16, clock=clock)


@pytest.fixture
def make_client(cache):
    """Builds a TecDocClient whose HTTP traffic goes to the given handler."""

    def _make(handler: Callable[[httpx.Request], httpx.Response], **kwargs: Any) -> TecDocClient:
        kwargs.setdefault("cache", cache)
        kwargs.setdefault("mock_license_plates", False)
        return TecDocClient(
            api_key="test-key",
            provider_id=123,
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
            **kwargs,
        )

    return _make
