"""
Shared fixtures: fake clock for the rate gate, mock transport clients.
"""

import json

import httpx
import pytest

from gcal_mcp.api import client as client_module
from gcal_mcp.api.client import GoogleCalendarClient


class FakeClock:
    """Monotonic clock that only moves when sleep() is awaited."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class MockAPI:
    """
    Records requests and answers them from a queue of responses.

    The last queued response is repeated once the queue runs dry.
    """

    def __init__(self, *responses: httpx.Response):
        self.responses = list(responses) or [httpx.Response(200, json={})]
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if len(self.responses) > 1:
            response = self.responses.pop(0)
        else:
            response = self.responses[0]
        # Fresh copy, a response object is bound to one request
        return httpx.Response(
            response.status_code, headers=response.headers, content=response.content
        )

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_client(clock):
    """Build a client talking to a handler, with the fake clock injected."""

    def factory(handler, **kwargs) -> GoogleCalendarClient:
        kwargs.setdefault("clock", clock)
        kwargs.setdefault("sleep", clock.sleep)
        return GoogleCalendarClient(
            "test-token", transport=httpx.MockTransport(handler), **kwargs
        )

    return factory


@pytest.fixture
def use_client(monkeypatch):
    """Install a client as the process-wide instance used by the tools."""

    def install(client):
        monkeypatch.setattr(client_module, "_client", client)
        return client

    yield install


@pytest.fixture
def mock_api():
    """Factory for MockAPI handlers."""
    return MockAPI
