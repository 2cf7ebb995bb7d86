from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx
import pytest

from fieldsync.clients.http import AsyncHTTPClient, ClientConfig

BASE_URL = "https://api.example/api/1.1"


class FakeClock:
    """Monotonic clock whose `sleep` records the delay and advances time instantly."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_http(clock: FakeClock) -> Callable[..., AsyncHTTPClient]:
    """Factory for an `AsyncHTTPClient` over `httpx.MockTransport`, no real waits."""

    def _make(handler: Callable[[httpx.Request], Any], **overrides: Any) -> AsyncHTTPClient:
        values: dict[str, Any] = {
            "base_url": BASE_URL,
            "api_token": "tok",
            "min_request_interval": 0.0,
            "transport": httpx.MockTransport(handler),
            "clock": clock,
            "sleep": clock.sleep,
        }
        values.update(overrides)
        return AsyncHTTPClient(ClientConfig(**values))

    return _make
