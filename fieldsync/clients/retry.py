"""
Failure classification and retry policy.

Transient failures (429, 5xx, connectivity) are retried a bounded number of
times with a fixed delay per class. Everything else is terminal. The request
executor drives retries with an explicit loop over a `RetryState`; nothing here
recurses or sleeps by itself.

httpx exceptions are classified as follows::

    httpx.TimeoutException        -> network error   (retry)
    httpx.NetworkError            -> network error   (retry)
    httpx.RemoteProtocolError     -> network error   (retry)
    httpx.InvalidURL              -> invalid URL     (terminal)
    httpx.UnsupportedProtocol     -> invalid URL     (terminal)
    any other httpx.HTTPError     -> invalid response (terminal)
    asyncio.CancelledError        -> never caught, never retried
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

import httpx

from ..exceptions import (
    ErrorKind,
    FieldSyncError,
    HTTPStatusError,
    InvalidResponseError,
    InvalidURLError,
    NetworkError,
    RateLimitError,
    ServerError,
    UnauthorizedError,
)
from .pipeline import RequestDescriptor


class Outcome(str, Enum):
    """Classification of one dispatch attempt."""

    SUCCESS = "success"
    UNAUTHORIZED = "unauthorized"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    NETWORK_ERROR = "network_error"
    CANCELLED = "cancelled"
    HTTP_ERROR = "http_error"
    DECODING_FAILED = "decoding_failed"


def classify_status(status_code: int) -> Outcome:
    if 200 <= status_code < 300:
        return Outcome.SUCCESS
    if status_code in (401, 403):
        return Outcome.UNAUTHORIZED
    if status_code == 429:
        return Outcome.RATE_LIMITED
    if 500 <= status_code < 600:
        return Outcome.SERVER_ERROR
    return Outcome.HTTP_ERROR


def error_for_status(status_code: int, *, url: str | None = None) -> FieldSyncError:
    """Classified error for a non-2xx status."""
    outcome = classify_status(status_code)
    if outcome is Outcome.SUCCESS:
        raise ValueError(f"status {status_code} is not an error")
    if outcome is Outcome.UNAUTHORIZED:
        return UnauthorizedError(status_code=status_code, url=url)
    if outcome is Outcome.RATE_LIMITED:
        return RateLimitError(status_code=status_code, url=url)
    if outcome is Outcome.SERVER_ERROR:
        return ServerError(f"server error {status_code}", status_code=status_code, url=url)
    return HTTPStatusError(status_code, url=url)


def error_for_transport(exc: httpx.HTTPError, *, url: str | None = None) -> FieldSyncError:
    """Classified error for an httpx transport exception."""
    if isinstance(exc, (httpx.TimeoutException, httpx.NetworkError, httpx.RemoteProtocolError)):
        return NetworkError(f"network error: {type(exc).__name__}", url=url)
    if isinstance(exc, (httpx.InvalidURL, httpx.UnsupportedProtocol)):
        return InvalidURLError(f"invalid URL: {type(exc).__name__}", url=url)
    return InvalidResponseError(f"invalid response: {type(exc).__name__}", url=url)


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """
    Which error kinds are retried, how often and after what delay.

    `max_retries` counts extra attempts: the default of 2 means at most three
    dispatches per logical call.
    """

    max_retries: int = 2
    rate_limited_delay: float = 1.0
    server_error_delay: float = 2.0
    network_error_delay: float = 2.0

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")

    def delay_for(self, error: FieldSyncError) -> float | None:
        """Delay before retrying `error`, or None when it is terminal."""
        if error.kind is ErrorKind.RATE_LIMITED:
            return self.rate_limited_delay
        if error.kind is ErrorKind.SERVER_ERROR:
            return self.server_error_delay
        if error.kind is ErrorKind.NETWORK_ERROR:
            return self.network_error_delay
        return None


@dataclass(slots=True)
class RetryState:
    """Attempt bookkeeping for one logical call."""

    descriptor: RequestDescriptor
    max_retries: int
    attempts: int = 0
    delays: list[float] = field(default_factory=list)

    @property
    def remaining(self) -> int:
        return max(0, self.max_retries + 1 - self.attempts)

    @property
    def exhausted(self) -> bool:
        return self.remaining == 0


__all__ = [
    "Outcome",
    "RetryPolicy",
    "RetryState",
    "classify_status",
    "error_for_status",
    "error_for_transport",
]
