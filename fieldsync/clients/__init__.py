"""
HTTP client layer: executor, pacing, retries and the middleware pipeline.
"""

from __future__ import annotations

from .http import AsyncHTTPClient, ClientConfig, build_url, encode_body
from .pipeline import RequestDescriptor
from .ratelimit import RateLimiter
from .retry import RetryPolicy, RetryState

__all__ = [
    "AsyncHTTPClient",
    "ClientConfig",
    "RateLimiter",
    "RequestDescriptor",
    "RetryPolicy",
    "RetryState",
    "build_url",
    "encode_body",
]
