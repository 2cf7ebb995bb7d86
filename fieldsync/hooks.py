"""
Public hook types for observing dispatch attempts.

Hooks are called once per attempt, so a retried call produces several
request/response (or request/error) pairs. Header values passed to hooks are
already redacted.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TypeAlias


@dataclass(frozen=True, slots=True)
class RequestInfo:
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    attempt: int = 1


@dataclass(frozen=True, slots=True)
class ResponseInfo:
    status_code: int
    elapsed_ms: float
    request: RequestInfo
    content_length: int = 0


@dataclass(frozen=True, slots=True)
class ErrorInfo:
    error: BaseException
    elapsed_ms: float
    request: RequestInfo


RequestHook: TypeAlias = Callable[[RequestInfo], None]
ResponseHook: TypeAlias = Callable[[ResponseInfo], None]
ErrorHook: TypeAlias = Callable[[ErrorInfo], None]


@dataclass(frozen=True, slots=True)
class Hooks:
    """Optional callbacks bundled for `ClientConfig`."""

    on_request: RequestHook | None = None
    on_response: ResponseHook | None = None
    on_error: ErrorHook | None = None


__all__ = [
    "ErrorHook",
    "ErrorInfo",
    "Hooks",
    "RequestHook",
    "RequestInfo",
    "ResponseHook",
    "ResponseInfo",
]
