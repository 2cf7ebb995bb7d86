"""
Internal request pipeline primitives.

A logical call is described by an immutable `RequestDescriptor`. Each dispatch
attempt is an `SDKRequest` that flows through a chain of middleware (hooks and
logging, then rate limiting) before reaching the httpx transport, so
cross-cutting behavior stays out of the executor's retry loop.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, TypeAlias, TypedDict, cast

from ..hooks import ErrorInfo, Hooks, RequestInfo, ResponseInfo
from .ratelimit import RateLimiter

logger = logging.getLogger(__name__)

Header: TypeAlias = tuple[str, str]
Param: TypeAlias = tuple[str, str]

_REDACTED_HEADERS = frozenset({"authorization", "cookie", "set-cookie"})
MAX_LOGGED_BODY = 1000


@dataclass(frozen=True, slots=True)
class RequestDescriptor:
    """
    Immutable description of one logical backend call.

    `path` is relative to the client's base URL (`obj/project/123`,
    `wf/create_default_inventory_units`). `body` is already-encoded JSON.
    """

    path: str
    method: str = "GET"
    body: bytes | None = None
    params: tuple[Param, ...] = ()
    requires_auth: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())

    @classmethod
    def build(
        cls,
        path: str,
        method: str = "GET",
        *,
        body: bytes | None = None,
        params: Mapping[str, Any] | Sequence[Param] | None = None,
        requires_auth: bool = True,
    ) -> RequestDescriptor:
        """Build a descriptor, dropping `None` params and stringifying the rest."""
        items: list[Param] = []
        if params:
            pairs = params.items() if isinstance(params, Mapping) else params
            for key, value in pairs:
                if value is None:
                    continue
                items.append((str(key), _param_value(value)))
        return cls(
            path=path,
            method=method,
            body=body,
            params=tuple(items),
            requires_auth=requires_auth,
        )


def _param_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(getattr(value, "value", value))


class RequestContext(TypedDict, total=False):
    attempt: int
    requires_auth: bool


class ResponseContext(TypedDict, total=False):
    elapsed_seconds: float


@dataclass(slots=True)
class SDKRequest:
    method: str
    url: str
    headers: list[Header] = field(default_factory=list)
    content: bytes | None = None
    context: RequestContext = field(default_factory=lambda: cast(RequestContext, {}))


@dataclass(slots=True)
class SDKResponse:
    status_code: int
    headers: list[Header]
    content: bytes
    context: ResponseContext = field(default_factory=lambda: cast(ResponseContext, {}))


AsyncPipeline: TypeAlias = Callable[[SDKRequest], Awaitable[SDKResponse]]


class AsyncMiddleware(Protocol):
    async def __call__(self, req: SDKRequest, next: AsyncPipeline) -> SDKResponse: ...


def compose_async(middlewares: Sequence[AsyncMiddleware], terminal: AsyncPipeline) -> AsyncPipeline:
    pipeline = terminal
    for middleware in reversed(middlewares):
        next_pipeline = pipeline

        async def _wrapped(
            req: SDKRequest,
            *,
            _mw: AsyncMiddleware = middleware,
            _n: AsyncPipeline = next_pipeline,
        ) -> SDKResponse:
            return await _mw(req, _n)

        pipeline = _wrapped
    return pipeline


# =============================================================================
# Middleware
# =============================================================================


def redact_headers(headers: Sequence[Header]) -> dict[str, str]:
    """Header dict safe for logs and hooks."""
    redacted: dict[str, str] = {}
    for key, value in headers:
        if key.lower() in _REDACTED_HEADERS:
            scheme = value.split(" ", 1)[0] if " " in value else ""
            value = f"{scheme} [REDACTED]".strip()
        redacted[key] = value
    return redacted


def truncate_body(content: bytes, limit: int = MAX_LOGGED_BODY) -> str:
    text = content.decode("utf-8", errors="replace")
    if len(text) > limit:
        return text[:limit] + f"... ({len(text) - limit} more chars)"
    return text


class ObservabilityMiddleware:
    """Logs every attempt and feeds the configured hooks."""

    def __init__(self, hooks: Hooks | None = None):
        self._hooks = hooks or Hooks()

    async def __call__(self, req: SDKRequest, next: AsyncPipeline) -> SDKResponse:
        info = RequestInfo(
            method=req.method,
            url=req.url,
            headers=redact_headers(req.headers),
            attempt=req.context.get("attempt", 1),
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "-> %s %s (attempt %d) headers=%s body=%s",
                info.method,
                info.url,
                info.attempt,
                info.headers,
                truncate_body(req.content) if req.content else "-",
            )
        if self._hooks.on_request is not None:
            self._hooks.on_request(info)

        started = time.monotonic()
        try:
            resp = await next(req)
        except Exception as e:
            elapsed_ms = (time.monotonic() - started) * 1000
            logger.debug("!! %s %s failed: %s", info.method, info.url, type(e).__name__)
            if self._hooks.on_error is not None:
                self._hooks.on_error(ErrorInfo(error=e, elapsed_ms=elapsed_ms, request=info))
            raise

        elapsed = time.monotonic() - started
        resp.context["elapsed_seconds"] = elapsed
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "<- %d %s %.0fms body=%s",
                resp.status_code,
                info.url,
                elapsed * 1000,
                truncate_body(resp.content),
            )
        if self._hooks.on_response is not None:
            self._hooks.on_response(
                ResponseInfo(
                    status_code=resp.status_code,
                    elapsed_ms=elapsed * 1000,
                    request=info,
                    content_length=len(resp.content),
                )
            )
        return resp


class RateLimitMiddleware:
    """Holds every attempt until the shared limiter grants a slot."""

    def __init__(self, limiter: RateLimiter):
        self._limiter = limiter

    async def __call__(self, req: SDKRequest, next: AsyncPipeline) -> SDKResponse:
        await self._limiter.wait_for_slot()
        try:
            return await next(req)
        finally:
            await self._limiter.record_dispatch()


__all__ = [
    "AsyncMiddleware",
    "AsyncPipeline",
    "MAX_LOGGED_BODY",
    "ObservabilityMiddleware",
    "RateLimitMiddleware",
    "RequestDescriptor",
    "SDKRequest",
    "SDKResponse",
    "compose_async",
    "redact_headers",
    "truncate_body",
]
