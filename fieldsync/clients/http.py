"""
HTTP client implementation for the object-store backend.

Handles:
- URL building against the `obj/` and `wf/` API surfaces
- Bearer authentication from a static token or an async token provider
- Client-side pacing through a shared `RateLimiter`
- Bounded retries for 429, 5xx and connectivity failures
- Decoding of enveloped or bare JSON bodies
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import re
import time
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel
from pydantic_core import to_jsonable_python

from .._version import __version__
from ..decoding import ResponseDecoder
from ..exceptions import DecodingError, FieldSyncError, InvalidURLError, UnauthorizedError
from ..hooks import Hooks
from ..models.entities import EmptyResponse, Payload
from ..models.types import DEFAULT_BASE_URL, workflow_path
from ..pagination import DEFAULT_PAGE_SIZE
from .pipeline import (
    AsyncPipeline,
    ObservabilityMiddleware,
    Param,
    RateLimitMiddleware,
    RequestDescriptor,
    SDKRequest,
    SDKResponse,
    compose_async,
)
from .ratelimit import DEFAULT_MIN_INTERVAL, Clock, RateLimiter, Sleep
from .retry import (
    Outcome,
    RetryPolicy,
    RetryState,
    classify_status,
    error_for_status,
    error_for_transport,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

TokenProvider = Callable[[], Awaitable[str | None]]

DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_CONNECTIONS = 5
DEFAULT_CONNECT_RETRIES = 3
DEFAULT_USER_AGENT = f"fieldsync/{__version__}"

ENV_PREFIX = "FIELDSYNC_"

_DUPLICATE_SLASHES = re.compile(r"/{2,}")


def _maybe_load_dotenv(
    *,
    load_dotenv: bool,
    dotenv_path: str | os.PathLike[str] | None = None,
    override: bool = False,
) -> bool:
    """Load a `.env` file when asked to; requires python-dotenv."""
    if not load_dotenv:
        return False
    try:
        import dotenv  # pyright: ignore[reportMissingImports]
    except ImportError as e:
        raise ImportError(
            "Optional .env support requires python-dotenv; install `fieldsync[dotenv]`."
        ) from e
    path = Path(dotenv_path) if dotenv_path is not None else None
    return bool(dotenv.load_dotenv(dotenv_path=path, override=override))


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """
    Client configuration.

    Tests inject `transport` (usually `httpx.MockTransport`) plus a fake
    `clock`/`sleep` pair to run without a network or real delays.
    """

    base_url: str = DEFAULT_BASE_URL
    api_token: str | None = None
    token_provider: TokenProvider | None = None
    timeout: float = DEFAULT_TIMEOUT
    connect_retries: int = DEFAULT_CONNECT_RETRIES
    max_connections: int = DEFAULT_MAX_CONNECTIONS
    min_request_interval: float = DEFAULT_MIN_INTERVAL
    max_retries: int = 2
    rate_limited_delay: float = 1.0
    server_error_delay: float = 2.0
    network_error_delay: float = 2.0
    user_agent: str = DEFAULT_USER_AGENT
    page_size: int = DEFAULT_PAGE_SIZE
    hooks: Hooks = field(default_factory=Hooks)
    transport: httpx.AsyncBaseTransport | None = None
    clock: Clock = time.monotonic
    sleep: Sleep = asyncio.sleep

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ValueError("timeout must be > 0")
        if self.max_connections <= 0:
            raise ValueError("max_connections must be > 0")
        if self.page_size <= 0:
            raise ValueError("page_size must be > 0")

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_retries=self.max_retries,
            rate_limited_delay=self.rate_limited_delay,
            server_error_delay=self.server_error_delay,
            network_error_delay=self.network_error_delay,
        )

    def with_overrides(self, **changes: Any) -> ClientConfig:
        return replace(self, **changes)

    @classmethod
    def from_env(
        cls,
        *,
        load_dotenv: bool = False,
        dotenv_path: str | os.PathLike[str] | None = None,
        environ: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> ClientConfig:
        """
        Build a config from `FIELDSYNC_*` environment variables.

        Recognized: `FIELDSYNC_BASE_URL`, `FIELDSYNC_API_TOKEN`,
        `FIELDSYNC_TIMEOUT`, `FIELDSYNC_MAX_RETRIES`,
        `FIELDSYNC_MIN_REQUEST_INTERVAL`, `FIELDSYNC_PAGE_SIZE`. Explicit keyword
        overrides win over the environment.
        """
        _maybe_load_dotenv(load_dotenv=load_dotenv, dotenv_path=dotenv_path)
        env = os.environ if environ is None else environ

        def _get(name: str) -> str | None:
            value = env.get(ENV_PREFIX + name, "").strip()
            return value or None

        values: dict[str, Any] = {}
        if (base_url := _get("BASE_URL")) is not None:
            values["base_url"] = base_url
        if (token := _get("API_TOKEN")) is not None:
            values["api_token"] = token
        numeric: Sequence[tuple[str, str, Callable[[str], Any]]] = (
            ("TIMEOUT", "timeout", float),
            ("MAX_RETRIES", "max_retries", int),
            ("MIN_REQUEST_INTERVAL", "min_request_interval", float),
            ("PAGE_SIZE", "page_size", int),
        )
        for env_name, attr, convert in numeric:
            raw = _get(env_name)
            if raw is None:
                continue
            try:
                values[attr] = convert(raw)
            except ValueError as e:
                raise ValueError(f"Invalid {ENV_PREFIX}{env_name}: {raw!r}") from e
        values.update(overrides)
        return cls(**values)


# =============================================================================
# Helpers
# =============================================================================


def encode_body(body: Any) -> bytes | None:
    """JSON-encode a request body; payload models use backend field names."""
    if body is None:
        return None
    if isinstance(body, bytes):
        return body
    if isinstance(body, Payload):
        data: Any = body.to_body()
    elif isinstance(body, BaseModel):
        data = body.model_dump(mode="json", by_alias=True, exclude_none=True)
    else:
        data = to_jsonable_python(body)
    return json.dumps(data, separators=(",", ":")).encode("utf-8")


def build_url(base_url: str, path: str, params: Sequence[Param] = ()) -> str:
    """
    Join base URL and path, collapsing duplicate slashes, and append the query.

    Raises:
        InvalidURLError: If the result is not an absolute http(s) URL.
    """
    base = base_url.strip().rstrip("/")
    rel = _DUPLICATE_SLASHES.sub("/", path.strip()).lstrip("/")
    raw = f"{base}/{rel}" if rel else base
    try:
        url = httpx.URL(raw, params=list(params)) if params else httpx.URL(raw)
    except (httpx.InvalidURL, TypeError, ValueError) as e:
        raise InvalidURLError(f"invalid URL: {raw!r}", url=raw) from e
    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidURLError(f"invalid URL: {raw!r}", url=raw)
    return str(url)


# =============================================================================
# Async client
# =============================================================================


class AsyncHTTPClient:
    """
    Request executor.

    One instance owns the httpx connection pool, the rate limiter and the retry
    policy; every repository shares it.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        rate_limiter: RateLimiter | None = None,
        decoder: ResponseDecoder | None = None,
    ):
        self._config = config
        self._policy = config.retry_policy
        self._rate_limiter = rate_limiter or RateLimiter(
            config.min_request_interval,
            clock=config.clock,
            sleep=config.sleep,
        )
        self._decoder = decoder or ResponseDecoder()
        transport = config.transport or httpx.AsyncHTTPTransport(
            retries=config.connect_retries,
            limits=httpx.Limits(
                max_connections=config.max_connections,
                max_keepalive_connections=config.max_connections,
            ),
        )
        self._client = httpx.AsyncClient(
            transport=transport,
            timeout=httpx.Timeout(config.timeout),
            follow_redirects=False,
        )
        self._pipeline: AsyncPipeline = compose_async(
            [ObservabilityMiddleware(config.hooks), RateLimitMiddleware(self._rate_limiter)],
            self._send,
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def rate_limiter(self) -> RateLimiter:
        return self._rate_limiter

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._policy

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> AsyncHTTPClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Core execution
    # -------------------------------------------------------------------------

    async def execute(self, descriptor: RequestDescriptor, result_type: Any = EmptyResponse) -> Any:
        """
        Run one logical call: pace, dispatch, retry transient failures, decode.

        Returns:
            The decoded body as `result_type`.

        Raises:
            FieldSyncError: The classified failure, once terminal or exhausted.
            asyncio.CancelledError: Propagated unchanged; never retried.
        """
        url = build_url(self._config.base_url, descriptor.path, descriptor.params)
        headers = await self._headers_for(descriptor)
        state = RetryState(descriptor=descriptor, max_retries=self._policy.max_retries)

        while True:
            state.attempts += 1
            request = SDKRequest(
                method=descriptor.method,
                url=url,
                headers=list(headers),
                content=descriptor.body,
            )
            request.context["attempt"] = state.attempts
            request.context["requires_auth"] = descriptor.requires_auth

            cause: BaseException | None = None
            try:
                response = await self._pipeline(request)
            except httpx.HTTPError as e:
                error: FieldSyncError = error_for_transport(e, url=url)
                cause = e
            else:
                if classify_status(response.status_code) is Outcome.SUCCESS:
                    return self._decode(response, result_type, url=url)
                error = error_for_status(response.status_code, url=url)
            error.attempts = state.attempts

            delay = self._policy.delay_for(error)
            if delay is None:
                raise error from cause
            if state.exhausted:
                logger.warning(
                    "%s %s failed after %d attempts: %s",
                    descriptor.method,
                    descriptor.path,
                    state.attempts,
                    error.kind.value,
                )
                raise error from cause

            logger.warning(
                "%s %s attempt %d failed (%s); retrying in %.1fs (%d left)",
                descriptor.method,
                descriptor.path,
                state.attempts,
                error.kind.value,
                delay,
                state.remaining,
            )
            state.delays.append(delay)
            await self._config.sleep(delay)

    def _decode(self, response: SDKResponse, result_type: Any, *, url: str) -> Any:
        try:
            return self._decoder.decode(
                response.content, result_type, status_code=response.status_code
            )
        except DecodingError as e:
            e.url = url
            e.status_code = response.status_code
            raise

    async def _headers_for(self, descriptor: RequestDescriptor) -> list[tuple[str, str]]:
        headers = [
            ("Accept", "application/json"),
            ("User-Agent", self._config.user_agent),
        ]
        if descriptor.method != "GET":
            headers.append(("Content-Type", "application/json"))
        if descriptor.requires_auth:
            token = await self._resolve_token()
            if not token:
                raise UnauthorizedError("no credentials configured")
            headers.append(("Authorization", f"Bearer {token}"))
        return headers

    async def _resolve_token(self) -> str | None:
        if self._config.api_token:
            return self._config.api_token
        if self._config.token_provider is not None:
            return await self._config.token_provider()
        return None

    async def _send(self, req: SDKRequest) -> SDKResponse:
        response = await self._client.request(
            req.method,
            req.url,
            headers=req.headers,
            content=req.content,
        )
        return SDKResponse(
            status_code=response.status_code,
            headers=list(response.headers.multi_items()),
            content=response.content,
        )

    # -------------------------------------------------------------------------
    # Convenience verbs
    # -------------------------------------------------------------------------

    async def get(
        self,
        path: str,
        result_type: Any,
        *,
        params: Mapping[str, Any] | Sequence[Param] | None = None,
        requires_auth: bool = True,
    ) -> Any:
        descriptor = RequestDescriptor.build(
            path, "GET", params=params, requires_auth=requires_auth
        )
        return await self.execute(descriptor, result_type)

    async def post(
        self,
        path: str,
        body: Any = None,
        result_type: Any = EmptyResponse,
        *,
        requires_auth: bool = True,
    ) -> Any:
        descriptor = RequestDescriptor.build(
            path, "POST", body=encode_body(body), requires_auth=requires_auth
        )
        return await self.execute(descriptor, result_type)

    async def patch(
        self,
        path: str,
        body: Any,
        result_type: Any = EmptyResponse,
        *,
        requires_auth: bool = True,
    ) -> Any:
        descriptor = RequestDescriptor.build(
            path, "PATCH", body=encode_body(body), requires_auth=requires_auth
        )
        return await self.execute(descriptor, result_type)

    async def delete(
        self,
        path: str,
        result_type: Any = EmptyResponse,
        *,
        requires_auth: bool = True,
    ) -> Any:
        descriptor = RequestDescriptor.build(path, "DELETE", requires_auth=requires_auth)
        return await self.execute(descriptor, result_type)

    async def workflow(
        self,
        name: str,
        params: Mapping[str, Any] | None = None,
        result_type: Any = dict[str, Any],
        *,
        requires_auth: bool = True,
    ) -> Any:
        """POST `wf/<name>` with `params` as the JSON body."""
        return await self.post(
            workflow_path(name), dict(params or {}), result_type, requires_auth=requires_auth
        )


__all__ = [
    "AsyncHTTPClient",
    "ClientConfig",
    "DEFAULT_CONNECT_RETRIES",
    "DEFAULT_MAX_CONNECTIONS",
    "DEFAULT_TIMEOUT",
    "DEFAULT_USER_AGENT",
    "TokenProvider",
    "build_url",
    "encode_body",
]
