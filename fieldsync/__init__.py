"""
fieldsync: async client for a field-service app's cloud object store.

Builds, paces, retries, decodes and paginates calls to the backend's `obj/` and
`wf/` endpoints.

Example:
    ```python
    from fieldsync import AsyncFieldSync, C

    async with AsyncFieldSync(api_token="...") as client:
        open_items = await client.inventory_items.all(
            C.field("company").equals(company_id) & C.field("quantity").less_than(5)
        )
    ```
"""

from __future__ import annotations

from ._version import __version__
from .client import AsyncFieldSync
from .clients.http import AsyncHTTPClient, ClientConfig
from .clients.pipeline import RequestDescriptor
from .clients.ratelimit import RateLimiter
from .clients.retry import RetryPolicy
from .constraints import C, Constraint, Constraints, ConstraintType, parse, serialize
from .decoding import ResponseDecoder
from .exceptions import (
    DecodingError,
    ErrorKind,
    FieldSyncError,
    HTTPStatusError,
    InvalidResponseError,
    InvalidURLError,
    NetworkError,
    RateLimitError,
    ServerError,
    UnauthorizedError,
    user_message,
)
from .hooks import ErrorInfo, Hooks, RequestInfo, ResponseInfo
from .models.types import EntityType, SortOrder
from .pagination import PageCursor, fetch_all, iter_pages

__all__ = [
    "__version__",
    "AsyncFieldSync",
    "AsyncHTTPClient",
    "ClientConfig",
    "RequestDescriptor",
    "RateLimiter",
    "RetryPolicy",
    "ResponseDecoder",
    # Constraints
    "C",
    "Constraint",
    "Constraints",
    "ConstraintType",
    "parse",
    "serialize",
    # Pagination
    "PageCursor",
    "fetch_all",
    "iter_pages",
    # Types
    "EntityType",
    "SortOrder",
    # Hooks
    "Hooks",
    "RequestInfo",
    "ResponseInfo",
    "ErrorInfo",
    # Exceptions
    "ErrorKind",
    "FieldSyncError",
    "DecodingError",
    "HTTPStatusError",
    "InvalidResponseError",
    "InvalidURLError",
    "NetworkError",
    "RateLimitError",
    "ServerError",
    "UnauthorizedError",
    "user_message",
]
