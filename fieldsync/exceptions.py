"""
Classified errors raised by the sync client.

Every failure that crosses the client boundary is one of a small, fixed set of
kinds (`ErrorKind`). Callers branch on the exception type or `kind`; the UI
layer turns them into short messages with `user_message()`. Raw backend bodies
and decoder diagnostics stay on the exception for logging only.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    INVALID_URL = "invalid_url"
    INVALID_RESPONSE = "invalid_response"
    DECODING_FAILED = "decoding_failed"
    UNAUTHORIZED = "unauthorized"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    NETWORK_ERROR = "network_error"
    HTTP_ERROR = "http_error"


class DecodeFailureReason(str, Enum):
    """Why a body could not be decoded (diagnostics only)."""

    EMPTY_BODY = "empty_body"
    CORRUPTED = "corrupted"
    MISSING_KEY = "missing_key"
    TYPE_MISMATCH = "type_mismatch"


class FieldSyncError(Exception):
    """Base class for all classified sync-client errors."""

    kind: ErrorKind = ErrorKind.HTTP_ERROR

    def __init__(
        self,
        message: str | None = None,
        *,
        status_code: int | None = None,
        url: str | None = None,
        attempts: int = 0,
    ) -> None:
        self.message = message or self.kind.value.replace("_", " ")
        super().__init__(self.message)
        self.status_code = status_code
        self.url = url
        self.attempts = attempts

    def __repr__(self) -> str:
        parts = [f"kind={self.kind.value!r}"]
        if self.status_code is not None:
            parts.append(f"status_code={self.status_code}")
        if self.attempts:
            parts.append(f"attempts={self.attempts}")
        return f"{type(self).__name__}({', '.join(parts)})"


class InvalidURLError(FieldSyncError):
    """The request URL could not be built or is not dispatchable."""

    kind = ErrorKind.INVALID_URL


class InvalidResponseError(FieldSyncError):
    """The transport produced something that is not a usable HTTP response."""

    kind = ErrorKind.INVALID_RESPONSE


class DecodingError(FieldSyncError):
    """
    A 2xx body could not be decoded into the requested type.

    `reason`, `path` and `details` describe the failure for developer logs.
    They are intentionally left out of `str(error)`.
    """

    kind = ErrorKind.DECODING_FAILED

    def __init__(
        self,
        message: str | None = None,
        *,
        reason: DecodeFailureReason = DecodeFailureReason.CORRUPTED,
        path: str | None = None,
        details: list[dict[str, Any]] | None = None,
        status_code: int | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message or "decoding failed", status_code=status_code, url=url)
        self.reason = reason
        self.path = path
        self.details = details or []

    def diagnostics(self) -> str:
        where = f" at {self.path}" if self.path else ""
        return f"{self.reason.value}{where}"


class UnauthorizedError(FieldSyncError):
    """401/403, or a call needing credentials when none are configured."""

    kind = ErrorKind.UNAUTHORIZED


class RateLimitError(FieldSyncError):
    """429 persisted after every retry."""

    kind = ErrorKind.RATE_LIMITED


class ServerError(FieldSyncError):
    """5xx persisted after every retry."""

    kind = ErrorKind.SERVER_ERROR


class NetworkError(FieldSyncError):
    """Connectivity failure persisted after every retry."""

    kind = ErrorKind.NETWORK_ERROR


class HTTPStatusError(FieldSyncError):
    """Any other non-2xx status."""

    kind = ErrorKind.HTTP_ERROR

    def __init__(self, status_code: int, *, url: str | None = None, attempts: int = 0) -> None:
        super().__init__(
            f"unexpected HTTP status {status_code}",
            status_code=status_code,
            url=url,
            attempts=attempts,
        )


_USER_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.INVALID_URL: "Something went wrong. The app will keep working offline.",
    ErrorKind.INVALID_RESPONSE: "The server sent an unexpected reply. Try again shortly.",
    ErrorKind.DECODING_FAILED: "Some data could not be read. The app will keep working offline.",
    ErrorKind.UNAUTHORIZED: "Your session has expired. Please sign in again.",
    ErrorKind.RATE_LIMITED: "The server is busy. Try again in a moment.",
    ErrorKind.SERVER_ERROR: "The server is having trouble. Your changes will sync later.",
    ErrorKind.NETWORK_ERROR: "Network issue. Try again when you have better reception.",
    ErrorKind.HTTP_ERROR: "The request could not be completed.",
}


def user_message(error: BaseException) -> str:
    """Short, non-technical message for an error, safe to show a field worker."""
    if isinstance(error, FieldSyncError):
        return _USER_MESSAGES[error.kind]
    return "Something went wrong. The app will keep working offline."


__all__ = [
    "DecodeFailureReason",
    "DecodingError",
    "ErrorKind",
    "FieldSyncError",
    "HTTPStatusError",
    "InvalidResponseError",
    "InvalidURLError",
    "NetworkError",
    "RateLimitError",
    "ServerError",
    "UnauthorizedError",
    "user_message",
]
