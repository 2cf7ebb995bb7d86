from __future__ import annotations

from typing import Any

from ..exceptions import (
    ErrorKind,
    FieldSyncError,
    HTTPStatusError,
    UnauthorizedError,
    user_message,
)


class CLIError(Exception):
    def __init__(
        self,
        message: str,
        *,
        exit_code: int = 1,
        error_type: str = "error",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code
        self.error_type = error_type
        self.details = details

    def __str__(self) -> str:  # pragma: no cover
        return self.message

    @classmethod
    def usage(cls, message: str, **details: Any) -> CLIError:
        return cls(message, exit_code=2, error_type="usage_error", details=details or None)


def exit_code_for_exception(exc: BaseException) -> int:
    if isinstance(exc, CLIError):
        return exc.exit_code
    if isinstance(exc, UnauthorizedError):
        return 3
    if isinstance(exc, HTTPStatusError) and exc.status_code == 404:
        return 4
    if isinstance(exc, FieldSyncError) and exc.kind in (
        ErrorKind.RATE_LIMITED,
        ErrorKind.SERVER_ERROR,
        ErrorKind.NETWORK_ERROR,
    ):
        return 5
    return 1


def error_details(exc: BaseException) -> tuple[str, str, dict[str, Any] | None]:
    """`(error_type, message, details)` for rendering a failed command."""
    if isinstance(exc, CLIError):
        return exc.error_type, exc.message, exc.details
    if isinstance(exc, FieldSyncError):
        details: dict[str, Any] = {"kind": exc.kind.value}
        if exc.status_code is not None:
            details["statusCode"] = exc.status_code
        if exc.attempts:
            details["attempts"] = exc.attempts
        return exc.kind.value, user_message(exc), details
    return "internal_error", str(exc) or type(exc).__name__, None


__all__ = ["CLIError", "error_details", "exit_code_for_exception"]
