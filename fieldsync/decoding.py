"""
Response decoding.

The backend answers in one of two shapes: enveloped (`{"response": <payload>}`)
or bare (`<payload>`). Mutations may also answer 204 or an empty body. The
decoder turns any of these into a validated value of the caller's target type,
or raises `DecodingError`.

Decoding order is fixed:

1. 204 / blank body  -> `EmptyResponse()` if that is the target, else failure.
2. Envelope attempt  -> only when the body is an object with a `response` key.
3. Raw attempt       -> when the envelope attempt did not apply, or when it
                        failed on an ambiguous body (see `_is_definite_envelope`).

A definite envelope that fails validation is a decoding failure. It is never
retried as a bare body, because models with all-default fields would accept
the wrapper and silently drop its contents.

Incoming keys are normalized to snake_case before validation (`_id` -> `id`,
`"Start Date"` -> `start_date`, `emailAddress` -> `email_address`).
"""

from __future__ import annotations

import json
import logging
import re
from functools import lru_cache
from typing import Any, TypeVar, cast

from pydantic import TypeAdapter, ValidationError

from .exceptions import DecodeFailureReason, DecodingError
from .models.entities import EmptyResponse

logger = logging.getLogger(__name__)

T = TypeVar("T")

ENVELOPE_KEY = "response"

_SEPARATORS = re.compile(r"[\s\-]+")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_REPEATED_UNDERSCORE = re.compile(r"_+")


@lru_cache(maxsize=1024)
def normalize_key(key: str) -> str:
    """
    Convert a backend field name to its Python identifier.

    >>> normalize_key("Start Date")
    'start_date'
    >>> normalize_key("_id")
    'id'
    >>> normalize_key("projectID")
    'project_id'
    """
    text = key.strip()
    if text == "_id":
        return "id"
    text = _SEPARATORS.sub("_", text)
    text = _ACRONYM_BOUNDARY.sub(r"\1_\2", text)
    text = _CAMEL_BOUNDARY.sub(r"\1_\2", text)
    text = _REPEATED_UNDERSCORE.sub("_", text).strip("_")
    return text.lower()


def normalize_keys(value: Any) -> Any:
    """Recursively normalize every object key in a decoded JSON value."""
    if isinstance(value, dict):
        return {normalize_key(str(k)): normalize_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [normalize_keys(v) for v in value]
    return value


@lru_cache(maxsize=256)
def _adapter(result_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(result_type)


def _type_name(result_type: Any) -> str:
    return getattr(result_type, "__name__", None) or repr(result_type)


def _format_loc(loc: tuple[Any, ...]) -> str:
    path = "$"
    for part in loc:
        path += f"[{part}]" if isinstance(part, int) else f".{part}"
    return path


def _error_from_validation(
    exc: ValidationError, *, prefix: str, result_type: Any
) -> DecodingError:
    errors = exc.errors(include_url=False, include_input=False)
    first = errors[0] if errors else {}
    reason = (
        DecodeFailureReason.MISSING_KEY
        if first.get("type") == "missing"
        else DecodeFailureReason.TYPE_MISMATCH
    )
    loc = tuple(first.get("loc", ()))
    return DecodingError(
        f"could not decode {_type_name(result_type)}",
        reason=reason,
        path=prefix + _format_loc(loc)[1:],
        details=[dict(e) for e in errors],
    )


def _declares_envelope_field(result_type: Any) -> bool:
    fields = getattr(result_type, "model_fields", None)
    return isinstance(fields, dict) and ENVELOPE_KEY in fields


def _is_definite_envelope(data: dict[str, Any], result_type: Any) -> bool:
    """
    True when a `response`-keyed object can only be an envelope.

    It is ambiguous when the target itself has a `response` field, or when
    `response` is a scalar sitting next to other keys (a bare payload that
    happens to carry such a field).
    """
    if _declares_envelope_field(result_type):
        return False
    return len(data) == 1 or isinstance(data[ENVELOPE_KEY], (dict, list))


class ResponseDecoder:
    """Stateless decoder; one instance is shared by a client."""

    def decode(
        self,
        content: bytes,
        result_type: type[T] | Any,
        *,
        status_code: int = 200,
    ) -> T:
        """
        Decode a 2xx body into `result_type`.

        Raises:
            DecodingError: With `reason`/`path`/`details` for diagnostics.
        """
        if status_code == 204 or not content.strip():
            if result_type is EmptyResponse:
                return cast(T, EmptyResponse())
            raise DecodingError(
                f"empty body where {_type_name(result_type)} was expected",
                reason=DecodeFailureReason.EMPTY_BODY,
                status_code=status_code,
            )

        try:
            data = json.loads(content)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DecodingError(
                "body is not valid JSON",
                reason=DecodeFailureReason.CORRUPTED,
                status_code=status_code,
            ) from e

        return self.decode_value(normalize_keys(data), result_type)

    def decode_value(self, data: Any, result_type: type[T] | Any) -> T:
        """Decode an already-parsed, key-normalized JSON value."""
        adapter = _adapter(result_type)
        envelope_error: ValidationError | None = None

        if isinstance(data, dict) and ENVELOPE_KEY in data:
            try:
                return cast(T, adapter.validate_python(data[ENVELOPE_KEY]))
            except ValidationError as e:
                if _is_definite_envelope(data, result_type):
                    raise self._failure(e, "$.response", result_type) from e
                envelope_error = e

        try:
            return cast(T, adapter.validate_python(data))
        except ValidationError as e:
            # Report the envelope attempt when it applied.
            if envelope_error is not None:
                raise self._failure(envelope_error, "$.response", result_type) from e
            raise self._failure(e, "$", result_type) from e

    def _failure(self, exc: ValidationError, prefix: str, result_type: Any) -> DecodingError:
        error = _error_from_validation(exc, prefix=prefix, result_type=result_type)
        logger.warning(
            "Decoding %s failed: %s (%d validation errors)",
            _type_name(result_type),
            error.diagnostics(),
            len(error.details),
        )
        return error


__all__ = ["ENVELOPE_KEY", "ResponseDecoder", "normalize_key", "normalize_keys"]
