"""
Classification — map a failed HTTP exchange onto exactly one ApiError.

Pure functions: no I/O, no logging.
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

import httpx

from marketgate.errors._types import ApiError, ApiErrors, ErrorKind

DEFAULT_RETRY_AFTER_SECONDS = 30

_STATUS_KINDS: dict[int, ErrorKind] = {
    401: ErrorKind.AUTH,
    403: ErrorKind.FORBIDDEN,
    404: ErrorKind.NOT_FOUND,
    429: ErrorKind.RATE_LIMITED,
}


# ═══════════════════════════════════════════════════════════════════════════════
# Retry-After
# ═══════════════════════════════════════════════════════════════════════════════


def parse_retry_after(value: str | None, *, now: datetime | None = None) -> int:
    """
    Parse a Retry-After header into whole seconds.

    Accepts delta-seconds ("45") and HTTP-dates. Anything else, including a
    missing header, yields DEFAULT_RETRY_AFTER_SECONDS.
    """
    if value is None:
        return DEFAULT_RETRY_AFTER_SECONDS

    raw = value.strip()
    if raw.isdigit():
        return int(raw)

    try:
        when = parsedate_to_datetime(raw)
    except (TypeError, ValueError, IndexError):
        return DEFAULT_RETRY_AFTER_SECONDS
    if when is None:
        return DEFAULT_RETRY_AFTER_SECONDS

    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    current = now or datetime.now(timezone.utc)
    return max(0, math.ceil((when - current).total_seconds()))


# ═══════════════════════════════════════════════════════════════════════════════
# Body Inspection
# ═══════════════════════════════════════════════════════════════════════════════


def _field_errors(body: Mapping[str, Any]) -> dict[str, tuple[str, ...]]:
    out: dict[str, tuple[str, ...]] = {}
    for key, value in body.items():
        if isinstance(value, list):
            out[key] = tuple(str(v) for v in value)
        else:
            out[key] = (str(value),)
    return out


def _message(status: int, body: Any) -> str:
    if isinstance(body, str) and body.strip():
        return body
    if isinstance(body, Mapping) and body:
        # Explicit structured fields win over a bare field-validation object
        for key in ("error", "detail"):
            if body.get(key):
                return str(body[key])
        first_key = next(iter(body))
        first = body[first_key]
        if isinstance(first, list) and first:
            return f"{first_key}: {first[0]}"
        if isinstance(first, str):
            return f"{first_key}: {first}"
        return json.dumps(body, default=str)
    return f"API error: {status}"


def _is_field_object(body: Any) -> bool:
    return (
        isinstance(body, Mapping)
        and bool(body)
        and not body.get("error")
        and not body.get("detail")
    )


# ═══════════════════════════════════════════════════════════════════════════════
# classify() — HTTP Failure
# ═══════════════════════════════════════════════════════════════════════════════


def classify(
    status: int,
    body: Any = None,
    headers: Mapping[str, str] | None = None,
) -> ApiError:
    """
    Classify a non-2xx response.

    Example:
        classify(429, None, {"Retry-After": "45"})
        # ApiError(kind=RATE_LIMITED, http_status=429, retry_after_seconds=45, ...)
    """
    message = _message(status, body)
    details = body if body not in (None, "", {}) else None

    kind = _STATUS_KINDS.get(status)
    if kind is None:
        if 400 <= status < 500:
            kind = ErrorKind.VALIDATION
        else:
            kind = ErrorKind.SERVER

    match kind:
        case ErrorKind.RATE_LIMITED:
            retry_after = None
            if headers is not None:
                retry_after = _header(headers, "retry-after")
            return ApiError(
                kind,
                status,
                message,
                details,
                retry_after_seconds=parse_retry_after(retry_after),
            )
        case ErrorKind.VALIDATION:
            return ApiError(
                kind,
                status,
                message,
                details,
                field_errors=_field_errors(body) if _is_field_object(body) else None,
            )
        case _:
            return ApiError(kind, status, message, details)


def _header(headers: Mapping[str, str], name: str) -> str | None:
    # httpx.Headers is case-insensitive already; plain dicts are not
    value = headers.get(name)
    if value is not None:
        return value
    for key, candidate in headers.items():
        if key.lower() == name:
            return candidate
    return None


# ═══════════════════════════════════════════════════════════════════════════════
# classify_transport() — No Response
# ═══════════════════════════════════════════════════════════════════════════════


def classify_transport(exc: Exception) -> ApiError:
    """
    Classify an exception raised before any response arrived.

    httpx's own timeouts count as TIMEOUT; everything else is NETWORK.
    """
    if isinstance(exc, httpx.TimeoutException):
        return ApiError(
            ErrorKind.TIMEOUT,
            0,
            "Request timed out",
            {"original_error": repr(exc)},
        )
    return ApiErrors.network(
        "Network error, check the connection",
        {"original_error": repr(exc)},
    )


def timed_out(seconds: float) -> ApiError:
    """TIMEOUT raised by the client-side deadline."""
    return ApiErrors.timeout(seconds)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "DEFAULT_RETRY_AFTER_SECONDS",
    "parse_retry_after",
    "classify",
    "classify_transport",
    "timed_out",
)
