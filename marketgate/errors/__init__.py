"""
Errors — closed taxonomy for failed exchanges.

    from marketgate import errors as X

    err = X.classify(429, None, {"Retry-After": "45"})
    match err.kind:
        case X.ErrorKind.RATE_LIMITED:
            show_countdown(err.retry_after_seconds)
"""

from __future__ import annotations

from marketgate.errors._types import (
    ErrorKind,
    TRANSIENT_KINDS,
    TERMINAL_KINDS,
    ApiError,
    ApiErrors,
)
from marketgate.errors._classify import (
    DEFAULT_RETRY_AFTER_SECONDS,
    parse_retry_after,
    classify,
    classify_transport,
    timed_out,
)

__all__ = (
    "ErrorKind",
    "TRANSIENT_KINDS",
    "TERMINAL_KINDS",
    "ApiError",
    "ApiErrors",
    "DEFAULT_RETRY_AFTER_SECONDS",
    "parse_retry_after",
    "classify",
    "classify_transport",
    "timed_out",
)
