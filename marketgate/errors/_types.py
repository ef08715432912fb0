"""
Error types — the closed ApiError taxonomy.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any


# ═══════════════════════════════════════════════════════════════════════════════
# Error Kind — Closed Set
# ═══════════════════════════════════════════════════════════════════════════════


class ErrorKind(Enum):
    """
    Kinds of failed exchanges.

    Recovery per kind:
        AUTH          → refresh / re-login once, then surfaced
        NETWORK       → transient, caller may retry
        TIMEOUT       → transient, caller may retry
        RATE_LIMITED  → surfaced with retry_after_seconds, never auto-retried
        FORBIDDEN, NOT_FOUND, VALIDATION → terminal for that request
        SERVER        → surfaced
    """

    AUTH = auto()  # 401
    FORBIDDEN = auto()  # 403
    NOT_FOUND = auto()  # 404
    RATE_LIMITED = auto()  # 429
    VALIDATION = auto()  # other 4xx, local invariant checks
    NETWORK = auto()  # no response reached the client
    TIMEOUT = auto()  # client-side deadline exceeded
    SERVER = auto()  # 5xx or unclassified


TRANSIENT_KINDS = frozenset({ErrorKind.NETWORK, ErrorKind.TIMEOUT})
TERMINAL_KINDS = frozenset({ErrorKind.FORBIDDEN, ErrorKind.NOT_FOUND, ErrorKind.VALIDATION})


# ═══════════════════════════════════════════════════════════════════════════════
# ApiError — Tagged Value
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ApiError:
    """
    A classified failure.

    http_status is 0 when no response was received (NETWORK, TIMEOUT, local
    validation). retry_after_seconds is set only for RATE_LIMITED;
    field_errors only for bare field-validation bodies.
    """

    kind: ErrorKind
    http_status: int
    message: str
    details: Any = None
    retry_after_seconds: int | None = None
    field_errors: dict[str, tuple[str, ...]] | None = None

    @property
    def is_transient(self) -> bool:
        return self.kind in TRANSIENT_KINDS

    @property
    def is_terminal(self) -> bool:
        return self.kind in TERMINAL_KINDS

    @property
    def is_auth(self) -> bool:
        return self.kind is ErrorKind.AUTH

    def __str__(self) -> str:
        return f"{self.kind.name}({self.http_status}): {self.message}"


# ═══════════════════════════════════════════════════════════════════════════════
# Constructors
# ═══════════════════════════════════════════════════════════════════════════════


class ApiErrors:
    @staticmethod
    def auth(message: str, status: int = 401, details: Any = None) -> ApiError:
        return ApiError(ErrorKind.AUTH, status, message, details)

    @staticmethod
    def validation(
        message: str,
        status: int = 0,
        field_errors: dict[str, tuple[str, ...]] | None = None,
    ) -> ApiError:
        return ApiError(ErrorKind.VALIDATION, status, message, field_errors=field_errors)

    @staticmethod
    def network(message: str, details: Any = None) -> ApiError:
        return ApiError(ErrorKind.NETWORK, 0, message, details)

    @staticmethod
    def timeout(seconds: float) -> ApiError:
        return ApiError(
            ErrorKind.TIMEOUT,
            0,
            f"Request timed out after {seconds:g}s",
            {"timeout_seconds": seconds},
        )

    @staticmethod
    def server(message: str, status: int = 0, details: Any = None) -> ApiError:
        return ApiError(ErrorKind.SERVER, status, message, details)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "ErrorKind",
    "TRANSIENT_KINDS",
    "TERMINAL_KINDS",
    "ApiError",
    "ApiErrors",
)
