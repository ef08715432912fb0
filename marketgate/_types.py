"""
Core types for marketgate.

Re-exports from kungfu + wire-level aliases shared by every layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# Re-export from kungfu
from kungfu import Result, Ok, Error, LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Identifiers
# ═══════════════════════════════════════════════════════════════════════════════

type ProductId = int
type SellerId = int
type OrderId = int
type LocationId = int

# ═══════════════════════════════════════════════════════════════════════════════
# Wire Payloads
# ═══════════════════════════════════════════════════════════════════════════════

type Json = dict[str, Any] | list[Any] | str | int | float | bool | None
"""Decoded JSON document as returned by the backend."""


@dataclass(frozen=True, slots=True)
class NoContent:
    """
    Explicit empty response body.

    A 204 (or an empty 2xx) resolves to this value instead of a parse attempt.
    """

    def __bool__(self) -> bool:
        return False


NO_CONTENT = NoContent()

type Body = Json | NoContent
"""Successful response body as seen by callers of the gateway."""

# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Identifiers
    "ProductId",
    "SellerId",
    "OrderId",
    "LocationId",
    # Payloads
    "Json",
    "NoContent",
    "NO_CONTENT",
    "Body",
)
