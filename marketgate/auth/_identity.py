"""
Identity sources — where the opaque identity proof comes from.

Inside the messaging host the proof is read fresh on every call (the host
may re-sign it). Elsewhere it is fixed by configuration, or absent.
"""

from __future__ import annotations

from marketgate.auth._types import IdentitySource


def no_identity() -> str | None:
    return None


def static_identity(proof: str | None) -> IdentitySource:
    """Source that always yields proof (or nothing, when proof is blank)."""
    value = (proof or "").strip() or None

    def source() -> str | None:
        return value

    return source


__all__ = ("no_identity", "static_identity")
