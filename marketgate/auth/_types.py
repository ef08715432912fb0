"""
Auth types — credential pair, user profile, session states.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from marketgate._wire import parse_datetime, parse_int, pick


# ═══════════════════════════════════════════════════════════════════════════════
# Credential Pair
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Credential:
    """Opaque token pair. Both values stay out of repr."""

    access_token: str = field(repr=False)
    refresh_token: str = field(repr=False, default="")

    @property
    def can_refresh(self) -> bool:
        return bool(self.refresh_token)


type IdentitySource = Callable[[], str | None]
"""Returns the host's current identity proof, or None outside the host."""


# ═══════════════════════════════════════════════════════════════════════════════
# User Profile
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class UserProfile:
    id: int
    telegram_id: int | None = None
    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    role: str = "buyer"
    created_at: datetime | None = None

    @property
    def display_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    @property
    def is_seller(self) -> bool:
        return self.role == "seller"

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "UserProfile":
        return cls(
            id=parse_int(data.get("id"), 0) or 0,
            telegram_id=parse_int(pick(data, "telegram_id", "telegramId")),
            first_name=pick(data, "first_name", "firstName", default=""),
            last_name=pick(data, "last_name", "lastName", default=""),
            phone=data.get("phone") or "",
            role=data.get("role") or "buyer",
            created_at=parse_datetime(pick(data, "created_at", "createdAt")),
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Session States
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Unauthenticated:
    pass


@dataclass(frozen=True, slots=True)
class Authenticating:
    pass


@dataclass(frozen=True, slots=True)
class Authenticated:
    """user is None until the profile is fetched (restored sessions)."""

    user: UserProfile | None = None


@dataclass(frozen=True, slots=True)
class Refreshing:
    pass


@dataclass(frozen=True, slots=True)
class Failed:
    """Terminal until an explicit login."""

    reason: str


type SessionState = Unauthenticated | Authenticating | Authenticated | Refreshing | Failed

UNAUTHENTICATED = Unauthenticated()
AUTHENTICATING = Authenticating()
REFRESHING = Refreshing()


def state_name(state: SessionState) -> str:
    return type(state).__name__.lower()


__all__ = (
    "Credential",
    "IdentitySource",
    "UserProfile",
    "Unauthenticated",
    "Authenticating",
    "Authenticated",
    "Refreshing",
    "Failed",
    "SessionState",
    "UNAUTHENTICATED",
    "AUTHENTICATING",
    "REFRESHING",
    "state_name",
)
