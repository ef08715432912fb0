"""
Injection — how an authenticated call carries its credential.

Chosen once from configuration; the two modes never mix.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import ClassVar, Protocol

from marketgate.auth import AuthSession, TokenStore
from marketgate.config import AuthMode, Settings


class Injection(Protocol):
    """Adds credential headers. refreshable: a 401 may be healed by refresh."""

    refreshable: ClassVar[bool]

    def headers(self) -> dict[str, str]: ...


@dataclass(frozen=True, slots=True)
class BearerInjection:
    """Authorization: Bearer <access token>."""

    tokens: TokenStore
    refreshable: ClassVar[bool] = True

    def headers(self) -> dict[str, str]:
        credential = self.tokens.get()
        if credential is None:
            return {}
        return {"Authorization": f"Bearer {credential.access_token}"}


@dataclass(frozen=True, slots=True)
class InitDataInjection:
    """The opaque identity proof, forwarded as-is in one header."""

    proof: Callable[[], str | None]
    header: str = "X-Telegram-Init-Data"
    refreshable: ClassVar[bool] = False

    def headers(self) -> dict[str, str]:
        value = self.proof()
        if not value:
            return {}
        return {self.header: value}


def injection_for(settings: Settings, session: AuthSession) -> Injection:
    match settings.auth_mode:
        case AuthMode.BEARER:
            return BearerInjection(session.tokens)
        case AuthMode.INIT_DATA:
            return InitDataInjection(session.identity_proof, settings.identity_header)


__all__ = ("Injection", "BearerInjection", "InitDataInjection", "injection_for")
