"""
Settings — environment-driven client configuration.

    from marketgate.config import load_settings

    settings = load_settings()          # reads .env + process environment
    settings = Settings(api_url="http://localhost:8000")   # explicit, for tests
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum

from dotenv import load_dotenv


class AuthMode(Enum):
    """
    How credentials are attached to authenticated calls.

    BEARER: exchange the identity proof for a token pair, send
            `Authorization: Bearer <access>` and refresh on 401.
    INIT_DATA: forward the opaque identity proof itself in a single header.

    Mutually exclusive per deployment, selected once at client init.
    """

    BEARER = "bearer"
    INIT_DATA = "init_data"


# ═══════════════════════════════════════════════════════════════════════════════
# Persisted Keys
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class StorageKeys:
    """Fixed keys of the local key-value store."""

    access_token: str = "buildgo_access_token"
    refresh_token: str = "buildgo_refresh_token"
    cart: str = "buildgo_cart"


# ═══════════════════════════════════════════════════════════════════════════════
# Endpoint Paths
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Endpoints:
    """Backend paths, relative to `Settings.api_prefix`."""

    login: str = "/telegram-auth/"
    refresh: str = "/token/refresh/"
    me: str = "/me/"
    stores: str = "/stores/"
    search: str = "/search/"
    orders: str = "/orders/"
    my_orders: str = "/orders/my/"
    locations: str = "/locations/"
    seller: str = "/seller/"


# ═══════════════════════════════════════════════════════════════════════════════
# Settings
# ═══════════════════════════════════════════════════════════════════════════════

DEFAULT_TIMEOUT_SECONDS = 15.0


@dataclass(frozen=True, slots=True)
class Settings:
    api_url: str = "http://localhost:8000"
    api_prefix: str = "/api"
    auth_mode: AuthMode = AuthMode.BEARER
    identity_header: str = "X-Telegram-Init-Data"
    request_timeout: float = DEFAULT_TIMEOUT_SECONDS
    storage_url: str = "sqlite:///marketgate.db"
    init_data: str | None = None
    environment: str = "development"
    keys: StorageKeys = field(default_factory=StorageKeys)
    endpoints: Endpoints = field(default_factory=Endpoints)

    def __post_init__(self) -> None:
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")

    @property
    def base_url(self) -> str:
        return self.api_url.rstrip("/") + "/" + self.api_prefix.strip("/")


def _float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _auth_mode(raw: str) -> AuthMode:
    try:
        return AuthMode(raw.strip().lower() or AuthMode.BEARER.value)
    except ValueError:
        allowed = ", ".join(m.value for m in AuthMode)
        raise ValueError(f"MARKETGATE_AUTH_MODE must be one of: {allowed}") from None


def load_settings(env_file: str | None = None) -> Settings:
    """
    Build Settings from the environment.

    Reads `.env` (or `env_file`) first; already-set process variables win.
    """
    load_dotenv(env_file)

    init_data = os.getenv("MARKETGATE_INIT_DATA", "").strip() or None

    return Settings(
        api_url=os.getenv("MARKETGATE_API_URL", "http://localhost:8000").strip(),
        api_prefix=os.getenv("MARKETGATE_API_PREFIX", "/api").strip(),
        auth_mode=_auth_mode(os.getenv("MARKETGATE_AUTH_MODE", "")),
        identity_header=(
            os.getenv("MARKETGATE_IDENTITY_HEADER", "").strip() or "X-Telegram-Init-Data"
        ),
        request_timeout=_float("MARKETGATE_REQUEST_TIMEOUT", DEFAULT_TIMEOUT_SECONDS),
        storage_url=(
            os.getenv("MARKETGATE_STORAGE_URL", "").strip() or "sqlite:///marketgate.db"
        ),
        init_data=init_data,
        environment=(os.getenv("ENVIRONMENT", "").strip() or "development").lower(),
    )


__all__ = (
    "AuthMode",
    "StorageKeys",
    "Endpoints",
    "Settings",
    "DEFAULT_TIMEOUT_SECONDS",
    "load_settings",
)
