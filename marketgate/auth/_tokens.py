"""
TokenStore — the credential pair, mirrored into key-value storage.
"""

from __future__ import annotations

import structlog

from marketgate.auth._types import Credential
from marketgate.config import StorageKeys
from marketgate.storage import KeyValueStorage, StorageError

logger = structlog.get_logger(__name__)


class TokenStore:
    """
    Synchronous credential holder.

    The in-memory copy is authoritative for the process lifetime; the
    persistent copy is best effort. Storage failures are logged and
    swallowed, callers never see them.

    Example:
        tokens = TokenStore(KV.MemoryStorage())
        tokens.set(Credential("a", "r"))
        tokens.get()    # Credential(...)
        tokens.clear()
    """

    def __init__(self, storage: KeyValueStorage, keys: StorageKeys | None = None) -> None:
        self._storage = storage
        self._keys = keys or StorageKeys()
        self._credential = self._load()

    def _load(self) -> Credential | None:
        try:
            access = self._storage.get(self._keys.access_token)
            refresh = self._storage.get(self._keys.refresh_token)
        except StorageError as e:
            logger.warning("tokens.load_failed", error=e.message)
            return None
        if not access:
            return None
        return Credential(access, refresh or "")

    def get(self) -> Credential | None:
        return self._credential

    def set(self, credential: Credential) -> None:
        self._credential = credential
        self._write(self._keys.access_token, credential.access_token)
        self._write(self._keys.refresh_token, credential.refresh_token)

    def replace_access(self, access_token: str) -> None:
        """Swap the access token, keep the refresh token."""
        current = self._credential
        self.set(Credential(access_token, current.refresh_token if current else ""))

    def clear(self) -> None:
        self._credential = None
        for key in (self._keys.access_token, self._keys.refresh_token):
            try:
                self._storage.delete(key)
            except StorageError as e:
                logger.warning("tokens.clear_failed", key=key, error=e.message)

    def _write(self, key: str, value: str) -> None:
        try:
            if value:
                self._storage.set(key, value)
            else:
                self._storage.delete(key)
        except StorageError as e:
            logger.warning("tokens.persist_failed", key=key, error=e.message)


__all__ = ("TokenStore",)
