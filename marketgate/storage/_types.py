"""
Key-value storage — the only persistence the client has.

KeyValueStorage is synchronous on purpose: token and cart writes happen
inline with the mutation that caused them.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


# ═══════════════════════════════════════════════════════════════════════════════
# Storage Error
# ═══════════════════════════════════════════════════════════════════════════════


class StorageError(Exception):
    """Storage operation failed (quota, I/O, driver error)."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


# ═══════════════════════════════════════════════════════════════════════════════
# Storage Protocol
# ═══════════════════════════════════════════════════════════════════════════════


@runtime_checkable
class KeyValueStorage(Protocol):
    """
    String-to-string store.

    Implement this for custom backends (browser bridge, keyring, ...).
    Implementations raise StorageError on failure; callers decide whether
    the failure matters.

    Example:
        class ShelveStorage:
            def __init__(self, path: str) -> None:
                self._db = shelve.open(path)

            def get(self, key: str) -> str | None:
                return self._db.get(key)

            def set(self, key: str, value: str) -> None:
                self._db[key] = value
                self._db.sync()

            def delete(self, key: str) -> None:
                self._db.pop(key, None)
    """

    def get(self, key: str) -> str | None:
        """Get value. Returns None on miss."""
        ...

    def set(self, key: str, value: str) -> None:
        """Set value, replacing any previous one."""
        ...

    def delete(self, key: str) -> None:
        """Delete key. Missing keys are not an error."""
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Memory Storage
# ═══════════════════════════════════════════════════════════════════════════════


class MemoryStorage:
    """
    In-process storage.

    Note: does not survive a restart; use SQLAlchemyStorage for that.
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)


# ═══════════════════════════════════════════════════════════════════════════════
# Function-based Storage Builder
# ═══════════════════════════════════════════════════════════════════════════════

type GetFn = Callable[[str], str | None]
type SetFn = Callable[[str, str], None]
type DeleteFn = Callable[[str], None]


@dataclass(frozen=True)
class FunctionalStorage:
    """
    Storage built from functions.

    Example:
        storage = storage_from(
            get=bridge.read,
            set=bridge.write,
            delete=bridge.remove,
        )
    """

    _get: GetFn
    _set: SetFn
    _delete: DeleteFn

    def get(self, key: str) -> str | None:
        return self._get(key)

    def set(self, key: str, value: str) -> None:
        self._set(key, value)

    def delete(self, key: str) -> None:
        self._delete(key)


def storage_from(get: GetFn, set: SetFn, delete: DeleteFn) -> FunctionalStorage:
    """Create KeyValueStorage from three callables."""
    return FunctionalStorage(_get=get, _set=set, _delete=delete)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "StorageError",
    "KeyValueStorage",
    "MemoryStorage",
    "FunctionalStorage",
    "storage_from",
)
