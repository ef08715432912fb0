"""
Storage — local key-value persistence for credentials and the cart.

    from marketgate import storage as KV

    store = KV.SQLAlchemyStorage.from_url("sqlite:///marketgate.db")
    store = KV.MemoryStorage()                      # tests, ephemeral hosts
    store = KV.storage_from(get=..., set=..., delete=...)
"""

from marketgate.storage._types import (
    StorageError,
    KeyValueStorage,
    MemoryStorage,
    FunctionalStorage,
    storage_from,
)
from marketgate.storage._sqlalchemy import (
    KeyValueEntry,
    SQLAlchemyStorage,
)

__all__ = (
    "StorageError",
    "KeyValueStorage",
    "MemoryStorage",
    "FunctionalStorage",
    "storage_from",
    "KeyValueEntry",
    "SQLAlchemyStorage",
)
