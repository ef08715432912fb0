"""Tests for key-value storage backends and the token store."""

import pytest

from marketgate.auth import Credential, TokenStore
from marketgate.config import StorageKeys
from marketgate.storage import (
    KeyValueStorage,
    MemoryStorage,
    SQLAlchemyStorage,
    StorageError,
    storage_from,
)


def failing_storage() -> KeyValueStorage:
    def boom(*_args):
        raise StorageError("quota exceeded")

    return storage_from(get=boom, set=boom, delete=boom)


@pytest.fixture
def sqlite_url(tmp_path):
    return f"sqlite:///{tmp_path / 'kv.db'}"


class TestMemoryStorage:
    def test_round_trip(self):
        storage = MemoryStorage()
        storage.set("k", "v")
        assert storage.get("k") == "v"
        assert "k" in storage

    def test_delete_missing_key_is_fine(self):
        storage = MemoryStorage()
        storage.delete("missing")
        assert storage.get("missing") is None

    def test_satisfies_protocol(self):
        assert isinstance(MemoryStorage(), KeyValueStorage)


class TestSQLAlchemyStorage:
    def test_set_get_overwrite(self, sqlite_url):
        storage = SQLAlchemyStorage.from_url(sqlite_url)
        storage.set("buildgo_cart", "[]")
        storage.set("buildgo_cart", '[{"a": 1}]')
        assert storage.get("buildgo_cart") == '[{"a": 1}]'
        storage.close()

    def test_survives_new_engine(self, sqlite_url):
        first = SQLAlchemyStorage.from_url(sqlite_url)
        first.set("buildgo_access_token", "tok")
        first.close()

        second = SQLAlchemyStorage.from_url(sqlite_url)
        assert second.get("buildgo_access_token") == "tok"
        second.close()

    def test_delete(self, sqlite_url):
        storage = SQLAlchemyStorage.from_url(sqlite_url)
        storage.set("k", "v")
        storage.delete("k")
        storage.delete("k")
        assert storage.get("k") is None
        storage.close()


class TestTokenStore:
    def test_empty_store(self):
        assert TokenStore(MemoryStorage()).get() is None

    def test_set_mirrors_into_storage(self):
        storage = MemoryStorage()
        tokens = TokenStore(storage)
        tokens.set(Credential("a", "r"))

        assert tokens.get() == Credential("a", "r")
        assert storage.get("buildgo_access_token") == "a"
        assert storage.get("buildgo_refresh_token") == "r"

    def test_loads_existing_pair(self):
        storage = MemoryStorage({"buildgo_access_token": "a", "buildgo_refresh_token": "r"})
        assert TokenStore(storage).get() == Credential("a", "r")

    def test_survives_restart(self, sqlite_url):
        storage = SQLAlchemyStorage.from_url(sqlite_url)
        TokenStore(storage).set(Credential("a", "r"))
        storage.close()

        reopened = SQLAlchemyStorage.from_url(sqlite_url)
        assert TokenStore(reopened).get() == Credential("a", "r")
        reopened.close()

    def test_clear(self):
        storage = MemoryStorage()
        tokens = TokenStore(storage)
        tokens.set(Credential("a", "r"))
        tokens.clear()

        assert tokens.get() is None
        assert len(storage) == 0

    def test_replace_access_keeps_refresh(self):
        tokens = TokenStore(MemoryStorage())
        tokens.set(Credential("a", "r"))
        tokens.replace_access("a2")
        assert tokens.get() == Credential("a2", "r")

    def test_custom_keys(self):
        storage = MemoryStorage()
        keys = StorageKeys(access_token="acc", refresh_token="ref", cart="cart")
        TokenStore(storage, keys).set(Credential("a", "r"))
        assert storage.get("acc") == "a"

    def test_storage_failures_are_swallowed(self):
        tokens = TokenStore(failing_storage())
        tokens.set(Credential("a", "r"))
        assert tokens.get() == Credential("a", "r")
        tokens.clear()
        assert tokens.get() is None

    def test_credential_repr_hides_tokens(self):
        assert "secret" not in repr(Credential("secret", "secret"))
