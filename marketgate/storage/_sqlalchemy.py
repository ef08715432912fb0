"""
SQLAlchemy integration — durable key-value storage in one table.

Usage:
    storage = SQLAlchemyStorage.from_url("sqlite:///marketgate.db")
    storage.set("buildgo_cart", "[]")

    # Or share an engine the host already owns:
    storage = SQLAlchemyStorage(engine)
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, Engine, create_engine, select, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from marketgate.storage._types import StorageError


# ═══════════════════════════════════════════════════════════════════════════════
# Table
# ═══════════════════════════════════════════════════════════════════════════════


class Base(DeclarativeBase):
    pass


class KeyValueEntry(Base):
    """One persisted key."""

    __tablename__ = "kv_entries"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


# ═══════════════════════════════════════════════════════════════════════════════
# Storage
# ═══════════════════════════════════════════════════════════════════════════════


class SQLAlchemyStorage:
    """
    KeyValueStorage backed by a SQLAlchemy engine.

    Every call runs in its own short transaction so a crash never leaves a
    half-written cart or credential pair behind.
    """

    def __init__(self, engine: Engine, *, create_schema: bool = True) -> None:
        self._engine = engine
        self._session_factory = sessionmaker(engine, expire_on_commit=False)
        if create_schema:
            try:
                Base.metadata.create_all(engine)
            except SQLAlchemyError as e:
                raise StorageError("Failed to create storage schema", e) from e

    @classmethod
    def from_url(cls, url: str, **engine_kwargs: object) -> "SQLAlchemyStorage":
        return cls(create_engine(url, **engine_kwargs))

    @property
    def engine(self) -> Engine:
        return self._engine

    def _session(self) -> Session:
        return self._session_factory()

    def get(self, key: str) -> str | None:
        try:
            with self._session() as session:
                return session.execute(
                    select(KeyValueEntry.value).where(KeyValueEntry.key == key)
                ).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read {key!r}", e) from e

    def set(self, key: str, value: str) -> None:
        try:
            with self._session() as session:
                entry = session.get(KeyValueEntry, key)
                now = datetime.now(timezone.utc).replace(tzinfo=None)
                if entry is None:
                    session.add(KeyValueEntry(key=key, value=value, updated_at=now))
                else:
                    entry.value = value
                    entry.updated_at = now
                session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to write {key!r}", e) from e

    def delete(self, key: str) -> None:
        try:
            with self._session() as session:
                session.execute(delete(KeyValueEntry).where(KeyValueEntry.key == key))
                session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to delete {key!r}", e) from e

    def close(self) -> None:
        self._engine.dispose()


__all__ = ("Base", "KeyValueEntry", "SQLAlchemyStorage")
