"""
Persisted key-value stores.

The local cache sits on a plain get/set/remove store that may be missing
entirely (for example, disabled by the host environment). Each concrete
store either works or raises a StoreError subclass; NullStore stands in
when no backend could be opened, so callers never branch on availability.
"""

from typing import Protocol

from sqlalchemy import Engine, delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from carddex.models.db import KeyValueEntryDB


class StoreError(Exception):
    """Base class for key-value store failures."""

    pass


class StoreUnavailableError(StoreError):
    """Raised when writing to a store that has no backend."""

    pass


class StoreQuotaExceededError(StoreError):
    """Raised when a write would exceed the store's capacity."""

    pass


class KeyValueStore(Protocol):
    """Minimal string store used by the local cache."""

    @property
    def available(self) -> bool: ...

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    """
    Dict-backed store.

    Args:
        max_chars: Optional capacity in characters across all keys and
            values. Writes that would exceed it raise StoreQuotaExceededError
            and leave the previous value in place.
    """

    def __init__(self, max_chars: int | None = None) -> None:
        self._data: dict[str, str] = {}
        self.max_chars = max_chars

    @property
    def available(self) -> bool:
        return True

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.max_chars is not None:
            current = self._data.get(key)
            used = self.used_chars()
            if current is not None:
                used -= len(key) + len(current)
            if used + len(key) + len(value) > self.max_chars:
                raise StoreQuotaExceededError(
                    f"Writing {key!r} would exceed store capacity of {self.max_chars} characters"
                )
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def used_chars(self) -> int:
        return sum(len(k) + len(v) for k, v in self._data.items())

    def keys(self) -> list[str]:
        return list(self._data)


class NullStore:
    """Store used when no backend is available. Reads find nothing, writes fail."""

    @property
    def available(self) -> bool:
        return False

    def get(self, key: str) -> str | None:
        return None

    def set(self, key: str, value: str) -> None:
        raise StoreUnavailableError("Persisted storage is not available")

    def remove(self, key: str) -> None:
        return None


class SqlKeyValueStore:
    """
    Store backed by a SQL table.

    Each call runs in its own short transaction; there are no multi-key
    transactions. Database errors surface as StoreUnavailableError.
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._session_factory = sessionmaker(engine, class_=Session, expire_on_commit=False)

    @property
    def available(self) -> bool:
        return True

    def get(self, key: str) -> str | None:
        try:
            with self._session_factory() as session:
                return session.scalar(
                    select(KeyValueEntryDB.value).where(KeyValueEntryDB.key == key)
                )
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(f"Failed to read {key!r}: {exc}") from exc

    def set(self, key: str, value: str) -> None:
        try:
            with self._session_factory.begin() as session:
                entry = session.get(KeyValueEntryDB, key)
                if entry is None:
                    session.add(KeyValueEntryDB(key=key, value=value))
                else:
                    entry.value = value
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(f"Failed to write {key!r}: {exc}") from exc

    def remove(self, key: str) -> None:
        try:
            with self._session_factory.begin() as session:
                session.execute(delete(KeyValueEntryDB).where(KeyValueEntryDB.key == key))
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(f"Failed to remove {key!r}: {exc}") from exc
