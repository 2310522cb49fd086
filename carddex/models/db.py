"""
SQLAlchemy ORM models for the persisted key-value store.

The local cache is a flat key/value space: one row per key, value stored as
serialized JSON text.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class KeyValueEntryDB(Base):
    """
    A single stored value.

    Rows are overwritten in place on save (last write wins).
    """

    __tablename__ = "kv_entries"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<KeyValueEntryDB(key={self.key}, bytes={len(self.value)})>"
