"""
Store engine setup.

Opens the SQL-backed key-value store, falling back to NullStore when the
backend cannot be reached so the local cache degrades instead of failing.
"""

import logging
from functools import lru_cache

from sqlalchemy import Engine, create_engine
from sqlalchemy.exc import SQLAlchemyError

from carddex.config import settings
from carddex.db.store import KeyValueStore, NullStore, SqlKeyValueStore
from carddex.models.db import Base

logger = logging.getLogger(__name__)


def create_store_engine(url: str) -> Engine:
    """Create a synchronous engine for the store database."""
    return create_engine(url, echo=settings.debug, pool_pre_ping=True)


def init_store(engine: Engine) -> None:
    """
    Initialize store tables.

    Creates all tables defined in the ORM models. Safe to call repeatedly.
    """
    Base.metadata.create_all(engine)


def drop_store(engine: Engine) -> None:
    """
    Drop all store tables.

    WARNING: Destroys all cached data. Use only for testing.
    """
    Base.metadata.drop_all(engine)


def open_store(url: str) -> KeyValueStore:
    """
    Open the persisted store at ``url``.

    Returns a NullStore if the database cannot be opened or initialized.
    """
    try:
        engine = create_store_engine(url)
        init_store(engine)
    except SQLAlchemyError as exc:
        logger.warning(
            "store_unavailable_using_null_store",
            extra={"store_url": url, "error": str(exc)},
        )
        return NullStore()
    return SqlKeyValueStore(engine)


@lru_cache(maxsize=1)
def get_store() -> KeyValueStore:
    """
    Dependency that provides the process-wide store.

    Usage in FastAPI:
        @app.get("/items")
        def get_items(store: KeyValueStore = Depends(get_store)):
            ...
    """
    return open_store(settings.store_url)
