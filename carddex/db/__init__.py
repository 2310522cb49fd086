from carddex.db.database import get_store, init_store, open_store
from carddex.db.store import (
    KeyValueStore,
    MemoryStore,
    NullStore,
    SqlKeyValueStore,
    StoreError,
    StoreQuotaExceededError,
    StoreUnavailableError,
)

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "NullStore",
    "SqlKeyValueStore",
    "StoreError",
    "StoreQuotaExceededError",
    "StoreUnavailableError",
    "get_store",
    "init_store",
    "open_store",
]
