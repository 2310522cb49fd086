"""
Local snapshot store.

Keeps two independent entries per profile in the persisted store: the last
checksum record (small, cheap to compare) and the full data snapshot. Each
accessor is a single get/set/remove.

Loss of the local cache is recoverable by re-syncing from the server, so
none of these functions raise on storage problems. Reads return None and
writes return False (or nothing) when the store is unavailable, full, or
holds data that no longer parses or validates.
"""

import json
import logging
from collections.abc import Sequence

from carddex.clock import now_ms
from carddex.config import INTEGRITY_VERSION, settings
from carddex.db.store import KeyValueStore, StoreError
from carddex.models.records import (
    DataSnapshot,
    DataStats,
    LocalChecksumRecord,
    PersistenceAchievement,
    PersistenceCard,
    PersistenceWishlistCard,
)
from carddex.services.checksum import compute_full_checksum
from carddex.services.validator import validate_data_snapshot

logger = logging.getLogger(__name__)

# Raised by json.loads / from_dict on corrupt payloads
_DECODE_ERRORS = (ValueError, TypeError, KeyError, AttributeError)


def checksum_key(profile_id: str) -> str:
    return f"{settings.storage_prefix}checksum_{profile_id}"


def snapshot_key(profile_id: str) -> str:
    return f"{settings.storage_prefix}snapshot_{profile_id}"


def _read_json(store: KeyValueStore, key: str) -> object | None:
    try:
        raw = store.get(key)
    except StoreError as exc:
        logger.warning("local_read_failed", extra={"key": key, "error": str(exc)})
        return None
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        logger.warning("local_entry_unparseable", extra={"key": key})
        return None


def _write_json(store: KeyValueStore, key: str, payload: dict) -> bool:
    try:
        store.set(key, json.dumps(payload, separators=(",", ":")))
    except StoreError as exc:
        logger.warning("local_write_failed", extra={"key": key, "error": str(exc)})
        return False
    return True


def save_local_checksum(
    store: KeyValueStore,
    profile_id: str,
    checksum: int,
    stats: DataStats,
    now: int | None = None,
) -> None:
    """Persist the last-known checksum and stats for a profile."""
    record = LocalChecksumRecord(
        checksum=checksum,
        stats=stats,
        saved_at=now if now is not None else now_ms(),
    )
    _write_json(store, checksum_key(profile_id), record.to_dict())


def get_local_checksum(store: KeyValueStore, profile_id: str) -> LocalChecksumRecord | None:
    """Load the saved checksum record, or None if absent or unreadable."""
    data = _read_json(store, checksum_key(profile_id))
    if data is None:
        return None
    try:
        return LocalChecksumRecord.from_dict(data)  # type: ignore[arg-type]
    except _DECODE_ERRORS:
        logger.warning("local_checksum_corrupt", extra={"profile_id": profile_id})
        return None


def save_local_snapshot(store: KeyValueStore, profile_id: str, snapshot: DataSnapshot) -> bool:
    """
    Persist the full snapshot for a profile.

    Returns:
        True if written, False if the store refused the write.
    """
    return _write_json(store, snapshot_key(profile_id), snapshot.to_dict())


def get_local_snapshot(store: KeyValueStore, profile_id: str) -> DataSnapshot | None:
    """Load the saved snapshot, or None if absent, unreadable or invalid."""
    data = _read_json(store, snapshot_key(profile_id))
    if data is None:
        return None

    validation = validate_data_snapshot(data)
    if not validation.is_valid:
        logger.warning(
            "local_snapshot_invalid",
            extra={"profile_id": profile_id, "errors": validation.errors},
        )
        return None

    try:
        return DataSnapshot.from_dict(data)  # type: ignore[arg-type]
    except _DECODE_ERRORS:
        logger.warning("local_snapshot_corrupt", extra={"profile_id": profile_id})
        return None


def clear_local_persistence_data(store: KeyValueStore, profile_id: str) -> None:
    """Remove both the checksum record and the snapshot. Safe if nothing was stored."""
    for key in (checksum_key(profile_id), snapshot_key(profile_id)):
        try:
            store.remove(key)
        except StoreError as exc:
            logger.warning("local_remove_failed", extra={"key": key, "error": str(exc)})


def create_snapshot(
    collection: Sequence[PersistenceCard],
    wishlist: Sequence[PersistenceWishlistCard],
    achievements: Sequence[PersistenceAchievement],
    now: int | None = None,
) -> DataSnapshot:
    """Build a versioned snapshot of the given records at the current schema version."""
    result = compute_full_checksum(collection, wishlist, achievements, now=now)
    return DataSnapshot(
        version=INTEGRITY_VERSION,
        created_at=result.timestamp,
        checksum=result.checksum,
        collection=list(collection),
        wishlist=list(wishlist),
        achievements=list(achievements),
        stats=result.stats,
    )
