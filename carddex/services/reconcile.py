"""
Checkpoint and verification flow.

Ties the pieces together for one profile:
- record_checkpoint: snapshot the current data, validate it, and store
  checksum + snapshot
- verify_against_server: compare the stored checksum with server records,
  diff the stored snapshot when they disagree, and classify health

Checksum record and snapshot are saved independently. If only the checksum
lands, verification still works; it just cannot produce a per-record diff.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from carddex.db.store import KeyValueStore
from carddex.models.records import (
    ChecksumResult,
    DataSnapshot,
    DeviceRecord,
    LocalChecksumRecord,
    PersistenceAchievement,
    PersistenceCard,
    PersistenceWishlistCard,
)
from carddex.models.reports import (
    CollectionDiff,
    DataHealthStatus,
    DiscrepancyReport,
    SnapshotValidationResult,
)
from carddex.services.checksum import compute_full_checksum
from carddex.services.discrepancy import compare_checksums, diff_collections
from carddex.services.health import derive_health_status
from carddex.services.snapshot import (
    create_snapshot,
    get_local_checksum,
    get_local_snapshot,
    save_local_checksum,
    save_local_snapshot,
)
from carddex.services.validator import validate_data_snapshot

logger = logging.getLogger(__name__)


@dataclass
class CheckpointResult:
    """
    Snapshot taken at a checkpoint and what became of it.

    An invalid snapshot is never stored: ``accepted`` and ``snapshot_saved``
    are both False and ``validation`` carries the reasons.
    """

    snapshot: DataSnapshot
    validation: SnapshotValidationResult
    accepted: bool = False
    snapshot_saved: bool = False
    device: DeviceRecord | None = None


@dataclass
class ReconciliationResult:
    """Outcome of verifying local state against the server."""

    health: DataHealthStatus
    server: ChecksumResult
    local: LocalChecksumRecord | None = None
    report: DiscrepancyReport | None = None
    diff: CollectionDiff | None = None

    @property
    def last_sync(self) -> int | None:
        """When the local checksum was last saved, if ever."""
        return self.local.saved_at if self.local else None

    @property
    def in_sync(self) -> bool:
        return self.report is not None and self.report.is_valid


def record_checkpoint(
    store: KeyValueStore,
    profile_id: str,
    collection: Sequence[PersistenceCard],
    wishlist: Sequence[PersistenceWishlistCard],
    achievements: Sequence[PersistenceAchievement],
    now: int | None = None,
    device: DeviceRecord | None = None,
) -> CheckpointResult:
    """
    Snapshot the given records and store both checksum record and snapshot.

    The snapshot is validated first. When validation fails nothing is
    written, so the previous checkpoint stays in place.

    Args:
        device: Installation taking the checkpoint, recorded alongside it
    """
    snapshot = create_snapshot(collection, wishlist, achievements, now=now)
    validation = validate_data_snapshot(snapshot)

    if not validation.is_valid:
        logger.warning(
            "checkpoint_rejected",
            extra={"profile_id": profile_id, "errors": validation.errors},
        )
        return CheckpointResult(snapshot=snapshot, validation=validation, device=device)

    save_local_checksum(
        store, profile_id, snapshot.checksum, snapshot.stats, now=snapshot.created_at
    )
    saved = save_local_snapshot(store, profile_id, snapshot)

    logger.info(
        "checkpoint_recorded",
        extra={
            "profile_id": profile_id,
            "checksum": snapshot.checksum,
            "snapshot_saved": saved,
            "device_id": device.id if device else None,
            "device_type": device.type.value if device else None,
            "device_name": device.name if device else None,
        },
    )
    return CheckpointResult(
        snapshot=snapshot,
        validation=validation,
        accepted=True,
        snapshot_saved=saved,
        device=device,
    )


def verify_against_server(
    store: KeyValueStore,
    profile_id: str,
    server_collection: Sequence[PersistenceCard],
    server_wishlist: Sequence[PersistenceWishlistCard],
    server_achievements: Sequence[PersistenceAchievement],
    now: int | None = None,
) -> ReconciliationResult:
    """
    Compare the stored checkpoint with the server's current records.

    Without a stored checksum there is nothing to compare against and health
    is UNKNOWN. A per-record diff is only produced when the aggregates
    disagree and the full local snapshot is readable.
    """
    server = compute_full_checksum(server_collection, server_wishlist, server_achievements, now=now)

    local = get_local_checksum(store, profile_id)
    if local is None:
        logger.info("no_local_checksum", extra={"profile_id": profile_id})
        return ReconciliationResult(health=DataHealthStatus.UNKNOWN, server=server)

    report = compare_checksums(local.checksum, server.checksum, local.stats, server.stats)

    diff = None
    if not report.is_valid:
        snapshot = get_local_snapshot(store, profile_id)
        if snapshot is not None:
            diff = diff_collections(snapshot.collection, server_collection)

    return ReconciliationResult(
        health=derive_health_status(report, server.stats),
        server=server,
        local=local,
        report=report,
        diff=diff,
    )
