"""
Integrity API endpoints.

Exposes checksum computation, comparison, diffing and validation, plus the
per-profile checkpoint/verify/status flow over the local store. Results are
returned as data for a sync-status UI; divergence is never an HTTP error.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Header, HTTPException, status
from pydantic import BaseModel, Field

from carddex.db.database import get_store
from carddex.db.store import KeyValueStore
from carddex.models.records import (
    DataStats,
    DeviceRecord,
    PersistenceAchievement,
    PersistenceCard,
    PersistenceWishlistCard,
    variant_value,
)
from carddex.models.reports import CollectionDiff, DataHealthStatus
from carddex.services.checksum import compute_full_checksum
from carddex.services.device import resolve_device
from carddex.services.discrepancy import compare_checksums, diff_collections
from carddex.services.health import (
    derive_health_status,
    format_data_stats,
    format_sync_time,
    get_data_health_color,
    get_data_health_message,
    get_sync_status_message,
)
from carddex.services.reconcile import record_checkpoint, verify_against_server
from carddex.services.snapshot import (
    clear_local_persistence_data,
    get_local_checksum,
    get_local_snapshot,
)
from carddex.services.validator import validate_data_snapshot

router = APIRouter(prefix="/integrity", tags=["integrity"])


# =============================================================================
# PAYLOAD MODELS
# =============================================================================


class CardPayload(BaseModel):
    """One owned card."""

    card_id: str = Field(..., examples=["sv1-25"])
    variant: str = Field(default="normal", examples=["holofoil"])
    quantity: int = Field(..., ge=1, examples=[2])

    def to_domain(self) -> PersistenceCard:
        return PersistenceCard(card_id=self.card_id, variant=self.variant, quantity=self.quantity)

    @classmethod
    def from_domain(cls, card: PersistenceCard) -> "CardPayload":
        return cls(
            card_id=card.card_id, variant=variant_value(card.variant), quantity=card.quantity
        )


class WishlistPayload(BaseModel):
    """One wishlist entry."""

    card_id: str
    is_priority: bool = False

    def to_domain(self) -> PersistenceWishlistCard:
        return PersistenceWishlistCard(card_id=self.card_id, is_priority=self.is_priority)


class AchievementPayload(BaseModel):
    """One unlocked achievement."""

    achievement_type: str
    achievement_key: str
    earned_at: int = Field(..., description="Unix milliseconds")

    def to_domain(self) -> PersistenceAchievement:
        return PersistenceAchievement(
            achievement_type=self.achievement_type,
            achievement_key=self.achievement_key,
            earned_at=self.earned_at,
        )


class StatsPayload(BaseModel):
    """Aggregate counts for one profile."""

    collection_cards: int = 0
    total_quantity: int = 0
    unique_card_ids: int = 0
    wishlist_cards: int = 0
    achievements: int = 0

    def to_domain(self) -> DataStats:
        return DataStats(**self.model_dump())

    @classmethod
    def from_domain(cls, stats: DataStats) -> "StatsPayload":
        return cls(
            collection_cards=stats.collection_cards,
            total_quantity=stats.total_quantity,
            unique_card_ids=stats.unique_card_ids,
            wishlist_cards=stats.wishlist_cards,
            achievements=stats.achievements,
        )


class RecordsRequest(BaseModel):
    """Full record set for one profile."""

    collection: list[CardPayload] = Field(default_factory=list)
    wishlist: list[WishlistPayload] = Field(default_factory=list)
    achievements: list[AchievementPayload] = Field(default_factory=list)

    def to_domain(
        self,
    ) -> tuple[
        list[PersistenceCard], list[PersistenceWishlistCard], list[PersistenceAchievement]
    ]:
        return (
            [c.to_domain() for c in self.collection],
            [w.to_domain() for w in self.wishlist],
            [a.to_domain() for a in self.achievements],
        )


class ChecksumResponse(BaseModel):
    """Checksum and stats for a record set."""

    checksum: int
    stats: StatsPayload
    timestamp: int
    summary: str


class CompareRequest(BaseModel):
    """Local and server aggregates to compare."""

    local_checksum: int
    server_checksum: int
    local_stats: StatsPayload
    server_stats: StatsPayload


class HealthPayload(BaseModel):
    """Health classification with display copy."""

    status: DataHealthStatus
    message: str
    color: str

    @classmethod
    def from_status(cls, status: DataHealthStatus) -> "HealthPayload":
        return cls(
            status=status,
            message=get_data_health_message(status),
            color=get_data_health_color(status),
        )


class DiscrepancyResponse(BaseModel):
    """Aggregate comparison result."""

    is_valid: bool
    discrepancies: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    kinds: list[str] = Field(default_factory=list)
    health: HealthPayload


class DiffRequest(BaseModel):
    """Two collections to diff."""

    local: list[CardPayload] = Field(default_factory=list)
    server: list[CardPayload] = Field(default_factory=list)


class QuantityDifferencePayload(BaseModel):
    card_id: str
    variant: str
    local_quantity: int
    server_quantity: int


class DiffResponse(BaseModel):
    """Per-record differences between two collections."""

    only_in_local: list[CardPayload] = Field(default_factory=list)
    only_in_server: list[CardPayload] = Field(default_factory=list)
    quantity_differences: list[QuantityDifferencePayload] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, diff: CollectionDiff) -> "DiffResponse":
        return cls(
            only_in_local=[CardPayload.from_domain(c) for c in diff.only_in_local],
            only_in_server=[CardPayload.from_domain(c) for c in diff.only_in_server],
            quantity_differences=[
                QuantityDifferencePayload(
                    card_id=q.card_id,
                    variant=variant_value(q.variant),
                    local_quantity=q.local_quantity,
                    server_quantity=q.server_quantity,
                )
                for q in diff.quantity_differences
            ],
        )


class ValidationResponse(BaseModel):
    """Snapshot validation result."""

    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class SyncStatusPayload(BaseModel):
    """Staleness of the last sync."""

    last_sync: int | None = None
    last_sync_text: str
    message: str
    urgency: str

    @classmethod
    def from_timestamp(cls, last_sync: int | None) -> "SyncStatusPayload":
        status = get_sync_status_message(last_sync)
        return cls(
            last_sync=last_sync,
            last_sync_text=format_sync_time(last_sync),
            message=status.message,
            urgency=status.urgency.value,
        )


class DevicePayload(BaseModel):
    """Installation that took a checkpoint."""

    id: str
    type: str
    name: str

    @classmethod
    def from_domain(cls, device: DeviceRecord) -> "DevicePayload":
        return cls(id=device.id, type=device.type.value, name=device.name)


class CheckpointResponse(BaseModel):
    """Result of recording a checkpoint."""

    profile_id: str
    checksum: int
    created_at: int
    stats: StatsPayload
    summary: str
    snapshot_saved: bool
    warnings: list[str] = Field(default_factory=list)
    device: DevicePayload | None = None


class VerifyResponse(BaseModel):
    """Result of verifying local state against server records."""

    profile_id: str
    in_sync: bool
    health: HealthPayload
    server_checksum: int
    server_stats: StatsPayload
    local_checksum: int | None = None
    discrepancies: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    diff: DiffResponse | None = None
    sync_status: SyncStatusPayload


class StatusResponse(BaseModel):
    """What the local cache holds for a profile."""

    profile_id: str
    has_checksum: bool
    has_snapshot: bool
    checksum: int | None = None
    stats: StatsPayload | None = None
    summary: str
    sync_status: SyncStatusPayload


class ClearResponse(BaseModel):
    """Response model for clearing local data."""

    profile_id: str
    cleared: bool
    message: str = ""


# =============================================================================
# STATELESS ENDPOINTS
# =============================================================================


@router.post("/checksum", response_model=ChecksumResponse)
async def checksum(request: RecordsRequest) -> ChecksumResponse:
    """Compute the checksum and stats for a record set."""
    result = compute_full_checksum(*request.to_domain())
    return ChecksumResponse(
        checksum=result.checksum,
        stats=StatsPayload.from_domain(result.stats),
        timestamp=result.timestamp,
        summary=format_data_stats(result.stats),
    )


@router.post("/compare", response_model=DiscrepancyResponse)
async def compare(request: CompareRequest) -> DiscrepancyResponse:
    """Compare local and server aggregates and classify health."""
    server_stats = request.server_stats.to_domain()
    report = compare_checksums(
        request.local_checksum,
        request.server_checksum,
        request.local_stats.to_domain(),
        server_stats,
    )
    return DiscrepancyResponse(
        is_valid=report.is_valid,
        discrepancies=report.discrepancies,
        suggestions=report.suggestions,
        kinds=[k.value for k in report.kinds],
        health=HealthPayload.from_status(derive_health_status(report, server_stats)),
    )


@router.post("/diff", response_model=DiffResponse)
async def diff(request: DiffRequest) -> DiffResponse:
    """Break two collections down record by record."""
    result = diff_collections(
        [c.to_domain() for c in request.local],
        [c.to_domain() for c in request.server],
    )
    return DiffResponse.from_domain(result)


@router.post("/validate", response_model=ValidationResponse)
async def validate(snapshot: Annotated[Any, Body()]) -> ValidationResponse:
    """
    Validate an arbitrary JSON snapshot.

    Any JSON body is accepted; malformed snapshots are reported in the
    result rather than rejected.
    """
    result = validate_data_snapshot(snapshot)
    return ValidationResponse(
        is_valid=result.is_valid,
        errors=result.errors,
        warnings=result.warnings,
    )


# =============================================================================
# PROFILE ENDPOINTS
# =============================================================================


@router.post("/{profile_id}/checkpoint", response_model=CheckpointResponse)
def checkpoint(
    profile_id: str,
    request: RecordsRequest,
    store: Annotated[KeyValueStore, Depends(get_store)],
    user_agent: Annotated[str | None, Header()] = None,
) -> CheckpointResponse:
    """
    Record a sync checkpoint for the given records.

    The calling device is identified from its User-Agent. Records that fail
    validation are rejected with 400 and nothing is stored.
    """
    device = resolve_device(store, user_agent)
    result = record_checkpoint(store, profile_id, *request.to_domain(), device=device)

    if not result.accepted:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid checkpoint: {'; '.join(result.validation.errors)}",
        )

    snapshot = result.snapshot
    return CheckpointResponse(
        profile_id=profile_id,
        checksum=snapshot.checksum,
        created_at=snapshot.created_at,
        stats=StatsPayload.from_domain(snapshot.stats),
        summary=format_data_stats(snapshot.stats),
        snapshot_saved=result.snapshot_saved,
        warnings=result.validation.warnings,
        device=DevicePayload.from_domain(device),
    )


@router.post("/{profile_id}/verify", response_model=VerifyResponse)
def verify(
    profile_id: str,
    request: RecordsRequest,
    store: Annotated[KeyValueStore, Depends(get_store)],
) -> VerifyResponse:
    """Verify the stored checkpoint against the server's current records."""
    result = verify_against_server(store, profile_id, *request.to_domain())
    report = result.report
    return VerifyResponse(
        profile_id=profile_id,
        in_sync=result.in_sync,
        health=HealthPayload.from_status(result.health),
        server_checksum=result.server.checksum,
        server_stats=StatsPayload.from_domain(result.server.stats),
        local_checksum=result.local.checksum if result.local else None,
        discrepancies=report.discrepancies if report else [],
        suggestions=report.suggestions if report else [],
        diff=DiffResponse.from_domain(result.diff) if result.diff else None,
        sync_status=SyncStatusPayload.from_timestamp(result.last_sync),
    )


@router.get("/{profile_id}/status", response_model=StatusResponse)
def local_status(
    profile_id: str,
    store: Annotated[KeyValueStore, Depends(get_store)],
) -> StatusResponse:
    """Describe what the local cache holds for a profile."""
    record = get_local_checksum(store, profile_id)
    has_snapshot = get_local_snapshot(store, profile_id) is not None

    if record is None:
        return StatusResponse(
            profile_id=profile_id,
            has_checksum=False,
            has_snapshot=has_snapshot,
            summary=format_data_stats(DataStats.empty()),
            sync_status=SyncStatusPayload.from_timestamp(None),
        )

    return StatusResponse(
        profile_id=profile_id,
        has_checksum=True,
        has_snapshot=has_snapshot,
        checksum=record.checksum,
        stats=StatsPayload.from_domain(record.stats),
        summary=format_data_stats(record.stats),
        sync_status=SyncStatusPayload.from_timestamp(record.saved_at),
    )


@router.delete("/{profile_id}", response_model=ClearResponse)
def clear(
    profile_id: str,
    store: Annotated[KeyValueStore, Depends(get_store)],
) -> ClearResponse:
    """Remove the profile's checksum record and snapshot from the local cache."""
    clear_local_persistence_data(store, profile_id)
    return ClearResponse(
        profile_id=profile_id,
        cleared=True,
        message="Local data cleared. It will be restored on the next sync.",
    )
