from carddex.models.records import (
    VALID_VARIANTS,
    CardVariant,
    ChecksumResult,
    DataSnapshot,
    DataStats,
    DeviceRecord,
    DeviceType,
    LocalChecksumRecord,
    PersistenceAchievement,
    PersistenceCard,
    PersistenceWishlistCard,
    variant_value,
)
from carddex.models.reports import (
    COLLECTION_KINDS,
    CollectionDiff,
    DataHealthStatus,
    DiscrepancyKind,
    DiscrepancyReport,
    QuantityDifference,
    SnapshotValidationResult,
    SyncStatusMessage,
    SyncUrgency,
    ValidationResult,
)

__all__ = [
    "COLLECTION_KINDS",
    "CardVariant",
    "ChecksumResult",
    "CollectionDiff",
    "DataHealthStatus",
    "DataSnapshot",
    "DataStats",
    "DeviceRecord",
    "DeviceType",
    "DiscrepancyKind",
    "DiscrepancyReport",
    "LocalChecksumRecord",
    "PersistenceAchievement",
    "PersistenceCard",
    "PersistenceWishlistCard",
    "QuantityDifference",
    "SnapshotValidationResult",
    "SyncStatusMessage",
    "SyncUrgency",
    "VALID_VARIANTS",
    "ValidationResult",
    "variant_value",
]
