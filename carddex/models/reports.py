"""
Result types for validation, comparison and status classification.

None of these are raised. Every recoverable condition is a value the caller
can branch on.
"""

from dataclasses import dataclass, field
from enum import Enum

from carddex.models.records import CardVariant, PersistenceCard


class DataHealthStatus(str, Enum):
    """Coarse classification of the current sync state."""

    HEALTHY = "healthy"
    WARNING = "warning"
    ERROR = "error"
    EMPTY = "empty"
    UNKNOWN = "unknown"


class SyncUrgency(str, Enum):
    """How strongly the user should be nudged to re-verify."""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class DiscrepancyKind(str, Enum):
    """Dimension on which local and server aggregates disagree."""

    CHECKSUM = "checksum"
    COLLECTION_COUNT = "collection_count"
    TOTAL_QUANTITY = "total_quantity"
    UNIQUE_CARDS = "unique_cards"
    WISHLIST_COUNT = "wishlist_count"
    ACHIEVEMENT_COUNT = "achievement_count"


# Disagreement on any of these means collection records differ
COLLECTION_KINDS = frozenset(
    {
        DiscrepancyKind.COLLECTION_COUNT,
        DiscrepancyKind.TOTAL_QUANTITY,
        DiscrepancyKind.UNIQUE_CARDS,
    }
)


@dataclass
class ValidationResult:
    """Outcome of validating a single record."""

    is_valid: bool
    errors: list[str] = field(default_factory=list)


@dataclass
class SnapshotValidationResult:
    """Outcome of validating a snapshot envelope. Warnings never invalidate."""

    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class DiscrepancyReport:
    """
    Aggregate-level comparison of local and server state.

    ``kinds`` runs parallel to ``discrepancies``: one kind per message.
    """

    is_valid: bool
    discrepancies: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    kinds: list[DiscrepancyKind] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class QuantityDifference:
    """Same card and variant on both sides, different copy count."""

    card_id: str
    variant: CardVariant | str
    local_quantity: int
    server_quantity: int


@dataclass
class CollectionDiff:
    """Per-record breakdown of how two collections differ."""

    only_in_local: list[PersistenceCard] = field(default_factory=list)
    only_in_server: list[PersistenceCard] = field(default_factory=list)
    quantity_differences: list[QuantityDifference] = field(default_factory=list)

    @property
    def has_differences(self) -> bool:
        return bool(self.only_in_local or self.only_in_server or self.quantity_differences)


@dataclass(frozen=True, slots=True)
class SyncStatusMessage:
    """User-facing staleness message."""

    message: str
    urgency: SyncUrgency

