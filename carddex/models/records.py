"""
Persistence record types.

These mirror the record shapes held by the remote data source. Field names
are snake_case in Python; ``to_dict``/``from_dict`` use the camelCase wire
names so stored payloads and server payloads share one shape.

``from_dict`` is strict: malformed input raises KeyError, TypeError or
ValueError. Callers reading untrusted storage catch those.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class CardVariant(str, Enum):
    """Print variants a card can be owned in."""

    NORMAL = "normal"
    HOLOFOIL = "holofoil"
    REVERSE_HOLOFOIL = "reverseHolofoil"
    FIRST_EDITION_HOLOFOIL = "1stEditionHolofoil"
    FIRST_EDITION_NORMAL = "1stEditionNormal"


VALID_VARIANTS: frozenset[str] = frozenset(v.value for v in CardVariant)


class DeviceType(str, Enum):
    """Client platform families."""

    IOS = "ios"
    ANDROID = "android"
    WEB = "web"
    UNKNOWN = "unknown"


def variant_value(variant: CardVariant | str) -> str:
    """Plain string form of a variant, whether given as enum or str."""
    if isinstance(variant, CardVariant):
        return variant.value
    return str(variant)


def _require_int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
    return value


def _require_str(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string, got {type(value).__name__}")
    return value


@dataclass(frozen=True, slots=True)
class PersistenceCard:
    """
    One owned print of a card.

    Attributes:
        card_id: "<setIdentifier>-<number>", e.g. "sv1-25"
        variant: One of the five CardVariant values
        quantity: Copies owned, at least 1
    """

    card_id: str
    variant: CardVariant | str
    quantity: int

    @property
    def key(self) -> tuple[str, str]:
        """Identity of the record: the same card in another variant is a different record."""
        return (self.card_id, variant_value(self.variant))

    def to_dict(self) -> dict[str, Any]:
        return {
            "cardId": self.card_id,
            "variant": variant_value(self.variant),
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PersistenceCard":
        return cls(
            card_id=_require_str(data["cardId"], "cardId"),
            variant=_require_str(data["variant"], "variant"),
            quantity=_require_int(data["quantity"], "quantity"),
        )


@dataclass(frozen=True, slots=True)
class PersistenceWishlistCard:
    """A wanted card and whether it is flagged high priority."""

    card_id: str
    is_priority: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"cardId": self.card_id, "isPriority": self.is_priority}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PersistenceWishlistCard":
        is_priority = data["isPriority"]
        if not isinstance(is_priority, bool):
            raise TypeError("isPriority must be a boolean")
        return cls(card_id=_require_str(data["cardId"], "cardId"), is_priority=is_priority)


@dataclass(frozen=True, slots=True)
class PersistenceAchievement:
    """An unlocked milestone. Immutable once earned."""

    achievement_type: str
    achievement_key: str
    earned_at: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "achievementType": self.achievement_type,
            "achievementKey": self.achievement_key,
            "earnedAt": self.earned_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PersistenceAchievement":
        return cls(
            achievement_type=_require_str(data["achievementType"], "achievementType"),
            achievement_key=_require_str(data["achievementKey"], "achievementKey"),
            earned_at=_require_int(data["earnedAt"], "earnedAt"),
        )


@dataclass(frozen=True, slots=True)
class DataStats:
    """
    Aggregate counts over one profile's data.

    Always derived from the record arrays, never edited by hand, so two
    instances can be compared field by field.
    """

    collection_cards: int = 0
    total_quantity: int = 0
    unique_card_ids: int = 0
    wishlist_cards: int = 0
    achievements: int = 0

    @classmethod
    def empty(cls) -> "DataStats":
        return cls()

    @property
    def is_empty(self) -> bool:
        return self == DataStats.empty()

    def to_dict(self) -> dict[str, int]:
        return {
            "collectionCards": self.collection_cards,
            "totalQuantity": self.total_quantity,
            "uniqueCardIds": self.unique_card_ids,
            "wishlistCards": self.wishlist_cards,
            "achievements": self.achievements,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DataStats":
        return cls(
            collection_cards=_require_int(data["collectionCards"], "collectionCards"),
            total_quantity=_require_int(data["totalQuantity"], "totalQuantity"),
            unique_card_ids=_require_int(data["uniqueCardIds"], "uniqueCardIds"),
            wishlist_cards=_require_int(data["wishlistCards"], "wishlistCards"),
            achievements=_require_int(data["achievements"], "achievements"),
        )


@dataclass(frozen=True, slots=True)
class ChecksumResult:
    """Checksum and stats computed together at one point in time."""

    checksum: int
    stats: DataStats
    timestamp: int


@dataclass
class DataSnapshot:
    """
    Complete point-in-time export of one profile.

    Written whole at a sync checkpoint and superseded by the next one.
    """

    version: int
    created_at: int
    checksum: int
    collection: list[PersistenceCard] = field(default_factory=list)
    wishlist: list[PersistenceWishlistCard] = field(default_factory=list)
    achievements: list[PersistenceAchievement] = field(default_factory=list)
    stats: DataStats = field(default_factory=DataStats)

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "createdAt": self.created_at,
            "checksum": self.checksum,
            "collection": [c.to_dict() for c in self.collection],
            "wishlist": [w.to_dict() for w in self.wishlist],
            "achievements": [a.to_dict() for a in self.achievements],
            "stats": self.stats.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DataSnapshot":
        return cls(
            version=_require_int(data["version"], "version"),
            created_at=_require_int(data["createdAt"], "createdAt"),
            checksum=_require_int(data["checksum"], "checksum"),
            collection=[PersistenceCard.from_dict(c) for c in data["collection"]],
            wishlist=[PersistenceWishlistCard.from_dict(w) for w in data["wishlist"]],
            achievements=[PersistenceAchievement.from_dict(a) for a in data["achievements"]],
            stats=DataStats.from_dict(data["stats"]),
        )


@dataclass(frozen=True, slots=True)
class LocalChecksumRecord:
    """Last-known checksum for a profile, cheaper to read than the full snapshot."""

    checksum: int
    stats: DataStats
    saved_at: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "checksum": self.checksum,
            "stats": self.stats.to_dict(),
            "savedAt": self.saved_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LocalChecksumRecord":
        return cls(
            checksum=_require_int(data["checksum"], "checksum"),
            stats=DataStats.from_dict(data["stats"]),
            saved_at=_require_int(data["savedAt"], "savedAt"),
        )


@dataclass(frozen=True, slots=True)
class DeviceRecord:
    """Stable identity and label of the current client installation."""

    id: str
    type: DeviceType
    name: str
