"""
Order-independent checksums over persistence records.

Each record is reduced to a canonical string, hashed, and the per-record
hashes are summed modulo 2**32. Addition is commutative and associative, so
the result depends only on the multiset of records, never on the order the
records were fetched or stored in.

INVARIANT: checksum(A) == checksum(permutation of A) for every record type.
INVARIANT: total_quantity >= collection_cards >= unique_card_ids >= 0.
"""

import struct
from collections.abc import Callable, Iterable, Sequence
from typing import TypeVar

from carddex.clock import now_ms
from carddex.models.records import (
    ChecksumResult,
    DataStats,
    PersistenceAchievement,
    PersistenceCard,
    PersistenceWishlistCard,
    variant_value,
)

T = TypeVar("T")

_UINT32 = 0xFFFFFFFF

# Joins fields inside one record's canonical string
FIELD_SEPARATOR = "|"

# Joins the category checksums in the overall checksum
CATEGORY_SEPARATOR = "||"


def _to_int32(value: int) -> int:
    """Reinterpret the low 32 bits of ``value`` as a signed integer."""
    value &= _UINT32
    return value - 0x100000000 if value & 0x80000000 else value


def hash_code(text: str) -> int:
    """
    Deterministic 32-bit string hash.

    Polynomial rolling hash (``h = h * 31 + unit``) over UTF-16 code units,
    wrapped to a signed 32-bit integer. The empty string hashes to 0.
    """
    if not text:
        return 0

    encoded = text.encode("utf-16-le", "surrogatepass")
    units = struct.unpack(f"<{len(encoded) // 2}H", encoded)

    h = 0
    for unit in units:
        h = (h * 31 + unit) & _UINT32
    return _to_int32(h)


def _combine(records: Iterable[T], canonical: Callable[[T], str]) -> int:
    total = 0
    for record in records:
        total = (total + hash_code(canonical(record))) & _UINT32
    return _to_int32(total)


def _card_canonical(card: PersistenceCard) -> str:
    return FIELD_SEPARATOR.join((card.card_id, variant_value(card.variant), str(card.quantity)))


def _wishlist_canonical(item: PersistenceWishlistCard) -> str:
    return FIELD_SEPARATOR.join((item.card_id, "true" if item.is_priority else "false"))


def _achievement_canonical(achievement: PersistenceAchievement) -> str:
    return FIELD_SEPARATOR.join(
        (achievement.achievement_type, achievement.achievement_key, str(achievement.earned_at))
    )


def compute_collection_checksum(cards: Iterable[PersistenceCard]) -> int:
    """Checksum over (card_id, variant, quantity). Empty input yields 0."""
    return _combine(cards, _card_canonical)


def compute_wishlist_checksum(wishlist: Iterable[PersistenceWishlistCard]) -> int:
    """Checksum over (card_id, is_priority). Empty input yields 0."""
    return _combine(wishlist, _wishlist_canonical)


def compute_achievement_checksum(achievements: Iterable[PersistenceAchievement]) -> int:
    """Checksum over (achievement_type, achievement_key, earned_at). Empty input yields 0."""
    return _combine(achievements, _achievement_canonical)


def compute_stats(
    collection: Sequence[PersistenceCard],
    wishlist: Sequence[PersistenceWishlistCard],
    achievements: Sequence[PersistenceAchievement],
) -> DataStats:
    """Derive aggregate counts with a single pass over the collection."""
    total_quantity = 0
    card_ids: set[str] = set()
    for card in collection:
        total_quantity += card.quantity
        card_ids.add(card.card_id)

    return DataStats(
        collection_cards=len(collection),
        total_quantity=total_quantity,
        unique_card_ids=len(card_ids),
        wishlist_cards=len(wishlist),
        achievements=len(achievements),
    )


def compute_full_checksum(
    collection: Sequence[PersistenceCard],
    wishlist: Sequence[PersistenceWishlistCard],
    achievements: Sequence[PersistenceAchievement],
    now: int | None = None,
) -> ChecksumResult:
    """
    Compute the overall checksum and stats for one profile.

    The three category checksums are combined in a fixed order (collection,
    wishlist, achievements). Identical inputs always give identical
    ``checksum`` and ``stats``; only ``timestamp`` varies between calls.

    Args:
        collection: Owned cards
        wishlist: Wanted cards
        achievements: Unlocked achievements
        now: Computation time in unix ms (defaults to the current time)
    """
    categories = (
        compute_collection_checksum(collection),
        compute_wishlist_checksum(wishlist),
        compute_achievement_checksum(achievements),
    )
    checksum = hash_code(CATEGORY_SEPARATOR.join(str(c) for c in categories))

    return ChecksumResult(
        checksum=checksum,
        stats=compute_stats(collection, wishlist, achievements),
        timestamp=now if now is not None else now_ms(),
    )
