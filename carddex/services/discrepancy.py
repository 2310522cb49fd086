"""
Discrepancy detection between local and server state.

Two levels:
- compare_checksums: aggregate comparison (checksum plus stats), naming
  every dimension that disagrees.
- diff_collections: per-record breakdown keyed by (card_id, variant).

Divergence is an expected outcome here, not an error.
"""

import logging
from collections.abc import Iterable

from carddex.models.records import DataStats, PersistenceCard
from carddex.models.reports import (
    CollectionDiff,
    DiscrepancyKind,
    DiscrepancyReport,
    QuantityDifference,
)

logger = logging.getLogger(__name__)


def _more_than(diff: int, noun: str) -> str:
    """Direction-aware wording: positive diff means the server holds more."""
    if diff > 0:
        return f"Server has {diff} more {noun} than local"
    return f"Local has {-diff} more {noun} than server"


def compare_checksums(
    local_checksum: int,
    server_checksum: int,
    local_stats: DataStats,
    server_stats: DataStats,
) -> DiscrepancyReport:
    """
    Compare local and server aggregates.

    Valid only when the checksums and all five stats fields match. Every
    disagreeing dimension contributes its own message, so several can be
    reported at once.
    """
    discrepancies: list[str] = []
    suggestions: list[str] = []
    kinds: list[DiscrepancyKind] = []

    if local_checksum != server_checksum:
        discrepancies.append("Checksum mismatch between local and server data")
        kinds.append(DiscrepancyKind.CHECKSUM)

    if local_stats.collection_cards != server_stats.collection_cards:
        diff = server_stats.collection_cards - local_stats.collection_cards
        discrepancies.append(_more_than(diff, "card entries"))
        kinds.append(DiscrepancyKind.COLLECTION_COUNT)
        if diff > 0:
            suggestions.append("Refresh your collection to get the latest data")
        else:
            suggestions.append("Some local changes may not have synced - try syncing again")

    if local_stats.total_quantity != server_stats.total_quantity:
        diff = server_stats.total_quantity - local_stats.total_quantity
        discrepancies.append(_more_than(diff, "total cards"))
        kinds.append(DiscrepancyKind.TOTAL_QUANTITY)

    if local_stats.unique_card_ids != server_stats.unique_card_ids:
        diff = server_stats.unique_card_ids - local_stats.unique_card_ids
        discrepancies.append(_more_than(diff, "unique cards"))
        kinds.append(DiscrepancyKind.UNIQUE_CARDS)

    if local_stats.wishlist_cards != server_stats.wishlist_cards:
        discrepancies.append("Wishlist count differs between local and server")
        suggestions.append("Refresh your wishlist to sync the latest changes")
        kinds.append(DiscrepancyKind.WISHLIST_COUNT)

    if local_stats.achievements != server_stats.achievements:
        discrepancies.append("Achievement count differs between local and server")
        suggestions.append("Some achievements may not have synced properly")
        kinds.append(DiscrepancyKind.ACHIEVEMENT_COUNT)

    if not discrepancies:
        return DiscrepancyReport(is_valid=True)

    logger.info(
        "checksum_discrepancy_detected",
        extra={"kinds": [k.value for k in kinds]},
    )
    return DiscrepancyReport(
        is_valid=False,
        discrepancies=discrepancies,
        suggestions=suggestions,
        kinds=kinds,
    )


def _index_by_key(cards: Iterable[PersistenceCard]) -> dict[tuple[str, str], PersistenceCard]:
    # Duplicate keys: the last record seen wins, on both sides alike
    return {card.key: card for card in cards}


def diff_collections(
    local_collection: Iterable[PersistenceCard],
    server_collection: Iterable[PersistenceCard],
) -> CollectionDiff:
    """
    Break two collections down record by record.

    Records are identified by (card_id, variant). The same card in two
    variants is two unrelated records, never a quantity difference.

    Returns:
        CollectionDiff with cards only in local, cards only on the server,
        and quantity mismatches for cards present on both sides.
    """
    local = _index_by_key(local_collection)
    server = _index_by_key(server_collection)

    diff = CollectionDiff()

    for key, card in local.items():
        server_card = server.get(key)
        if server_card is None:
            diff.only_in_local.append(card)
        elif server_card.quantity != card.quantity:
            diff.quantity_differences.append(
                QuantityDifference(
                    card_id=card.card_id,
                    variant=card.variant,
                    local_quantity=card.quantity,
                    server_quantity=server_card.quantity,
                )
            )

    diff.only_in_server.extend(card for key, card in server.items() if key not in local)

    return diff
