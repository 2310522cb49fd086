"""
Health and sync-status messaging.

Pure formatting helpers for presentation layers. Nothing here is stored:
each status is recomputed from fresh inputs on every call.

Staleness buckets are split at 24 hours, 7 days and 30 days. An elapsed
time exactly on an edge falls into the older bucket (comparisons are
strict ``<`` against each edge).
"""

from carddex.clock import from_ms, now_ms
from carddex.config import (
    DAY_MS,
    HOUR_MS,
    MINUTE_MS,
    RECENT_SYNC_MS,
    RELATIVE_TIME_LIMIT_MS,
    STALE_SYNC_MS,
)
from carddex.models.records import DataStats
from carddex.models.reports import (
    COLLECTION_KINDS,
    DataHealthStatus,
    DiscrepancyReport,
    SyncStatusMessage,
    SyncUrgency,
)

HEALTH_MESSAGES: dict[DataHealthStatus, str] = {
    DataHealthStatus.HEALTHY: "Your collection data is safe and synced across all devices.",
    DataHealthStatus.WARNING: "Some data may not be synced. Please check your connection.",
    DataHealthStatus.ERROR: (
        "There may be an issue with your data. Please contact support if this persists."
    ),
    DataHealthStatus.EMPTY: (
        "No collection data found. Start adding cards to build your collection!"
    ),
    DataHealthStatus.UNKNOWN: "Unable to verify data status. Please try again.",
}

HEALTH_COLORS: dict[DataHealthStatus, str] = {
    DataHealthStatus.HEALTHY: "green",
    DataHealthStatus.WARNING: "yellow",
    DataHealthStatus.ERROR: "red",
    DataHealthStatus.EMPTY: "gray",
    DataHealthStatus.UNKNOWN: "gray",
}


def _coerce_status(status: DataHealthStatus | str) -> DataHealthStatus:
    try:
        return DataHealthStatus(status)
    except ValueError:
        return DataHealthStatus.UNKNOWN


def get_data_health_message(status: DataHealthStatus | str) -> str:
    """User-facing copy for a health status. Unrecognized values read as unknown."""
    return HEALTH_MESSAGES[_coerce_status(status)]


def get_data_health_color(status: DataHealthStatus | str) -> str:
    """Color token for a health status."""
    return HEALTH_COLORS[_coerce_status(status)]


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'}"


def format_sync_time(timestamp: int | None, now: int | None = None) -> str:
    """
    Relative description of a sync time.

    "Never", "Just now", "N minutes ago", "N hours ago", "N days ago", and
    past one week an absolute date such as "Jan 2, 2026" (UTC).
    """
    if not timestamp:
        return "Never"

    elapsed = (now if now is not None else now_ms()) - timestamp

    if elapsed < MINUTE_MS:
        return "Just now"
    if elapsed < HOUR_MS:
        return f"{_plural(elapsed // MINUTE_MS, 'minute')} ago"
    if elapsed < DAY_MS:
        return f"{_plural(elapsed // HOUR_MS, 'hour')} ago"
    if elapsed < RELATIVE_TIME_LIMIT_MS:
        return f"{_plural(elapsed // DAY_MS, 'day')} ago"

    synced = from_ms(timestamp)
    return f"{synced:%b} {synced.day}, {synced.year}"


def get_sync_status_message(last_sync: int | None, now: int | None = None) -> SyncStatusMessage:
    """Classify how stale the last verified sync is."""
    if not last_sync:
        return SyncStatusMessage(
            message=(
                "Your data has never been verified. "
                "Create a backup point to ensure data safety."
            ),
            urgency=SyncUrgency.HIGH,
        )

    elapsed = (now if now is not None else now_ms()) - last_sync

    if elapsed < RECENT_SYNC_MS:
        return SyncStatusMessage(
            message="Your data was recently verified and is secure.",
            urgency=SyncUrgency.NONE,
        )
    if elapsed < RELATIVE_TIME_LIMIT_MS:
        return SyncStatusMessage(
            message="Your data is synced. Consider creating a backup point.",
            urgency=SyncUrgency.LOW,
        )
    if elapsed < STALE_SYNC_MS:
        return SyncStatusMessage(
            message=(
                "It has been a while since your last sync. We recommend verifying your data."
            ),
            urgency=SyncUrgency.MEDIUM,
        )
    return SyncStatusMessage(
        message="It has been over a month since your last sync. Please verify your data.",
        urgency=SyncUrgency.HIGH,
    )


def format_data_stats(stats: DataStats) -> str:
    """
    One-line summary, e.g. "20 cards, 10 unique, 3 wishlist items, 2 achievements".

    Clauses with a zero count are left out; all zero gives "No data".
    """
    parts: list[str] = []

    if stats.collection_cards > 0:
        parts.append(f"{stats.total_quantity} cards")
    if stats.unique_card_ids > 0:
        parts.append(f"{stats.unique_card_ids} unique")
    if stats.wishlist_cards > 0:
        parts.append(f"{stats.wishlist_cards} wishlist items")
    if stats.achievements > 0:
        parts.append(f"{stats.achievements} achievements")

    if not parts:
        return "No data"
    return ", ".join(parts)


def derive_health_status(report: DiscrepancyReport | None, stats: DataStats) -> DataHealthStatus:
    """
    Classify overall health from a comparison.

    No comparison available is UNKNOWN. A clean comparison is HEALTHY, or
    EMPTY when there is nothing stored. Collection disagreements are ERROR;
    anything else (checksum only, wishlist, achievements) is WARNING.
    """
    if report is None:
        return DataHealthStatus.UNKNOWN
    if report.is_valid:
        return DataHealthStatus.EMPTY if stats.is_empty else DataHealthStatus.HEALTHY
    if COLLECTION_KINDS.intersection(report.kinds):
        return DataHealthStatus.ERROR
    return DataHealthStatus.WARNING
