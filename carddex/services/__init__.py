"""
CardDex services.

Integrity checks and reconciliation between the local cache and the server.
"""

from carddex.services.checksum import (
    compute_achievement_checksum,
    compute_collection_checksum,
    compute_full_checksum,
    compute_stats,
    compute_wishlist_checksum,
    hash_code,
)
from carddex.services.device import (
    detect_device_type,
    generate_device_id,
    get_device_name,
    get_or_create_device_id,
    reset_device_id,
    resolve_device,
)
from carddex.services.discrepancy import compare_checksums, diff_collections
from carddex.services.health import (
    derive_health_status,
    format_data_stats,
    format_sync_time,
    get_data_health_color,
    get_data_health_message,
    get_sync_status_message,
)
from carddex.services.reconcile import (
    CheckpointResult,
    ReconciliationResult,
    record_checkpoint,
    verify_against_server,
)
from carddex.services.snapshot import (
    clear_local_persistence_data,
    create_snapshot,
    get_local_checksum,
    get_local_snapshot,
    save_local_checksum,
    save_local_snapshot,
)
from carddex.services.validator import (
    is_valid_card_id,
    is_valid_quantity,
    is_valid_variant,
    validate_data_snapshot,
    validate_persistence_card,
)

__all__ = [
    # Checksum engine
    "hash_code",
    "compute_collection_checksum",
    "compute_wishlist_checksum",
    "compute_achievement_checksum",
    "compute_stats",
    "compute_full_checksum",
    # Device identity
    "generate_device_id",
    "get_or_create_device_id",
    "reset_device_id",
    "detect_device_type",
    "get_device_name",
    "resolve_device",
    # Local snapshot store
    "save_local_checksum",
    "get_local_checksum",
    "save_local_snapshot",
    "get_local_snapshot",
    "clear_local_persistence_data",
    "create_snapshot",
    # Validation
    "is_valid_card_id",
    "is_valid_variant",
    "is_valid_quantity",
    "validate_persistence_card",
    "validate_data_snapshot",
    # Discrepancies
    "compare_checksums",
    "diff_collections",
    # Messaging
    "get_data_health_message",
    "get_data_health_color",
    "format_sync_time",
    "get_sync_status_message",
    "format_data_stats",
    "derive_health_status",
    # Reconciliation
    "CheckpointResult",
    "ReconciliationResult",
    "record_checkpoint",
    "verify_against_server",
]
