"""
Structural validation of persistence records and snapshots.

Validation never raises. Every problem found is appended to the result so
a caller can show them all at once; schema-version drift is reported as a
warning because an older snapshot is still usable.
"""

import math
import re
from collections.abc import Mapping
from typing import Any

from carddex.config import INTEGRITY_VERSION
from carddex.models.records import VALID_VARIANTS, DataSnapshot, PersistenceCard
from carddex.models.reports import SnapshotValidationResult, ValidationResult

# "<set>-<number>" or a single unseparated token of two or more characters
_SEPARATED_CARD_ID = re.compile(r"^[A-Za-z0-9]+-[A-Za-z0-9]+$")
_PLAIN_CARD_ID = re.compile(r"^[A-Za-z0-9]{2,}$")

_STATS_FIELDS = ("collectionCards", "totalQuantity", "uniqueCardIds")


def is_valid_card_id(card_id: Any) -> bool:
    """Check a card id such as "sv1-25" or "sv1001"."""
    if not isinstance(card_id, str) or not card_id:
        return False
    return bool(_SEPARATED_CARD_ID.match(card_id) or _PLAIN_CARD_ID.match(card_id))


def is_valid_variant(variant: Any) -> bool:
    """Check membership in the five known print variants."""
    return isinstance(variant, str) and variant in VALID_VARIANTS


def is_valid_quantity(quantity: Any) -> bool:
    """Check for a strictly positive integer. Floats and booleans are rejected."""
    return isinstance(quantity, int) and not isinstance(quantity, bool) and quantity >= 1


def _is_number(value: Any) -> bool:
    """Any finite JSON number. Booleans are not numbers here."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    return math.isfinite(value)


def _as_mapping(candidate: Any) -> Mapping[str, Any] | None:
    if isinstance(candidate, PersistenceCard | DataSnapshot):
        return candidate.to_dict()
    if isinstance(candidate, Mapping):
        return candidate
    return None


def validate_persistence_card(candidate: Any) -> ValidationResult:
    """
    Validate one card record of unknown shape.

    Accepts a PersistenceCard or a mapping with camelCase keys. Each failed
    check adds one error naming the field ("card ID", "variant", "quantity").
    """
    card = _as_mapping(candidate)
    if card is None:
        return ValidationResult(is_valid=False, errors=["Invalid card format"])

    errors: list[str] = []

    card_id = card.get("cardId")
    if not is_valid_card_id(card_id):
        errors.append(f"Invalid card ID: {card_id!r}")

    variant = card.get("variant")
    if not is_valid_variant(variant):
        errors.append(f"Invalid variant: {variant!r}")

    quantity = card.get("quantity")
    if not is_valid_quantity(quantity):
        errors.append(f"Invalid quantity: {quantity!r}")

    return ValidationResult(is_valid=not errors, errors=errors)


def _collection_stats_warning(collection: list[Any], stats: Any) -> str | None:
    """Compare stored collection stats with ones recomputed from the cards."""
    if not isinstance(stats, Mapping):
        return None
    recomputed = {
        "collectionCards": len(collection),
        "totalQuantity": sum(card["quantity"] for card in collection),
        "uniqueCardIds": len({card["cardId"] for card in collection}),
    }
    mismatched = [name for name in _STATS_FIELDS if stats.get(name) != recomputed[name]]
    if not mismatched:
        return None
    return f"Stored stats do not match collection contents: {', '.join(mismatched)}"


def validate_data_snapshot(candidate: Any) -> SnapshotValidationResult:
    """
    Validate a snapshot envelope of unknown shape.

    Errors: missing or non-numeric checksum (any finite number passes; the
    type check on load is stricter), missing/invalid collection, and every
    card error prefixed with its index. Warnings: version drift, stored
    stats that disagree with the collection.
    """
    snapshot = _as_mapping(candidate)
    if snapshot is None:
        return SnapshotValidationResult(is_valid=False, errors=["Invalid snapshot format"])

    errors: list[str] = []
    warnings: list[str] = []

    version = snapshot.get("version")
    if isinstance(version, bool) or version != INTEGRITY_VERSION:
        warnings.append(
            f"Snapshot version {version!r} may not be compatible with "
            f"current version {INTEGRITY_VERSION}"
        )

    if not _is_number(snapshot.get("checksum")):
        errors.append("Missing or invalid checksum")

    collection = snapshot.get("collection")
    if not isinstance(collection, list):
        errors.append("Missing or invalid collection array")
    else:
        collection_valid = True
        for index, card in enumerate(collection):
            result = validate_persistence_card(card)
            if not result.is_valid:
                collection_valid = False
                errors.extend(f"Card {index}: {error}" for error in result.errors)

        if collection_valid:
            cards = [_as_mapping(card) for card in collection]
            warning = _collection_stats_warning(cards, snapshot.get("stats"))
            if warning:
                warnings.append(warning)

    return SnapshotValidationResult(is_valid=not errors, errors=errors, warnings=warnings)
