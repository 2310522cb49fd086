"""
Device identity resolution.

Each client installation gets one stable id, stored under a global key in
the persisted store and reused until explicitly reset. Type and name are
derived from an optional platform descriptor (typically a User-Agent).
"""

import logging
import re
import secrets
import string

from carddex.clock import now_ms
from carddex.config import settings
from carddex.db.store import KeyValueStore, StoreError
from carddex.models.records import DeviceRecord, DeviceType

logger = logging.getLogger(__name__)

DEVICE_ID_PREFIX = "device_"

_BASE36_ALPHABET = string.digits + string.ascii_lowercase
_RANDOM_SUFFIX_LENGTH = 13

_IOS_PATTERN = re.compile(r"iphone|ipad|ipod", re.IGNORECASE)
_ANDROID_PATTERN = re.compile(r"android", re.IGNORECASE)
_ANDROID_MODEL_PATTERN = re.compile(r"Android\s[\d.]+;\s*([^;)]+)")

# Checked in order; iPhone and iPad user agents also mention "Mac OS X"
_DEVICE_NAMES: tuple[tuple[str, str], ...] = (
    ("iPhone", "iPhone"),
    ("iPad", "iPad"),
    ("Windows", "Windows"),
    ("Mac", "Mac"),
    ("Linux", "Linux"),
)

UNKNOWN_DEVICE_NAME = "Unknown Device"
GENERIC_DEVICE_NAME = "Web Browser"


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


def generate_device_id() -> str:
    """
    Generate a fresh device id.

    Format: ``device_`` + random base-36 suffix + base-36 millisecond
    timestamp. Alphanumeric after the prefix.
    """
    random_part = "".join(secrets.choice(_BASE36_ALPHABET) for _ in range(_RANDOM_SUFFIX_LENGTH))
    return f"{DEVICE_ID_PREFIX}{random_part}{_to_base36(now_ms())}"


def get_or_create_device_id(store: KeyValueStore) -> str:
    """
    Return the stored device id, creating and persisting one if absent.

    When the store cannot persist the id, a fresh id is returned for this
    call only.
    """
    key = settings.device_id_key
    device_id: str | None = None
    try:
        device_id = store.get(key)
        if device_id:
            return device_id
        device_id = generate_device_id()
        store.set(key, device_id)
    except StoreError as exc:
        logger.warning(
            "device_id_not_persisted",
            extra={"key": key, "error": str(exc)},
        )
    return device_id or generate_device_id()


def reset_device_id(store: KeyValueStore) -> str:
    """Discard the stored device id and create a new one."""
    try:
        store.remove(settings.device_id_key)
    except StoreError as exc:
        logger.warning("device_id_not_removed", extra={"error": str(exc)})
    return get_or_create_device_id(store)


def detect_device_type(platform: str | None = None) -> DeviceType:
    """
    Classify the client from its platform descriptor.

    No descriptor at all means UNKNOWN; any descriptor that is neither iOS
    nor Android is treated as a web browser.
    """
    if not platform:
        return DeviceType.UNKNOWN
    if _IOS_PATTERN.search(platform):
        return DeviceType.IOS
    if _ANDROID_PATTERN.search(platform):
        return DeviceType.ANDROID
    return DeviceType.WEB


def get_device_name(platform: str | None = None) -> str:
    """Short human label for the client, e.g. "iPhone" or "Windows"."""
    if not platform:
        return UNKNOWN_DEVICE_NAME

    if "Android" in platform:
        match = _ANDROID_MODEL_PATTERN.search(platform)
        return match.group(1).strip() if match else "Android Device"

    for marker, name in _DEVICE_NAMES:
        if marker in platform:
            return name

    return GENERIC_DEVICE_NAME


def resolve_device(store: KeyValueStore, platform: str | None = None) -> DeviceRecord:
    """Build the device record for this installation."""
    return DeviceRecord(
        id=get_or_create_device_id(store),
        type=detect_device_type(platform),
        name=get_device_name(platform),
    )
