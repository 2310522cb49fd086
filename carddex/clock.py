"""Wall-clock helpers. All persisted timestamps are integer unix milliseconds."""

from datetime import UTC, datetime


def now_ms() -> int:
    """Current time as unix milliseconds."""
    return int(datetime.now(UTC).timestamp() * 1000)


def from_ms(timestamp: int) -> datetime:
    """Convert unix milliseconds to an aware UTC datetime."""
    return datetime.fromtimestamp(timestamp / 1000, tz=UTC)
