"""Utilities for datetime handling."""

from datetime import UTC, datetime


def now_utc() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


def to_iso(dt: datetime) -> str:
    """Convert datetime to the stored timestamp format.

    Timestamps are UTC with millisecond precision and a ``Z`` suffix
    (e.g. ``2024-05-01T09:30:00.125Z``) so they sort lexically.
    """
    dt = dt.astimezone(UTC)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def now_iso() -> str:
    """Current UTC time in the stored timestamp format."""
    return to_iso(now_utc())


def from_iso(value: str) -> datetime:
    """Parse ISO format string to datetime."""
    # Handle both 'Z' suffix and explicit timezone
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
