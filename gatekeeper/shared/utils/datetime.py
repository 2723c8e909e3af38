"""
UTC datetime utilities for consistent timezone handling.

All datetime values stored by the engine are timezone-aware UTC. SQLite
hands back naive datetimes, so comparisons go through ensure_utc().
"""

from datetime import UTC, datetime, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC

    Args:
        dt: A datetime that may be naive or aware

    Returns:
        UTC-aware datetime or None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def is_expired(expires_at: datetime | None, now: datetime | None = None) -> bool:
    """Return True when expires_at is set and not in the future."""
    if expires_at is None:
        return False
    return ensure_utc(expires_at) <= (now or utc_now())


def resolve_timezone(name: str) -> tzinfo:
    """Return tzinfo for an IANA zone name.

    "UTC" resolves without the system tz database.

    Raises:
        ValueError: If the zone is unknown.
    """
    if name.upper() == "UTC":
        return UTC
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown timezone: {name!r}") from e
