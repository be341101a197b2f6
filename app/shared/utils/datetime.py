"""UTC datetime helper. All datetimes in the system are timezone-aware UTC."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Return the current UTC datetime with timezone info (never naive)."""
    return datetime.now(UTC)
