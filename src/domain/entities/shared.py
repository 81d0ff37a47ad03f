"""Shared utilities and helper functions for domain entities.

Pure utility functions with zero external dependencies.
"""

from datetime import UTC, date, datetime


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure datetime is timezone-aware with UTC."""
    if dt is None:
        return None
    return dt.replace(tzinfo=UTC) if dt.tzinfo is None else dt


def start_of_day(day: date) -> datetime:
    """Midnight UTC at the start of the given calendar day."""
    return datetime(day.year, day.month, day.day, tzinfo=UTC)
