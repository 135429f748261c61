"""
Core Utilities.

Shared utility functions used across the backend.
"""

from datetime import datetime, time, timedelta, timezone


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the application are timezone-naive and assumed
    to be UTC. This keeps SQLite and PostgreSQL storage consistent.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def local_day_bounds_utc(now: datetime | None = None) -> tuple[datetime, datetime]:
    """
    Return the current local calendar day as a naive-UTC [start, end) range.

    The day boundary is midnight in the server's local timezone.

    Args:
        now: Aware "current" instant; defaults to the real current time.
    """
    local_now = (now or datetime.now(timezone.utc)).astimezone()
    start_local = datetime.combine(local_now.date(), time.min, tzinfo=local_now.tzinfo)
    end_local = start_local + timedelta(days=1)
    return (
        start_local.astimezone(timezone.utc).replace(tzinfo=None),
        end_local.astimezone(timezone.utc).replace(tzinfo=None),
    )
