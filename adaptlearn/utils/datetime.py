# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities for adaptlearn.

All history records carry timezone-aware UTC datetimes. Repository adapters
normalize whatever their backend returns through ensure_utc(), and every
duration or day-distance calculation in the engine goes through the helpers
below so naive/aware mixing cannot happen inside the analysis code.

Usage:
------
    from adaptlearn.utils.datetime import utc_now, minutes_between

    stamped_at = utc_now()
    duration = minutes_between(session.start_time, session.end_time)
"""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime representing current UTC time.

    Example:
        >>> now = utc_now()
        >>> now.tzinfo
        datetime.timezone.utc
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure a datetime is timezone-aware UTC.

    Args:
        dt: A datetime object (naive or aware) or None.

    Returns:
        Timezone-aware UTC datetime or None.

    Note:
        - If dt is None, returns None
        - If dt is naive, assumes UTC and adds tzinfo
        - If dt is aware, converts to UTC
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        # Naive datetime - assume UTC
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def minutes_between(start: datetime, end: datetime) -> float:
    """Get the elapsed minutes between two datetimes.

    Args:
        start: Start of the interval.
        end: End of the interval.

    Returns:
        Elapsed minutes (negative if end precedes start).
    """
    return (ensure_utc(end) - ensure_utc(start)).total_seconds() / 60


def days_until(target: date, today: date | None = None) -> int:
    """Get the number of whole days from today until a calendar date.

    Args:
        target: The calendar date to count towards.
        today: Reference date (defaults to the current UTC date).

    Returns:
        Days remaining; zero on the day itself, negative once passed.
    """
    reference = today or utc_now().date()
    return (target - reference).days
