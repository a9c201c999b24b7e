"""
Calendar helpers for lot age and harvest-date arithmetic.

Lot ages are counted in whole calendar days between midnights, not in
24-hour spans: a lot born at 23:00 yesterday is one day old today. Every
helper therefore normalises ``datetime`` inputs to their ``date`` first.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone


def to_date(value: date | datetime) -> date:
    """Return the calendar date of ``value`` (``datetime`` → ``.date()``)."""
    if isinstance(value, datetime):
        return value.date()
    return value


def days_between(start: date | datetime, end: date | datetime) -> int:
    """Return signed whole calendar days from ``start`` to ``end``.

    Args:
        start: Earlier date (e.g. a lot's birth date).
        end:   Later date (e.g. today).

    Returns:
        ``(end - start).days`` after truncating both to midnight.
    """
    return (to_date(end) - to_date(start)).days


def add_days(start: date | datetime, days: int) -> date:
    """Return the calendar date ``days`` after ``start``."""
    return to_date(start) + timedelta(days=days)


def utcnow() -> datetime:
    """Return the current UTC datetime with timezone info.

    Prefer this over ``datetime.utcnow()`` (which returns naive datetimes).
    """
    return datetime.now(tz=timezone.utc)


def today() -> date:
    """Return today's local calendar date."""
    return date.today()
