"""
Calendar day helpers.

A CalendarDay is a plain ``datetime.date``. Every conversion from a timestamp
to a day goes through ``to_calendar_day`` and uses UTC as the reference frame,
so the day a guest picked and the day the server stores never drift apart.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

ONE_DAY = timedelta(days=1)
SECONDS_PER_DAY = 24 * 60 * 60


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_calendar_day(value) -> date:
    """
    Truncate a timestamp to its calendar day (UTC).

    Accepts ``date``, ``datetime`` or an ISO-8601 string. Aware datetimes are
    converted to UTC first; naive datetimes are taken to already be UTC.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return to_calendar_day(datetime.fromisoformat(text.replace('Z', '+00:00')))
        except ValueError:
            return date.fromisoformat(text[:10])
    raise TypeError(f"Cannot convert {type(value).__name__} to a calendar day")


def day_start(day: date) -> datetime:
    """Midnight UTC at the beginning of ``day``."""
    return datetime.combine(to_calendar_day(day), time.min, tzinfo=timezone.utc)


def same_day(a, b) -> bool:
    left, right = to_calendar_day(a), to_calendar_day(b)
    return (left.year, left.month, left.day) == (right.year, right.month, right.day)


def enumerate_days(dates) -> list[date]:
    """
    Every calendar day from ``dates.start_date`` through ``dates.end_date``.

    Both ends are inclusive. The range type guarantees start <= end, so the
    loop always terminates; calling it twice yields the same list.
    """
    current = dates.start_date
    days = []
    while current <= dates.end_date:
        days.append(current)
        current += ONE_DAY
    return days


def days_between(later: datetime, earlier: datetime) -> float:
    """Fractional number of days from ``earlier`` to ``later``"""
    return (later - earlier).total_seconds() / SECONDS_PER_DAY
