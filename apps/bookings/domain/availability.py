"""
Room availability and conflict detection

Everything here is pure: callers pass in a freshly read room and its
bookings, and get back a snapshot that is never cached. The storage-level
guard on booked days (see the booking repository) backs this up against
writers that commit between the read and the insert.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

from apps.rooms.domain.entities import Room
from shared.domain.value_objects import DateRange


@dataclass(frozen=True)
class AvailabilityCheck:
    """Result of re-checking a candidate range against current data"""
    conflict: bool
    unavailable_days: list = field(default_factory=list)
    conflicting_days: list = field(default_factory=list)
    selection: DateRange | None = None


def compute_unavailable_days(room: Room, active_bookings: Iterable, window: DateRange | None = None) -> list[date]:
    """
    Union of the host's blocked days and every day of every active booking

    Bookings that are no longer active (cancelled, rejected) are skipped even
    if the caller passes them in. Result is sorted ascending and, when
    ``window`` is given, restricted to the days inside it.
    """
    days = set(room.unavailable_dates)
    for booking in active_bookings:
        if not booking.is_active:
            continue
        days.update(booking.dates.days())

    if window is not None:
        days = {day for day in days if window.contains(day)}
    return sorted(days)


def has_conflict(candidate: DateRange, unavailable_days: Iterable[date]) -> bool:
    """True as soon as one unavailable day falls inside ``candidate``"""
    return any(candidate.contains(day) for day in unavailable_days)


def conflicting_days(candidate: DateRange, unavailable_days: Iterable[date]) -> list[date]:
    return sorted({day for day in unavailable_days if candidate.contains(day)})


def refresh_and_check(room: Room, active_bookings: Iterable, candidate: DateRange) -> AvailabilityCheck:
    """
    Recompute the room's unavailable days and test ``candidate`` against them

    When the candidate overlaps, ``selection`` is dropped so the caller
    cannot carry a stale selection forward.
    """
    unavailable = compute_unavailable_days(room, active_bookings)
    clashes = conflicting_days(candidate, unavailable)
    return AvailabilityCheck(
        conflict=bool(clashes),
        unavailable_days=unavailable,
        conflicting_days=clashes,
        selection=None if clashes else candidate,
    )
