"""Tests for the availability index and the conflict detector."""

from __future__ import annotations

import random
from datetime import date, datetime, timedelta, timezone

import pytest

from apps.bookings.domain.availability import (
    compute_unavailable_days,
    conflicting_days,
    has_conflict,
    refresh_and_check,
)
from apps.bookings.domain.entities import Booking, BookingStatus
from shared.domain.exceptions import ConflictError
from shared.domain.value_objects import DateRange


def test_unavailable_days_union_blocks_and_bookings(make_room, make_booking) -> None:
    room = make_room(unavailable_dates={date(2025, 3, 25), "2025-03-18"})
    booking = make_booking(date(2025, 3, 20), date(2025, 3, 21), room=room)

    days = compute_unavailable_days(room, [booking])

    assert days == [date(2025, 3, 18), date(2025, 3, 20), date(2025, 3, 21), date(2025, 3, 25)]


def test_released_bookings_are_ignored(make_room, make_booking) -> None:
    room = make_room()
    cancelled = make_booking(room=room, status=BookingStatus.CANCELLED)
    rejected = make_booking(room=room, status=BookingStatus.REJECTED)
    completed = make_booking(date(2025, 3, 24), date(2025, 3, 25), room=room, status=BookingStatus.COMPLETED)

    assert compute_unavailable_days(room, [cancelled, rejected, completed]) == [date(2025, 3, 24), date(2025, 3, 25)]


def test_window_restricts_result(make_room) -> None:
    room = make_room(unavailable_dates={date(2025, 3, 1), date(2025, 3, 10), date(2025, 4, 1)})

    window = DateRange(date(2025, 3, 1), date(2025, 3, 31))

    assert compute_unavailable_days(room, [], window) == [date(2025, 3, 1), date(2025, 3, 10)]


def test_conflict_on_turnover_day() -> None:
    unavailable = [date(2025, 3, 22)]

    assert has_conflict(DateRange(date(2025, 3, 22), date(2025, 3, 24)), unavailable)
    assert not has_conflict(DateRange(date(2025, 3, 23), date(2025, 3, 24)), unavailable)
    assert conflicting_days(DateRange(date(2025, 3, 20), date(2025, 3, 30)), unavailable) == unavailable


def test_refresh_and_check_drops_conflicting_selection(make_room, make_booking) -> None:
    room = make_room()
    existing = make_booking(date(2025, 3, 20), date(2025, 3, 22), room=room)

    clash = refresh_and_check(room, [existing], DateRange(date(2025, 3, 21), date(2025, 3, 23)))
    clear = refresh_and_check(room, [existing], DateRange(date(2025, 3, 23), date(2025, 3, 24)))

    assert clash.conflict
    assert clash.selection is None
    assert clash.conflicting_days == [date(2025, 3, 21), date(2025, 3, 22)]
    assert not clear.conflict
    assert clear.selection == DateRange(date(2025, 3, 23), date(2025, 3, 24))


def test_random_requests_never_double_book(make_room, make_booking) -> None:
    rng = random.Random(7)
    room = make_room(unavailable_dates={date(2025, 4, 3), date(2025, 4, 17)})
    first_day = date(2025, 4, 1)
    accepted = []

    for _ in range(300):
        start = first_day + timedelta(days=rng.randint(0, 40))
        end = start + timedelta(days=rng.randint(1, 6))
        check = refresh_and_check(room, accepted, DateRange(start, end))
        if check.conflict:
            continue
        accepted.append(make_booking(start, end, room=room))

    for index, booking in enumerate(accepted):
        for other in accepted[index + 1:]:
            assert not booking.dates.overlaps_with(other.dates)
        assert not set(booking.dates.days()) & room.unavailable_dates

    # availability and bookings agree in both directions
    unavailable = set(compute_unavailable_days(room, accepted))
    booked = {day for booking in accepted for day in booking.dates.days()}
    assert booked <= unavailable
    assert unavailable == booked | room.unavailable_dates


def test_request_rejects_what_the_detector_flags(make_room, make_booking) -> None:
    room = make_room()
    existing = make_booking(date(2025, 3, 20), date(2025, 3, 22), room=room)
    unavailable = compute_unavailable_days(room, [existing])

    with pytest.raises(ConflictError) as excinfo:
        Booking.request(
            room=room,
            guest_id=1,
            dates=DateRange(date(2025, 3, 22), date(2025, 3, 24)),
            unavailable_days=unavailable,
            now=datetime(2025, 3, 1, tzinfo=timezone.utc),
        )
    assert excinfo.value.dates == [date(2025, 3, 22)]
