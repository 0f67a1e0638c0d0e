"""Fixtures for booking domain tests."""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from apps.bookings.domain.entities import (
    Booking,
    BookingStatus,
    PaymentMethod,
    PaymentStatus,
)
from apps.rooms.domain.entities import Room, RoomType
from shared.domain.identity import Actor, ActorRole
from shared.domain.value_objects import DateRange, Money

GUEST_ID = 1
HOST_ID = 2
STRANGER_ID = 3
ADMIN_ID = 99

BOOKED_AT = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def guest() -> Actor:
    return Actor(GUEST_ID)


@pytest.fixture
def host() -> Actor:
    return Actor(HOST_ID)


@pytest.fixture
def stranger() -> Actor:
    return Actor(STRANGER_ID)


@pytest.fixture
def admin() -> Actor:
    return Actor(ADMIN_ID, ActorRole.ADMIN)


@pytest.fixture
def make_room():
    def factory(**overrides) -> Room:
        fields = {
            "id": uuid4(),
            "host_id": HOST_ID,
            "type": RoomType.STAY,
            "base_price": Money(Decimal("3500.00")),
            "max_guests": 4,
        }
        fields.update(overrides)
        return Room(**fields)

    return factory


@pytest.fixture
def make_booking(make_room):
    """Build a booking through ``Booking.request`` and then force its state."""

    def factory(
        check_in: date = date(2025, 3, 20),
        check_out: date = date(2025, 3, 22),
        *,
        room: Room | None = None,
        status: BookingStatus = BookingStatus.PENDING,
        payment_status: PaymentStatus = PaymentStatus.PENDING,
        payment_method: PaymentMethod = PaymentMethod.IN_PERSON,
        now: datetime = BOOKED_AT,
    ) -> Booking:
        booking = Booking.request(
            room=room or make_room(),
            guest_id=GUEST_ID,
            dates=DateRange(check_in, check_out),
            unavailable_days=[],
            payment_method=payment_method,
            now=now,
        )
        booking.clear_events()
        booking.status = status
        booking.payment_status = payment_status
        return booking

    return factory
