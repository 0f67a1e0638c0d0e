"""Availability reads for booking workflows."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List
from uuid import UUID

from django.conf import settings  # type: ignore

from apps.bookings.domain.availability import (
    AvailabilityCheck,
    compute_unavailable_days,
    refresh_and_check,
)
from apps.bookings.domain.entities import Booking
from apps.bookings.domain.pricing import SERVICE_FEE_RATE
from apps.bookings.infrastructure.repositories import DjangoBookingRepository
from apps.rooms.domain.entities import Room
from apps.rooms.infrastructure.repositories import DjangoRoomRepository
from shared.domain.value_objects import DateRange

logger = logging.getLogger(__name__)


def service_fee_rate() -> Decimal:
    return Decimal(str(getattr(settings, "SPACEBOOK_SERVICE_FEE_RATE", SERVICE_FEE_RATE)))


@dataclass(frozen=True)
class AvailabilitySnapshot:
    """Unavailable days of a room, computed from a fresh read"""

    room: Room
    active_bookings: List[Booking]
    unavailable_days: List[date]


class AvailabilityService:
    """Single entry point for reading room availability.

    Every call re-reads the room and its active bookings; nothing is cached
    between calls, so a selection checked here reflects the latest writes.
    """

    def __init__(self, room_repo=None, booking_repo=None):
        self.room_repo = room_repo or DjangoRoomRepository()
        self.booking_repo = booking_repo or DjangoBookingRepository()

    def snapshot(self, room_id: UUID, window: DateRange | None = None) -> AvailabilitySnapshot:
        room = self.room_repo.get(room_id)
        active = self.booking_repo.active_for_room(room_id, window)
        return AvailabilitySnapshot(
            room=room,
            active_bookings=active,
            unavailable_days=compute_unavailable_days(room, active, window),
        )

    def refresh_and_check(self, room_id: UUID, candidate: DateRange) -> AvailabilityCheck:
        room = self.room_repo.get(room_id)
        active = self.booking_repo.active_for_room(room_id)
        check = refresh_and_check(room, active, candidate)
        if check.conflict:
            logger.info(
                f"Room {room_id}: selection {candidate} conflicts on "
                f"{len(check.conflicting_days)} day(s)"
            )
        return check
