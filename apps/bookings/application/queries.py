"""
Booking Queries

Read-only use cases. They never lock and never raise events.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from apps.bookings.domain.entities import CancellationQuote
from apps.bookings.infrastructure.repositories import DjangoBookingRepository
from apps.bookings.services import AvailabilityService
from shared.domain.calendar import utc_now
from shared.domain.exceptions import NotAuthorized
from shared.domain.identity import Actor
from shared.domain.value_objects import DateRange


def cancellation_quote(
    booking_id: UUID,
    actor: Actor,
    now: Optional[datetime] = None,
    booking_repo=None,
) -> CancellationQuote:
    """
    Would cancelling succeed for this actor right now, and for how much?

    Raises:
        NotFound: No such booking
        NotAuthorized: Actor is not a party to the booking
    """
    booking = (booking_repo or DjangoBookingRepository()).get_by_id(booking_id)
    if booking.party_of(actor) is None:
        raise NotAuthorized("Not authorized to view this booking")
    return booking.cancellation_quote(actor, now or utc_now())


def room_availability(
    room_id: UUID,
    window: Optional[DateRange] = None,
    candidate: Optional[DateRange] = None,
    availability: Optional[AvailabilityService] = None,
) -> dict:
    """
    Unavailable days of a room, and optionally a re-check of a selection

    Returns a plain dict ready for serialization:
    unavailable_days, active_bookings and, when ``candidate`` is given,
    conflict, conflicting_days and selection.
    """
    availability = availability or AvailabilityService()
    snapshot = availability.snapshot(room_id, window)
    result = {
        "room_id": room_id,
        "unavailable_days": snapshot.unavailable_days,
        "active_bookings": [
            {
                "id": booking.id,
                "check_in": booking.check_in,
                "check_out": booking.check_out,
                "status": booking.status.value,
            }
            for booking in snapshot.active_bookings
        ],
    }
    if candidate is not None:
        check = availability.refresh_and_check(room_id, candidate)
        result.update(
            conflict=check.conflict,
            conflicting_days=check.conflicting_days,
            selection=(
                {"check_in": check.selection.start_date, "check_out": check.selection.end_date}
                if check.selection
                else None
            ),
        )
    return result
