"""
Booking Command Handlers

These are the use cases for the booking domain.
They orchestrate domain operations within transactions.

Commands:
- CreateBookingCommand: A guest requests a booking
- TransitionBookingCommand: Confirm, reject, mark paid, complete or cancel
- DeleteBookingCommand: Admin cleanup of a non-confirmed booking
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional
from uuid import UUID
import logging

from apps.bookings.domain.entities import Booking, PaymentMethod, Transition
from apps.bookings.infrastructure.repositories import DjangoBookingRepository
from apps.bookings.services import AvailabilityService, service_fee_rate
from apps.rooms.infrastructure.repositories import DjangoRoomRepository
from shared.application.uow import DjangoUnitOfWork
from shared.domain.calendar import utc_now
from shared.domain.identity import Actor
from shared.domain.value_objects import DateRange

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass
class CreateBookingCommand:
    """
    Command to create a new booking

    This is the primary entry point for creating bookings.
    """
    room_id: UUID
    guest_id: int
    check_in: date
    check_out: date
    guest_count: int = 1
    payment_method: PaymentMethod = PaymentMethod.IN_PERSON
    check_in_time: str = ''
    check_out_time: str = ''
    special_requests: str = ''
    now: Optional[datetime] = None


@dataclass
class TransitionBookingCommand:
    """Command to move a booking through its lifecycle"""
    booking_id: UUID
    actor: Actor
    transition: Transition
    reason: str = ''
    now: Optional[datetime] = None


@dataclass
class DeleteBookingCommand:
    booking_id: UUID
    actor: Actor


# ===== Command Handlers =====

class CreateBookingHandler:
    """
    Handler for CreateBooking command

    Double booking prevention, in order:
    1. Start database transaction (atomic)
    2. Lock the room row (SELECT FOR UPDATE where supported)
    3. Re-read availability and check the requested days in the domain
    4. Insert the booking and one BookedDay row per day
    5. A unique violation on (room, day) becomes ConflictError
    6. Publish BookingCreated after commit
    """

    def __init__(self, booking_repo=None, room_repo=None, availability=None):
        self.booking_repo = booking_repo or DjangoBookingRepository()
        self.room_repo = room_repo or DjangoRoomRepository()
        self.availability = availability or AvailabilityService(self.room_repo, self.booking_repo)

    def handle(self, command: CreateBookingCommand) -> Booking:
        """
        Handle booking creation

        Returns: Created Booking aggregate

        Raises:
            NotFound: Room does not exist
            ValidationError: Invalid dates, guest count or room state
            ConflictError: Requested days are unavailable
        """
        dates = DateRange(command.check_in, command.check_out)
        logger.info(
            f"Creating booking for room {command.room_id}, "
            f"guest {command.guest_id}, dates {dates}"
        )

        with DjangoUnitOfWork() as uow:
            room = self.room_repo.get(command.room_id, lock=True)
            check = self.availability.refresh_and_check(command.room_id, dates)

            booking = Booking.request(
                room=room,
                guest_id=command.guest_id,
                dates=dates,
                unavailable_days=check.unavailable_days,
                guest_count=command.guest_count,
                payment_method=command.payment_method,
                check_in_time=command.check_in_time,
                check_out_time=command.check_out_time,
                special_requests=command.special_requests,
                now=command.now or utc_now(),
                service_fee_rate=service_fee_rate(),
            )

            self.booking_repo.add(booking)
            uow.collect_events(booking)

        logger.info(
            f"Booking created successfully: {booking.id} "
            f"(total {booking.total_price})"
        )
        return booking


class TransitionBookingHandler:
    """
    Handler for every lifecycle transition

    The booking row is locked for the duration of the transition, so two
    concurrent transitions on one booking apply one after the other.
    """

    def __init__(self, booking_repo=None):
        self.booking_repo = booking_repo or DjangoBookingRepository()

    def handle(self, command: TransitionBookingCommand) -> Booking:
        logger.info(
            f"Applying {command.transition.value} to booking {command.booking_id} "
            f"(actor {command.actor.user_id})"
        )

        with DjangoUnitOfWork() as uow:
            booking = self.booking_repo.get_by_id(command.booking_id, lock=True)
            booking.apply(
                command.transition,
                command.actor,
                reason=command.reason,
                now=command.now or utc_now(),
            )
            self.booking_repo.save(booking)
            uow.collect_events(booking)

        logger.info(f"Booking {booking.id} is now {booking.status.value}")
        return booking


class DeleteBookingHandler:
    """Handler for admin cleanup of bookings"""

    def __init__(self, booking_repo=None):
        self.booking_repo = booking_repo or DjangoBookingRepository()

    def handle(self, command: DeleteBookingCommand) -> None:
        with DjangoUnitOfWork():
            booking = self.booking_repo.get_by_id(command.booking_id, lock=True)
            booking.ensure_deletable(command.actor)
            self.booking_repo.delete(booking.id)

        logger.warning(
            f"Booking {command.booking_id} ({booking.status.value}) deleted by admin {command.actor.user_id}"
        )


def register_handlers(bus) -> None:
    """Wire the booking use cases onto the message bus"""
    bus.register_command_handler(CreateBookingCommand, CreateBookingHandler().handle)
    bus.register_command_handler(TransitionBookingCommand, TransitionBookingHandler().handle)
    bus.register_command_handler(DeleteBookingCommand, DeleteBookingHandler().handle)
