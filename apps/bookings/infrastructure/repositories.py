"""
Booking Repository

Persists the Booking aggregate to the ``bookings_booking`` table and keeps
``BookedDay`` rows in step with it: one row per (room, day) for every
active booking. The unique constraint on those rows is the last line of
defence against two concurrent writers booking the same day.
"""

import logging
from typing import List
from uuid import UUID

from django.db import IntegrityError, transaction

from apps.bookings import models
from apps.bookings.domain.entities import (
    Booking,
    BookingStatus,
    CancellationDetails,
    Party,
    PaymentDetails,
    PaymentMethod,
    PaymentStatus,
)
from apps.bookings.domain.pricing import PriceBreakdown
from apps.rooms.domain.entities import RoomType
from shared.domain.exceptions import ConflictError, NotFound
from shared.domain.value_objects import DateRange, Money
from shared.infrastructure.locking import lock_if_possible

logger = logging.getLogger(__name__)

ACTIVE_STATUSES = [s.value for s in BookingStatus if s.blocks_dates]


def to_domain(row: models.Booking) -> Booking:
    currency = row.currency

    def money(value):
        return Money(value, currency)

    cancellation = None
    if row.cancelled_at:
        cancellation = CancellationDetails(
            cancelled_at=row.cancelled_at,
            cancelled_by=Party(row.cancelled_by),
            reason=row.cancellation_reason,
            refund_amount=money(row.refund_amount) if row.refund_amount is not None else None,
        )
    payment = None
    if row.paid_at:
        payment = PaymentDetails(
            paid_at=row.paid_at,
            amount=money(row.paid_amount),
            recorded_by=row.payment_recorded_by_id,
        )

    return Booking(
        id=row.id,
        created_at=row.created_at,
        updated_at=row.updated_at,
        room_id=row.room_id,
        guest_id=row.guest_id,
        host_id=row.host_id,
        room_type=RoomType(row.room_type),
        dates=DateRange(row.check_in, row.check_out),
        price=PriceBreakdown(
            base_price=money(row.base_price),
            units=row.units,
            subtotal=money(row.subtotal),
            service_fee_rate=row.service_fee_rate,
            service_fee=money(row.service_fee),
            total=money(row.total_price),
        ),
        guest_count=row.guest_count,
        check_in_time=row.check_in_time,
        check_out_time=row.check_out_time,
        special_requests=row.special_requests,
        status=BookingStatus(row.status),
        payment_status=PaymentStatus(row.payment_status),
        payment_method=PaymentMethod(row.payment_method),
        is_cancellable=row.is_cancellable,
        cancellation_deadline=row.cancellation_deadline,
        cancellation=cancellation,
        payment=payment,
    )


def to_row_fields(booking: Booking) -> dict:
    cancellation = booking.cancellation
    payment = booking.payment
    return {
        "room_id": booking.room_id,
        "guest_id": booking.guest_id,
        "host_id": booking.host_id,
        "room_type": booking.room_type.value,
        "check_in": booking.dates.start_date,
        "check_out": booking.dates.end_date,
        "check_in_time": booking.check_in_time,
        "check_out_time": booking.check_out_time,
        "guest_count": booking.guest_count,
        "status": booking.status.value,
        "payment_status": booking.payment_status.value,
        "payment_method": booking.payment_method.value,
        "base_price": booking.price.base_price.amount,
        "units": booking.price.units,
        "subtotal": booking.price.subtotal.amount,
        "service_fee_rate": booking.price.service_fee_rate,
        "service_fee": booking.price.service_fee.amount,
        "total_price": booking.price.total.amount,
        "currency": booking.price.total.currency,
        "is_cancellable": booking.is_cancellable,
        "cancellation_deadline": booking.cancellation_deadline,
        "cancelled_at": cancellation.cancelled_at if cancellation else None,
        "cancelled_by": cancellation.cancelled_by.value if cancellation else "",
        "cancellation_reason": cancellation.reason if cancellation else "",
        "refund_amount": (
            cancellation.refund_amount.amount
            if cancellation and cancellation.refund_amount is not None
            else None
        ),
        "paid_at": payment.paid_at if payment else None,
        "paid_amount": payment.amount.amount if payment else None,
        "payment_recorded_by_id": payment.recorded_by if payment else None,
        "special_requests": booking.special_requests,
    }


class DjangoBookingRepository:
    """Django ORM persistence for the Booking aggregate"""

    def get_by_id(self, booking_id: UUID, *, lock: bool = False) -> Booking:
        """
        Raises:
            NotFound: No such booking
        """
        queryset = models.Booking.objects.filter(pk=booking_id)
        if lock:
            queryset = lock_if_possible(queryset)
        row = queryset.first()
        if row is None:
            raise NotFound(f"Booking {booking_id} not found")
        return to_domain(row)

    def active_for_room(self, room_id: UUID, window: DateRange | None = None) -> List[Booking]:
        """Bookings of the room that still block their days, oldest first"""
        queryset = models.Booking.objects.filter(room_id=room_id, status__in=ACTIVE_STATUSES)
        if window is not None:
            queryset = queryset.filter(check_in__lte=window.end_date, check_out__gte=window.start_date)
        return [to_domain(row) for row in queryset.order_by("check_in", "created_at")]

    def add(self, booking: Booking) -> None:
        """
        Insert a new booking and claim its days

        Raises:
            ConflictError: Another booking claimed one of the days first
        """
        with transaction.atomic():
            models.Booking.objects.create(id=booking.id, **to_row_fields(booking))
            self._claim_days(booking)
        logger.debug(f"Stored booking {booking.id} ({len(booking.dates)} days)")

    def save(self, booking: Booking) -> None:
        """Write back a changed booking; inactive bookings give their days up"""
        with transaction.atomic():
            updated = models.Booking.objects.filter(pk=booking.id).update(
                updated_at=booking.updated_at,
                **to_row_fields(booking),
            )
            if not updated:
                raise NotFound(f"Booking {booking.id} not found")
            if not booking.is_active:
                released, _ = models.BookedDay.objects.filter(booking_id=booking.id).delete()
                if released:
                    logger.info(f"Released {released} booked days of booking {booking.id}")

    def delete(self, booking_id: UUID) -> None:
        deleted, _ = models.Booking.objects.filter(pk=booking_id).delete()
        if not deleted:
            raise NotFound(f"Booking {booking_id} not found")

    def _claim_days(self, booking: Booking) -> None:
        days = booking.dates.days()
        try:
            with transaction.atomic():
                models.BookedDay.objects.bulk_create(
                    [models.BookedDay(room_id=booking.room_id, booking_id=booking.id, day=day) for day in days]
                )
        except IntegrityError as exc:
            taken = list(
                models.BookedDay.objects.filter(room_id=booking.room_id, day__in=days)
                .values_list("day", flat=True)
            )
            logger.warning(
                f"Storage guard rejected booking {booking.id} for room {booking.room_id}: "
                f"{len(taken) or 'unknown'} days already taken"
            )
            raise ConflictError(dates=taken or days) from exc
