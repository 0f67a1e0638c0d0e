"""
Booking event subscribers that queue notification emails

Queueing is fire-and-forget: if the broker is down the failure is logged
and the booking change stays committed.
"""

import logging

from apps.bookings.domain.events import (
    BookingCancelled,
    BookingConfirmed,
    BookingCreated,
    BookingPaymentReceived,
    BookingRejected,
)

from .tasks import send_booking_email

logger = logging.getLogger(__name__)


def _enqueue(booking_id, kind: str, extra: dict | None = None):
    try:
        send_booking_email.delay(str(booking_id), kind, extra or {})
    except Exception as e:
        logger.error(f"Could not queue '{kind}' email for booking {booking_id}: {e}", exc_info=True)


def on_booking_created(event: BookingCreated):
    _enqueue(event.booking_id, "created")


def on_booking_confirmed(event: BookingConfirmed):
    _enqueue(event.booking_id, "confirmed")


def on_booking_rejected(event: BookingRejected):
    _enqueue(event.booking_id, "rejected")


def on_payment_received(event: BookingPaymentReceived):
    _enqueue(event.booking_id, "payment_received")


def on_booking_cancelled(event: BookingCancelled):
    _enqueue(event.booking_id, "cancelled", {"old_status": event.old_status})


SUBSCRIPTIONS = (
    (BookingCreated, on_booking_created),
    (BookingConfirmed, on_booking_confirmed),
    (BookingRejected, on_booking_rejected),
    (BookingPaymentReceived, on_payment_received),
    (BookingCancelled, on_booking_cancelled),
)


def register_handlers(bus) -> None:
    for event_type, handler in SUBSCRIPTIONS:
        bus.register_event_handler(event_type, handler)
