"""Booking event subscribers that keep the earnings ledger in step."""

import logging

from apps.bookings.domain.events import (
    BookingCancelled,
    BookingCompleted,
    BookingPaymentReceived,
)

from . import services

logger = logging.getLogger(__name__)


def on_payment_received(event: BookingPaymentReceived):
    services.record_earning(event.booking_id)


def on_booking_completed(event: BookingCompleted):
    services.make_available(event.booking_id)


def on_booking_cancelled(event: BookingCancelled):
    services.settle_cancellation(event.booking_id, event.refund_amount)


SUBSCRIPTIONS = (
    (BookingPaymentReceived, on_payment_received),
    (BookingCompleted, on_booking_completed),
    (BookingCancelled, on_booking_cancelled),
)


def register_handlers(bus) -> None:
    for event_type, handler in SUBSCRIPTIONS:
        bus.register_event_handler(event_type, handler)
    logger.debug(f"Registered {len(SUBSCRIPTIONS)} earnings handlers")
