"""Celery tasks for booking notifications."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from apps.bookings.models import Booking

from .services import send_booking_emails

logger = logging.getLogger(__name__)


@shared_task(name="notifications.send_booking_email")
def send_booking_email(booking_id: str, kind: str, extra: dict | None = None) -> bool:
    """Отправляет письма гостю и хозяину о событии бронирования."""

    try:
        booking = Booking.objects.select_related("room", "guest", "host").get(pk=booking_id)
    except Booking.DoesNotExist:
        logger.warning(f"Booking {booking_id} not found, '{kind}' email skipped")
        return False

    return send_booking_emails(booking, kind, extra)
