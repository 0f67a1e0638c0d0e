"""Notification services for booking emails."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.conf import settings  # type: ignore
from django.core.mail import send_mail  # type: ignore
from django.utils.html import strip_tags  # type: ignore

if TYPE_CHECKING:  # pragma: no cover
    from apps.bookings.models import Booking

logger = logging.getLogger(__name__)


# ============================================================================
# EMAIL DELIVERY
# ============================================================================

def send_email_notification(
    recipient_email: str,
    subject: str,
    html_message: str,
) -> bool:
    """
    Send one HTML email with a plain-text fallback.

    Returns:
        bool: True if the message was handed to the email backend
    """
    if not recipient_email:
        logger.warning(f"Skipping email without recipient: {subject}")
        return False

    try:
        send_mail(
            subject=subject,
            message=strip_tags(html_message),
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[recipient_email],
            html_message=html_message,
            fail_silently=False,
        )
        logger.info(f"Email sent successfully to {recipient_email}: {subject}")
        return True

    except Exception as e:
        logger.error(f"Failed to send email to {recipient_email}: {e}", exc_info=True)
        return False


# ============================================================================
# BOOKING MESSAGES
# ============================================================================

def _display_name(user) -> str:
    return user.get_full_name() or user.username or user.email


def _summary(booking: "Booking") -> str:
    return f"""
        <ul>
            <li><strong>Room:</strong> {booking.room.title}</li>
            <li><strong>Check-in:</strong> {booking.check_in.isoformat()} {booking.check_in_time}</li>
            <li><strong>Check-out:</strong> {booking.check_out.isoformat()} {booking.check_out_time}</li>
            <li><strong>Guests:</strong> {booking.guest_count}</li>
            <li><strong>Total:</strong> {booking.total_price} {booking.currency}</li>
        </ul>
    """


def _wrap(greeting: str, body: str) -> str:
    return f"""
    <html>
    <body>
        <h2>Hello, {greeting}!</h2>
        {body}
        <p>Best regards,<br>The SpaceBook Team</p>
    </body>
    </html>
    """


def booking_created_messages(booking: "Booking", extra: dict) -> list[tuple[str, str, str]]:
    guest_body = f"""
        <p>We received your booking request. The host will review it shortly.</p>
        {_summary(booking)}
    """
    if booking.is_cancellable and booking.cancellation_deadline:
        guest_body += (
            f"<p>You can cancel free of charge until "
            f"{booking.cancellation_deadline.isoformat()}.</p>"
        )
    host_body = f"""
        <p>You have a new booking request from {_display_name(booking.guest)}.</p>
        {_summary(booking)}
        <p>Please confirm or decline it from your dashboard.</p>
    """
    return [
        (booking.guest.email, "Your SpaceBook booking request", _wrap(_display_name(booking.guest), guest_body)),
        (booking.host.email, "New booking request for your room", _wrap(_display_name(booking.host), host_body)),
    ]


def booking_confirmed_messages(booking: "Booking", extra: dict) -> list[tuple[str, str, str]]:
    body = f"<p>Good news! Your booking is confirmed.</p>{_summary(booking)}"
    pays_on_arrival = (
        booking.payment_method == booking.PaymentMethod.PROPERTY
        and booking.payment_status == booking.PaymentStatus.PENDING
    )
    if pays_on_arrival:
        body += (
            f"<p>You chose to pay at the property. Please prepare "
            f"{booking.total_price} {booking.currency} for payment on arrival.</p>"
        )
    return [(booking.guest.email, "Your SpaceBook booking is confirmed", _wrap(_display_name(booking.guest), body))]


def booking_rejected_messages(booking: "Booking", extra: dict) -> list[tuple[str, str, str]]:
    body = f"""
        <p>Unfortunately the host declined your booking request.</p>
        {_summary(booking)}
        <p><strong>Reason:</strong> {booking.cancellation_reason}</p>
    """
    return [(booking.guest.email, "Your SpaceBook booking request was declined", _wrap(_display_name(booking.guest), body))]


def payment_received_messages(booking: "Booking", extra: dict) -> list[tuple[str, str, str]]:
    body = f"""
        <p>We recorded your payment of {booking.paid_amount} {booking.currency}.</p>
        {_summary(booking)}
    """
    return [(booking.guest.email, "Payment confirmation for your SpaceBook booking", _wrap(_display_name(booking.guest), body))]


def booking_cancelled_messages(booking: "Booking", extra: dict) -> list[tuple[str, str, str]]:
    cancelled_by = booking.get_cancelled_by_display() or booking.cancelled_by
    what = "booking request" if extra.get("old_status") == "pending" else "booking"
    notice = f"""
        <p>The {what} below was cancelled ({cancelled_by}).</p>
        {_summary(booking)}
        <p><strong>Reason:</strong> {booking.cancellation_reason}</p>
    """
    messages = [
        (booking.guest.email, "Your SpaceBook booking was cancelled", _wrap(_display_name(booking.guest), notice)),
        (booking.host.email, "A booking for your room was cancelled", _wrap(_display_name(booking.host), notice)),
    ]
    if booking.refund_amount:
        refund = f"""
            <p>A refund of {booking.refund_amount} {booking.currency} has been issued for your booking
            at {booking.room.title}. It may take a few business days to appear.</p>
        """
        messages.append(
            (booking.guest.email, "Refund processed for your SpaceBook booking", _wrap(_display_name(booking.guest), refund))
        )
    return messages


MESSAGE_BUILDERS = {
    "created": booking_created_messages,
    "confirmed": booking_confirmed_messages,
    "rejected": booking_rejected_messages,
    "payment_received": payment_received_messages,
    "cancelled": booking_cancelled_messages,
}


def send_booking_emails(booking: "Booking", kind: str, extra: dict | None = None) -> bool:
    """Send every email for a booking lifecycle ``kind``; True if all went out."""
    builder = MESSAGE_BUILDERS.get(kind)
    if builder is None:
        logger.warning(f"Unknown booking email kind: {kind}")
        return False

    results = [
        send_email_notification(recipient, subject, html)
        for recipient, subject, html in builder(booking, extra or {})
    ]
    return all(results)
