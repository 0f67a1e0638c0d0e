"""Host earnings ledger services."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from decimal import Decimal
from uuid import UUID

from django.conf import settings  # type: ignore
from django.db import models, transaction  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.models import Booking
from shared.infrastructure.locking import lock_if_possible

from .models import Earning

logger = logging.getLogger(__name__)

PLATFORM_FEE_RATE = Decimal("0.10")
PAYOUT_HOLD = timedelta(days=1)


def platform_fee_rate() -> Decimal:
    return Decimal(str(getattr(settings, "SPACEBOOK_PLATFORM_FEE_RATE", PLATFORM_FEE_RATE)))


@transaction.atomic
def record_earning(booking_id: UUID) -> Earning | None:
    """
    Create the pending earning for a paid booking.

    The platform keeps its fee from the booking total and the rest is the
    host payout, held until the day after check-out. Calling this again
    for the same booking returns the existing entry.

    Returns:
        Earning | None: None when the booking is missing or not paid
    """
    try:
        booking = Booking.objects.get(pk=booking_id)
    except Booking.DoesNotExist:
        logger.warning(f"Booking {booking_id} not found, earning not recorded")
        return None

    if booking.payment_status != Booking.PaymentStatus.PAID:
        logger.info(f"Booking {booking_id} is not paid ({booking.payment_status}), no earning")
        return None

    existing = Earning.objects.filter(booking=booking).first()
    if existing is not None:
        return existing

    earning = Earning(
        host_id=booking.host_id,
        booking=booking,
        currency=booking.currency,
        payment_method=booking.payment_method,
        available_date=booking.check_out + PAYOUT_HOLD,
    )
    earning.apply_amount(booking.paid_amount or booking.total_price, platform_fee_rate())
    earning.save()

    logger.info(
        f"Earning recorded for booking {booking_id}: amount={earning.amount}, "
        f"fee={earning.platform_fee}, payout={earning.host_payout}"
    )
    return earning


@transaction.atomic
def make_available(booking_id: UUID) -> Earning | None:
    """Release the earning of a completed booking for payout."""

    earning = lock_if_possible(Earning.objects.filter(booking_id=booking_id)).first()
    if earning is None:
        earning = record_earning(booking_id)
        if earning is None:
            return None

    if earning.status == Earning.Status.PENDING:
        earning.status = Earning.Status.AVAILABLE
        earning.save(update_fields=["status", "updated_at"])
        logger.info(f"Earning for booking {booking_id} is now available")
    return earning


@transaction.atomic
def settle_cancellation(booking_id: UUID, refund_amount: Decimal | None) -> Earning | None:
    """
    Reduce the earning of a cancelled booking by the refunded amount.

    A fully refunded booking loses its earning entirely. Earnings that
    were already paid out are left untouched and logged for manual review.
    """
    earning = lock_if_possible(Earning.objects.filter(booking_id=booking_id)).first()
    if earning is None:
        return None

    refund = Decimal(refund_amount or 0)
    if earning.status == Earning.Status.PAID_OUT:
        if refund:
            logger.warning(
                f"Booking {booking_id} refunded {refund} after payout {earning.payout_id}"
            )
        return earning

    retained = earning.amount - refund
    if retained <= 0:
        earning.delete()
        logger.info(f"Earning for booking {booking_id} withdrawn after full refund")
        return None

    if refund:
        earning.apply_amount(retained, platform_fee_rate())
        earning.save(update_fields=["amount", "platform_fee", "host_payout", "updated_at"])
        logger.info(f"Earning for booking {booking_id} reduced to {retained} after refund {refund}")
    return earning


def release_due_earnings(today: date | None = None) -> int:
    """Make every pending earning whose hold date has passed available."""

    today = today or timezone.now().date()
    released = Earning.objects.filter(
        status=Earning.Status.PENDING,
        available_date__lte=today,
    ).update(status=Earning.Status.AVAILABLE, updated_at=timezone.now())

    if released:
        logger.info(f"Released {released} earning(s) due by {today.isoformat()}")
    return released


def earnings_summary(host_id: int) -> dict:
    """Host payout totals per earning status."""

    totals = {choice: Decimal("0.00") for choice in Earning.Status.values}
    rows = (
        Earning.objects.filter(host_id=host_id)
        .values("status")
        .annotate(total=models.Sum("host_payout"), count=models.Count("id"))
    )
    count = 0
    for row in rows:
        totals[row["status"]] = row["total"] or Decimal("0.00")
        count += row["count"]

    return {
        "available": totals[Earning.Status.AVAILABLE],
        "pending": totals[Earning.Status.PENDING],
        "paid_out": totals[Earning.Status.PAID_OUT],
        "count": count,
    }
