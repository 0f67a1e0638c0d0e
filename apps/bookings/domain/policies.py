"""
Cancellation policy

- Bookings made less than 24h before check-in cannot be cancelled by the guest
- Hosts and admins always refund in full
- Guests get 100% back 7+ days before check-in, 50% from 3 days, nothing after
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal

from shared.domain.calendar import day_start, days_between

CANCELLATION_NOTICE = timedelta(hours=24)

FULL_REFUND = Decimal('1.00')
HALF_REFUND = Decimal('0.50')
NO_REFUND = Decimal('0.00')

FULL_REFUND_DAYS = 7
HALF_REFUND_DAYS = 3


def cancellation_terms(check_in: date, now: datetime) -> tuple[bool, date | None]:
    """
    Work out (is_cancellable, cancellation_deadline) at booking time

    The deadline is check-in minus 24h; when check-in is already within
    that notice there is no deadline and the booking is not cancellable.
    """
    check_in_at = day_start(check_in)
    if check_in_at - now <= CANCELLATION_NOTICE:
        return False, None
    return True, (check_in_at - CANCELLATION_NOTICE).date()


def days_until_check_in(check_in: date, now: datetime) -> float:
    """Fractional days between now and the start of the check-in day"""
    return days_between(day_start(check_in), now)


def refund_percentage(days_before: float, *, by_guest: bool) -> Decimal:
    if not by_guest:
        return FULL_REFUND
    if days_before >= FULL_REFUND_DAYS:
        return FULL_REFUND
    if days_before >= HALF_REFUND_DAYS:
        return HALF_REFUND
    return NO_REFUND
