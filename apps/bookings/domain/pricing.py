"""
Price and duration calculation.

Stays and conference rooms are billed per started day; event venues charge a
single flat fee however long the range is. A 10% service fee is added on top
of the subtotal.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from apps.rooms.domain.entities import RoomType
from shared.domain.calendar import SECONDS_PER_DAY, day_start
from shared.domain.value_objects import Money

SERVICE_FEE_RATE = Decimal('0.10')


@dataclass(frozen=True)
class PriceBreakdown:
    base_price: Money
    units: int
    subtotal: Money
    service_fee_rate: Decimal
    service_fee: Money
    total: Money

    def to_dict(self) -> dict:
        return {
            'base_price': str(self.base_price.amount),
            'units': self.units,
            'subtotal': str(self.subtotal.amount),
            'service_fee_rate': str(self.service_fee_rate),
            'service_fee': str(self.service_fee.amount),
            'total': str(self.total.amount),
            'currency': self.total.currency,
        }


def _as_instant(value) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return day_start(value)
    raise TypeError(f"Expected date or datetime, got {type(value).__name__}")


def compute_duration(start, end, room_type: RoomType) -> int:
    """
    Number of billable units between ``start`` and ``end``

    For stays and conference rooms this is the day difference rounded up,
    so a check-in on the 10th and check-out on the 12th is 2 units. Events
    always count as one unit.
    """
    if room_type == RoomType.EVENT:
        return 1
    seconds = (_as_instant(end) - _as_instant(start)).total_seconds()
    return max(0, math.ceil(seconds / SECONDS_PER_DAY))


def compute_breakdown(
    base_price: Money,
    units: int,
    room_type: RoomType,
    service_fee_rate: Decimal = SERVICE_FEE_RATE,
) -> PriceBreakdown:
    if room_type == RoomType.EVENT:
        subtotal = base_price
    else:
        subtotal = base_price * units

    service_fee = subtotal * service_fee_rate
    return PriceBreakdown(
        base_price=base_price,
        units=units,
        subtotal=subtotal,
        service_fee_rate=service_fee_rate,
        service_fee=service_fee,
        total=subtotal + service_fee,
    )
