"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
They are published after the transaction commits, so a failing handler
(email, earnings ledger) never undoes the state change that raised it.
"""

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from shared.domain.base import DomainEvent
from shared.domain.value_objects import DateRange


@dataclass
class BookingCreated(DomainEvent):
    """
    Event: A guest requested a booking (new -> PENDING)

    Triggers:
    - Email the guest a booking summary
    - Email the host that a request is waiting
    """
    booking_id: UUID = None
    room_id: UUID = None
    guest_id: int = None
    host_id: int = None
    dates: DateRange = None
    total_price: Decimal = None


@dataclass
class BookingConfirmed(DomainEvent):
    """Event: The host (or an admin) accepted the request (PENDING -> CONFIRMED)"""
    booking_id: UUID = None
    room_id: UUID = None
    guest_id: int = None


@dataclass
class BookingRejected(DomainEvent):
    """
    Event: The host (or an admin) turned the request down (PENDING -> REJECTED)

    The booking no longer blocks its dates.
    """
    booking_id: UUID = None
    room_id: UUID = None
    guest_id: int = None
    reason: str = ''


@dataclass
class BookingPaymentReceived(DomainEvent):
    """
    Event: Payment recorded for the booking

    Triggers:
    - Earnings ledger entry for the host
    """
    booking_id: UUID = None
    host_id: int = None
    amount: Decimal = None
    payment_method: str = ''


@dataclass
class BookingCompleted(DomainEvent):
    """
    Event: The stay / event is over (CONFIRMED -> COMPLETED)

    Triggers:
    - Host earnings become available for payout
    """
    booking_id: UUID = None
    room_id: UUID = None
    guest_id: int = None
    host_id: int = None


@dataclass
class BookingCancelled(DomainEvent):
    """
    Event: Booking was cancelled

    Triggers:
    - Notify guest and host
    - Withdraw any pending earnings for the host
    The booking no longer blocks its dates.
    """
    booking_id: UUID = None
    room_id: UUID = None
    guest_id: int = None
    host_id: int = None
    cancelled_by: str = ''
    reason: str = ''
    refund_amount: Decimal = None
    old_status: str = ''
