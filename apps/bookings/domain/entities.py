"""
Booking Domain Entities

Core business entities for the booking domain:
- Booking: Aggregate root owning the reservation lifecycle
- BookingStatus: FSM states for booking lifecycle
- PaymentStatus: Payment state tracking
- Party: how the acting user relates to a booking
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Iterable
from uuid import UUID

from apps.bookings.domain import policies
from apps.bookings.domain.availability import conflicting_days
from apps.bookings.domain.events import (
    BookingCancelled,
    BookingCompleted,
    BookingConfirmed,
    BookingCreated,
    BookingPaymentReceived,
    BookingRejected,
)
from apps.bookings.domain.pricing import (
    SERVICE_FEE_RATE,
    PriceBreakdown,
    compute_breakdown,
    compute_duration,
)
from apps.rooms.domain.entities import Room, RoomType
from shared.domain.base import Aggregate
from shared.domain.calendar import to_calendar_day, utc_now
from shared.domain.exceptions import (
    ConflictError,
    InvalidStateTransition,
    NotAuthorized,
    ValidationError,
)
from shared.domain.identity import Actor
from shared.domain.value_objects import DateRange, Money


class BookingStatus(Enum):
    """
    Booking Status Finite State Machine

    State transitions:
    - PENDING -> CONFIRMED (host accepts, or in-person payment recorded)
    - PENDING -> REJECTED (host declines)
    - PENDING -> CANCELLED (guest, host or admin cancels)
    - CONFIRMED -> COMPLETED (after check-out)
    - CONFIRMED -> CANCELLED (guest, host or admin cancels)
    COMPLETED, CANCELLED and REJECTED are terminal.
    """
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'
    REJECTED = 'rejected'

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

    @property
    def blocks_dates(self) -> bool:
        """Active bookings occupy their days; cancelled/rejected ones free them"""
        return self not in RELEASED_STATUSES


TERMINAL_STATUSES = frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED, BookingStatus.REJECTED})
RELEASED_STATUSES = frozenset({BookingStatus.CANCELLED, BookingStatus.REJECTED})


class PaymentStatus(Enum):
    """Payment status tracking"""
    PENDING = 'pending'
    PAID = 'paid'
    REFUNDED = 'refunded'
    CANCELLED = 'cancelled'


class PaymentMethod(Enum):
    IN_PERSON = 'property'  # paid at the property
    CARD = 'card'
    GCASH = 'gcash'
    MAYA = 'maya'


class Party(Enum):
    """How an actor relates to one particular booking"""
    GUEST = 'user'
    HOST = 'host'
    ADMIN = 'admin'


class Transition(Enum):
    CONFIRM = 'confirm'
    REJECT = 'reject'
    MARK_PAYMENT_RECEIVED = 'mark_payment_received'
    COMPLETE = 'complete'
    CANCEL = 'cancel'


ALLOWED_SOURCES = {
    Transition.CONFIRM: (BookingStatus.PENDING,),
    Transition.REJECT: (BookingStatus.PENDING,),
    Transition.MARK_PAYMENT_RECEIVED: (BookingStatus.PENDING,),
    Transition.COMPLETE: (BookingStatus.CONFIRMED,),
    Transition.CANCEL: (BookingStatus.PENDING, BookingStatus.CONFIRMED),
}

HOST_OR_ADMIN = (Party.HOST, Party.ADMIN)


@dataclass(frozen=True)
class CancellationDetails:
    cancelled_at: datetime
    cancelled_by: Party
    reason: str
    refund_amount: Money | None = None


@dataclass(frozen=True)
class PaymentDetails:
    paid_at: datetime
    amount: Money
    recorded_by: int | None = None


@dataclass(frozen=True)
class CancellationQuote:
    """Answer to "may this actor cancel now, and what would come back?" """
    can_cancel: bool
    refund_amount: Money
    refund_percentage: Decimal
    reason: str | None = None


@dataclass(eq=False, kw_only=True)
class Booking(Aggregate):
    """
    Booking Aggregate Root

    Represents a guest's reservation of a room for a range of days.

    Key invariants:
    - dates is a valid inclusive range (check_in <= check_out)
    - terminal bookings never change status again
    - payment becomes REFUNDED only when a non-zero refund was issued
    - only active bookings (not cancelled/rejected) block room days
    """

    room_id: UUID
    guest_id: int
    host_id: int
    room_type: RoomType
    dates: DateRange
    price: PriceBreakdown
    guest_count: int = 1
    check_in_time: str = ''
    check_out_time: str = ''
    special_requests: str = ''

    status: BookingStatus = BookingStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method: PaymentMethod = PaymentMethod.IN_PERSON

    is_cancellable: bool = True
    cancellation_deadline: date | None = None
    cancellation: CancellationDetails | None = None
    payment: PaymentDetails | None = None

    @classmethod
    def request(
        cls,
        *,
        room: Room,
        guest_id: int,
        dates: DateRange,
        unavailable_days: Iterable[date],
        guest_count: int = 1,
        payment_method: PaymentMethod = PaymentMethod.IN_PERSON,
        check_in_time: str = '',
        check_out_time: str = '',
        special_requests: str = '',
        now: datetime | None = None,
        service_fee_rate: Decimal = SERVICE_FEE_RATE,
    ) -> 'Booking':
        """
        Create a PENDING booking for ``room``

        ``unavailable_days`` must come from a fresh read of the room's
        availability; the storage layer still guards against a concurrent
        writer that slipped in after that read.

        Raises:
            ValidationError: Bad guest count, room not bookable, dates outside
                the room's window, check-in in the past, zero billable units
            ConflictError: Some requested day is already unavailable
        """
        now = now or utc_now()

        if room.host_id == guest_id:
            raise ValidationError("You cannot book your own room", field='room')
        if not room.is_bookable:
            raise ValidationError("Room is not available for booking", field='room')
        if guest_count < 1:
            raise ValidationError("At least one guest is required", field='guest_count')
        if guest_count > room.max_guests:
            raise ValidationError(
                f"Guest count ({guest_count}) exceeds room capacity ({room.max_guests})",
                field='guest_count',
            )
        if dates.start_date < to_calendar_day(now):
            raise ValidationError("Check-in date cannot be in the past", field='check_in')
        if not room.window_allows(dates):
            raise ValidationError("Selected dates are outside of room availability", field='check_in')

        clashes = conflicting_days(dates, unavailable_days)
        if clashes:
            raise ConflictError(dates=clashes)

        units = compute_duration(dates.start_date, dates.end_date, room.type)
        if units < 1:
            raise ValidationError(
                "Check-out must be at least one day after check-in",
                field='check_out',
            )
        price = compute_breakdown(room.base_price, units, room.type, service_fee_rate)
        is_cancellable, deadline = policies.cancellation_terms(dates.start_date, now)

        booking = cls(
            room_id=room.id,
            guest_id=guest_id,
            host_id=room.host_id,
            room_type=room.type,
            dates=dates,
            price=price,
            guest_count=guest_count,
            check_in_time=check_in_time,
            check_out_time=check_out_time,
            special_requests=special_requests,
            payment_method=payment_method,
            is_cancellable=is_cancellable,
            cancellation_deadline=deadline,
            created_at=now,
            updated_at=now,
        )
        booking.add_event(BookingCreated(
            aggregate_id=booking.id,
            booking_id=booking.id,
            room_id=room.id,
            guest_id=guest_id,
            host_id=room.host_id,
            dates=dates,
            total_price=price.total.amount,
        ))
        return booking

    # ----- authorization helpers -----

    def party_of(self, actor: Actor) -> Party | None:
        if actor.is_admin:
            return Party.ADMIN
        if actor.user_id == self.host_id:
            return Party.HOST
        if actor.user_id == self.guest_id:
            return Party.GUEST
        return None

    def _authorize(self, actor: Actor, transition: Transition, allowed: tuple) -> Party:
        """
        Resolve the actor's party, then check state, then the role guard

        State is checked before the role so that a terminal booking reports
        InvalidStateTransition to every party.
        """
        party = self.party_of(actor)
        if party is None:
            raise NotAuthorized()
        sources = ALLOWED_SOURCES[transition]
        if self.status not in sources:
            raise InvalidStateTransition(
                current=self.status.value,
                transition=transition.value,
                allowed=[s.value for s in sources],
            )
        if party not in allowed:
            raise NotAuthorized(f"Not authorized to {transition.value.replace('_', ' ')} this booking")
        return party

    # ----- transitions -----

    def apply(self, transition: Transition, actor: Actor, *, reason: str = '', now: datetime | None = None):
        """Dispatch a named transition to its method"""
        if transition == Transition.CONFIRM:
            return self.confirm(actor, now=now)
        if transition == Transition.REJECT:
            return self.reject(actor, reason=reason, now=now)
        if transition == Transition.MARK_PAYMENT_RECEIVED:
            return self.mark_payment_received(actor, now=now)
        if transition == Transition.COMPLETE:
            return self.complete(actor, now=now)
        return self.cancel(actor, reason=reason, now=now)

    def confirm(self, actor: Actor, *, now: datetime | None = None):
        """PENDING -> CONFIRMED, by the host or an admin"""
        self._authorize(actor, Transition.CONFIRM, HOST_OR_ADMIN)
        self.status = BookingStatus.CONFIRMED
        self.touch(now)
        self.add_event(BookingConfirmed(
            aggregate_id=self.id,
            booking_id=self.id,
            room_id=self.room_id,
            guest_id=self.guest_id,
        ))

    def reject(self, actor: Actor, *, reason: str = '', now: datetime | None = None):
        """PENDING -> REJECTED, by the host or an admin; frees the dates"""
        party = self._authorize(actor, Transition.REJECT, HOST_OR_ADMIN)
        now = now or utc_now()
        self.status = BookingStatus.REJECTED
        self.cancellation = CancellationDetails(
            cancelled_at=now,
            cancelled_by=party,
            reason=reason or 'No reason provided',
        )
        self.touch(now)
        self.add_event(BookingRejected(
            aggregate_id=self.id,
            booking_id=self.id,
            room_id=self.room_id,
            guest_id=self.guest_id,
            reason=self.cancellation.reason,
        ))

    def mark_payment_received(self, actor: Actor, *, now: datetime | None = None):
        """
        Record an in-person payment (PENDING -> CONFIRMED, payment -> PAID)
        """
        self._authorize(actor, Transition.MARK_PAYMENT_RECEIVED, HOST_OR_ADMIN)
        if self.payment_status != PaymentStatus.PENDING:
            raise InvalidStateTransition(
                current=f"payment {self.payment_status.value}",
                transition=Transition.MARK_PAYMENT_RECEIVED.value,
                allowed=[f"payment {PaymentStatus.PENDING.value}"],
            )
        if self.payment_method != PaymentMethod.IN_PERSON:
            raise InvalidStateTransition(
                current=f"payment_method {self.payment_method.value}",
                transition=Transition.MARK_PAYMENT_RECEIVED.value,
                allowed=[f"payment_method {PaymentMethod.IN_PERSON.value}"],
            )
        now = now or utc_now()
        self._record_payment(actor, now)
        self.status = BookingStatus.CONFIRMED
        self.touch(now)

    def complete(self, actor: Actor, *, now: datetime | None = None):
        """
        CONFIRMED -> COMPLETED

        Hosts may only complete once the check-out day has arrived; admins
        may override. A pay-at-property booking still awaiting payment is
        settled as part of completion.
        """
        party = self._authorize(actor, Transition.COMPLETE, HOST_OR_ADMIN)
        now = now or utc_now()
        if party != Party.ADMIN and to_calendar_day(now) < self.dates.end_date:
            raise ValidationError(
                f"Booking cannot be completed before its check-out day ({self.dates.end_date})",
                field='check_out',
            )
        if self.payment_method == PaymentMethod.IN_PERSON and self.payment_status == PaymentStatus.PENDING:
            self._record_payment(actor, now)

        self.status = BookingStatus.COMPLETED
        self.touch(now)
        self.add_event(BookingCompleted(
            aggregate_id=self.id,
            booking_id=self.id,
            room_id=self.room_id,
            guest_id=self.guest_id,
            host_id=self.host_id,
        ))

    def cancel(self, actor: Actor, *, reason: str = '', now: datetime | None = None) -> Money:
        """
        Cancel a PENDING or CONFIRMED booking and return the refund issued

        Guests need the booking to still be cancellable; hosts and admins can
        always cancel and always refund in full.
        """
        now = now or utc_now()
        party = self._authorize(actor, Transition.CANCEL, (Party.GUEST, Party.HOST, Party.ADMIN))
        if party == Party.GUEST:
            refusal = self._guest_refusal()
            if refusal:
                raise NotAuthorized(refusal)

        old_status = self.status
        refund = self._refund_for(party, now)
        self.status = BookingStatus.CANCELLED
        self.cancellation = CancellationDetails(
            cancelled_at=now,
            cancelled_by=party,
            reason=reason or 'No reason provided',
            refund_amount=refund,
        )
        if self.payment_status == PaymentStatus.PAID and refund.amount > 0:
            self.payment_status = PaymentStatus.REFUNDED
        self.touch(now)

        self.add_event(BookingCancelled(
            aggregate_id=self.id,
            booking_id=self.id,
            room_id=self.room_id,
            guest_id=self.guest_id,
            host_id=self.host_id,
            cancelled_by=party.value,
            reason=self.cancellation.reason,
            refund_amount=refund.amount,
            old_status=old_status.value,
        ))
        return refund

    def ensure_deletable(self, actor: Actor):
        """Admin cleanup: anything but a confirmed booking may be removed"""
        if not actor.is_admin:
            raise NotAuthorized("Only admins can delete bookings")
        if self.status == BookingStatus.CONFIRMED:
            raise InvalidStateTransition(
                current=self.status.value,
                transition='delete',
                allowed=[s.value for s in BookingStatus if s != BookingStatus.CONFIRMED],
            )

    # ----- queries -----

    def cancellation_quote(self, actor: Actor, now: datetime | None = None) -> CancellationQuote:
        """Would a cancellation by ``actor`` succeed right now, and for how much?"""
        now = now or utc_now()
        party = self.party_of(actor)
        nothing = Money.zero(self.total_price.currency)

        if party is None:
            return CancellationQuote(False, nothing, policies.NO_REFUND, "Not authorized to cancel this booking")
        if self.status not in ALLOWED_SOURCES[Transition.CANCEL]:
            return CancellationQuote(False, nothing, policies.NO_REFUND, f"Booking is already {self.status.value}")
        if party == Party.GUEST:
            refusal = self._guest_refusal()
            if refusal:
                return CancellationQuote(False, nothing, policies.NO_REFUND, refusal)

        percentage = self._refund_percentage(party, now)
        return CancellationQuote(True, self._refund_for(party, now), percentage)

    @property
    def total_price(self) -> Money:
        return self.price.total

    @property
    def is_active(self) -> bool:
        return self.status.blocks_dates

    @property
    def check_in(self) -> date:
        return self.dates.start_date

    @property
    def check_out(self) -> date:
        return self.dates.end_date

    # ----- internals -----

    def _guest_refusal(self) -> str | None:
        if not self.is_cancellable:
            return "This booking cannot be cancelled"
        return None

    def _refund_percentage(self, party: Party, now: datetime) -> Decimal:
        days_before = policies.days_until_check_in(self.dates.start_date, now)
        return policies.refund_percentage(days_before, by_guest=party == Party.GUEST)

    def _refund_for(self, party: Party, now: datetime) -> Money:
        if self.payment_status != PaymentStatus.PAID:
            return Money.zero(self.total_price.currency)
        return self.total_price * self._refund_percentage(party, now)

    def _record_payment(self, actor: Actor, now: datetime):
        self.payment_status = PaymentStatus.PAID
        self.payment = PaymentDetails(paid_at=now, amount=self.total_price, recorded_by=actor.user_id)
        self.add_event(BookingPaymentReceived(
            aggregate_id=self.id,
            booking_id=self.id,
            host_id=self.host_id,
            amount=self.total_price.amount,
            payment_method=self.payment_method.value,
        ))

    def __str__(self):
        return f"Booking {self.id} ({self.status.value})"

    def __repr__(self):
        return (
            f"Booking(id={self.id}, room_id={self.room_id}, "
            f"status={self.status.value}, dates={self.dates!r})"
        )
