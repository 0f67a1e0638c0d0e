"""
Room Domain Entities

A Room is a rentable space owned by a host. The booking core only needs a
read-only view of it: its type (which drives pricing), its base price, the
host who may confirm bookings and the host-controlled availability inputs.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from uuid import UUID

from shared.domain.calendar import to_calendar_day
from shared.domain.value_objects import DateRange, Money


class RoomType(Enum):
    """
    Kind of space being rented

    - STAY: priced per night
    - CONFERENCE: priced per day
    - EVENT: flat fee per event, whatever the length of the range
    """
    STAY = 'stay'
    CONFERENCE = 'conference'
    EVENT = 'event'


class RoomStatus(Enum):
    """Moderation status set by an admin"""
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'
    INACTIVE = 'inactive'


@dataclass(frozen=True)
class Room:
    """
    Read model of a room as seen by the booking core

    Key invariants:
    - unavailable_dates holds calendar days (normalised on construction)
    - only approved, published rooms accept bookings
    """
    id: UUID
    host_id: int
    type: RoomType
    base_price: Money
    max_guests: int = 1
    unavailable_dates: frozenset = field(default_factory=frozenset)
    availability_start: date | None = None
    availability_end: date | None = None
    is_always_available: bool = False
    status: RoomStatus = RoomStatus.APPROVED
    is_published: bool = True

    def __post_init__(self):
        object.__setattr__(
            self,
            'unavailable_dates',
            frozenset(to_calendar_day(d) for d in self.unavailable_dates),
        )

    @property
    def is_bookable(self) -> bool:
        return self.is_published and self.status == RoomStatus.APPROVED

    def window_allows(self, dates: DateRange) -> bool:
        """
        Check the requested range falls inside the host's active window

        Rooms flagged as always available skip the window entirely; an open
        bound (no start or end set) does not restrict that side.
        """
        if self.is_always_available:
            return True
        if self.availability_start and dates.start_date < to_calendar_day(self.availability_start):
            return False
        if self.availability_end and dates.end_date > to_calendar_day(self.availability_end):
            return False
        return True

    def __str__(self):
        return f"Room {self.id} ({self.type.value})"
