"""
Room Repository

Maps the Django ``Room`` row (plus its blocked days) onto the read-only
domain ``Room`` the booking core works with.
"""

import logging
from datetime import date
from typing import Iterable
from uuid import UUID

from django.db import transaction

from apps.rooms import models
from apps.rooms.domain.entities import Room, RoomStatus, RoomType
from shared.domain.exceptions import NotFound, ValidationError
from shared.domain.value_objects import Money
from shared.infrastructure.locking import lock_if_possible

logger = logging.getLogger(__name__)


def to_domain(row: models.Room, blocked_days: Iterable[date]) -> Room:
    return Room(
        id=row.id,
        host_id=row.host_id,
        type=RoomType(row.room_type),
        base_price=Money(row.base_price, row.currency),
        max_guests=row.max_guests,
        unavailable_dates=frozenset(blocked_days),
        availability_start=row.availability_start,
        availability_end=row.availability_end,
        is_always_available=row.is_always_available,
        status=RoomStatus(row.status),
        is_published=row.is_published,
    )


class DjangoRoomRepository:
    """Room lookup for the booking core"""

    def get_row(self, room_id: UUID, *, lock: bool = False) -> models.Room:
        queryset = models.Room.objects.filter(pk=room_id)
        if lock:
            queryset = lock_if_possible(queryset)
        row = queryset.first()
        if row is None:
            raise NotFound(f"Room {room_id} not found")
        return row

    def get(self, room_id: UUID, *, lock: bool = False) -> Room:
        """
        Load a room with its blocked days

        With ``lock=True`` inside a transaction the room row is held with
        SELECT ... FOR UPDATE, which serialises booking creation per room.

        Raises:
            NotFound: No such room
        """
        row = self.get_row(room_id, lock=lock)
        blocked = models.RoomBlockedDate.objects.filter(room_id=row.pk).values_list("day", flat=True)
        return to_domain(row, blocked)

    @transaction.atomic
    def update_availability(
        self,
        room_id: UUID,
        *,
        blocked_days: Iterable[date] | None = None,
        window: dict | None = None,
    ) -> Room:
        """
        Replace the host-controlled availability inputs of a room

        ``blocked_days`` replaces the whole set of blocked days when given;
        ``window`` may carry availability_start, availability_end and
        is_always_available.
        """
        row = self.get_row(room_id, lock=True)

        if window:
            for key in ("availability_start", "availability_end", "is_always_available"):
                if key in window:
                    setattr(row, key, window[key])
            if row.availability_start and row.availability_end and row.availability_end < row.availability_start:
                raise ValidationError(
                    "Availability end must not be before availability start",
                    field="availability_end",
                )
            row.save(update_fields=["availability_start", "availability_end", "is_always_available", "updated_at"])

        if blocked_days is not None:
            wanted = set(blocked_days)
            existing = set(
                models.RoomBlockedDate.objects.filter(room=row).values_list("day", flat=True)
            )
            models.RoomBlockedDate.objects.filter(room=row, day__in=existing - wanted).delete()
            models.RoomBlockedDate.objects.bulk_create(
                [models.RoomBlockedDate(room=row, day=day) for day in sorted(wanted - existing)]
            )
            logger.info(
                f"Room {room_id}: blocked days updated "
                f"(+{len(wanted - existing)}, -{len(existing - wanted)})"
            )

        return self.get(room_id)
