"""
Room Command Handlers

Commands:
- UpdateRoomAvailabilityCommand: Host (or admin) edits blocked days and window
"""

from dataclasses import dataclass, field
from datetime import date
from typing import FrozenSet, Optional
from uuid import UUID
import logging

from apps.rooms.domain.entities import Room
from apps.rooms.infrastructure.repositories import DjangoRoomRepository
from shared.domain.exceptions import NotAuthorized
from shared.domain.identity import Actor

logger = logging.getLogger(__name__)


@dataclass
class UpdateRoomAvailabilityCommand:
    """
    ``blocked_days`` replaces the room's blocked days when given; the window
    keys are only changed when present in ``window``.
    """
    room_id: UUID
    actor: Actor
    blocked_days: Optional[FrozenSet[date]] = None
    window: dict = field(default_factory=dict)


class UpdateRoomAvailabilityHandler:
    """Handler for host availability edits"""

    def __init__(self, room_repo=None):
        self.room_repo = room_repo or DjangoRoomRepository()

    def handle(self, command: UpdateRoomAvailabilityCommand) -> Room:
        room = self.room_repo.get(command.room_id)
        if not command.actor.is_admin and command.actor.user_id != room.host_id:
            raise NotAuthorized("Only the host can change room availability")

        logger.info(
            f"Updating availability of room {command.room_id} "
            f"(actor {command.actor.user_id})"
        )
        return self.room_repo.update_availability(
            command.room_id,
            blocked_days=command.blocked_days,
            window=command.window,
        )


def register_handlers(bus) -> None:
    bus.register_command_handler(UpdateRoomAvailabilityCommand, UpdateRoomAvailabilityHandler().handle)
