from django.apps import AppConfig  # type: ignore


class RoomsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.rooms"
    label = "rooms"
    verbose_name = "Rooms"

    def ready(self):
        from apps.rooms.application.command_handlers import (
            UpdateRoomAvailabilityCommand,
            register_handlers,
        )
        from shared.application.message_bus import message_bus

        if not message_bus.has_command_handler(UpdateRoomAvailabilityCommand):
            register_handlers(message_bus)
