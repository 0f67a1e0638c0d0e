from django.apps import AppConfig  # type: ignore


class BookingsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.bookings"
    label = "bookings"
    verbose_name = "Bookings"

    def ready(self):
        from apps.bookings.application.command_handlers import CreateBookingCommand, register_handlers
        from shared.application.message_bus import message_bus

        if not message_bus.has_command_handler(CreateBookingCommand):
            register_handlers(message_bus)
