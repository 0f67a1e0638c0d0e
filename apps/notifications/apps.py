from django.apps import AppConfig  # type: ignore


class NotificationsConfig(AppConfig):
    name = "apps.notifications"
    label = "notifications"
    verbose_name = "Notifications"

    def ready(self):
        from apps.notifications.handlers import register_handlers
        from shared.application.message_bus import message_bus

        register_handlers(message_bus)
