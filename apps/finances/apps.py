from django.apps import AppConfig  # type: ignore


class FinancesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.finances"
    label = "finances"
    verbose_name = "Finances"

    def ready(self):
        from apps.finances.handlers import register_handlers
        from shared.application.message_bus import message_bus

        register_handlers(message_bus)
