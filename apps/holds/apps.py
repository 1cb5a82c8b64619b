from django.apps import AppConfig


class HoldsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.holds"
    verbose_name = "Room holds"

    def ready(self) -> None:
        from shared.application.message_bus import message_bus

        from .handlers import register_handlers

        register_handlers(message_bus)
