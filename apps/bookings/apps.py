from django.apps import AppConfig


class BookingsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.bookings"
    label = "bookings"

    def ready(self):
        from shared.application.message_bus import message_bus

        from .application import event_handlers

        event_handlers.register(message_bus)
