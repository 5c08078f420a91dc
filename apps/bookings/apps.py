"""App configuration for the booking domain."""

from __future__ import annotations

from django.apps import AppConfig  # type: ignore


class BookingsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.bookings"
    label = "bookings"
    verbose_name = "Бронирования"

    def ready(self) -> None:
        from shared.application.message_bus import message_bus

        from .application.command_handlers import ProcessCancellationCommand, process_cancellation
        from .application.event_handlers import notify_reservation_cancelled
        from .domain.events import ReservationCancelled

        message_bus.register_command_handler(ProcessCancellationCommand, process_cancellation)
        message_bus.register_event_handler(ReservationCancelled, notify_reservation_cancelled)
