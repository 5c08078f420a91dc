"""Celery tasks for the booking domain."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from .models import Reservation

logger = logging.getLogger(__name__)


@shared_task(name="bookings.send_cancellation_notifications")
def send_cancellation_notifications(reservation_id: int, initiated_by: str, refund_amount: str) -> bool:
    """
    Уведомляет гостя и хозяина об отмене бронирования.

    Доставка писем и сообщений подключается отдельно; здесь фиксируется
    факт уведомления.
    """
    reservation = (
        Reservation.objects.select_related("guest", "property__owner").filter(pk=reservation_id).first()
    )
    if reservation is None:
        logger.warning(f"Cancellation notification skipped: reservation {reservation_id} not found")
        return False

    recipients = [reservation.guest.email, reservation.property.owner.email]
    logger.info(
        f"Cancellation of reservation {reservation_id} ({initiated_by}) "
        f"notified to {', '.join(recipients)}; refund {refund_amount} {reservation.currency}"
    )
    return True
