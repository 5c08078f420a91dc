"""
Booking Event Handlers

Reactions to committed booking events. The message bus logs and
swallows handler errors, so nothing here can undo a cancellation.
"""

import logging

from apps.bookings.domain.events import ReservationCancelled

logger = logging.getLogger(__name__)


def notify_reservation_cancelled(event: ReservationCancelled):
    """Queue guest and host notifications for a cancelled reservation"""
    from apps.bookings.tasks import send_cancellation_notifications

    send_cancellation_notifications.delay(event.reservation_id, event.initiated_by, str(event.refund_amount))
    logger.debug(f"Queued cancellation notifications for reservation {event.reservation_id}")
