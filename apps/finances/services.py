"""Payout scheduling services."""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal

from django.utils import timezone  # type: ignore

from shared.domain.value_objects import quantize_amount

from .models import Payout

logger = logging.getLogger(__name__)


def schedule_refund_payout(reservation, refund_amount: Decimal, *, scheduled_at: datetime | None = None) -> Payout:
    """
    Queue the refund of a cancelled reservation for immediate processing.

    The payout is booked against the property's host with a negative
    amount. Callers only invoke this for a positive refund.
    """

    amount = quantize_amount(refund_amount)
    if amount <= 0:
        raise ValueError("Refund payout requires a positive amount")

    payout = Payout.objects.create(
        reservation=reservation,
        host_id=reservation.property.owner_id,
        amount=-amount,
        currency=reservation.currency,
        status=Payout.Status.PENDING,
        description=f"Refund for cancelled reservation #{reservation.pk}",
        scheduled_at=scheduled_at or timezone.now(),
    )
    logger.info(f"Scheduled refund payout {payout.pk} of {amount} {payout.currency} for reservation {reservation.pk}")
    return payout
