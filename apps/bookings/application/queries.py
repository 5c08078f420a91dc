"""
Booking Queries

Read-side use cases of the cancellation workflow:
- get_cancellation_preview: what cancelling now would refund
- get_cancellation_history: past cancellations visible to a user
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional
import logging
import math

from django.utils import timezone

from apps.audit.models import AuditLogEntry
from apps.bookings.domain.entities import CancellationPreview
from apps.bookings.models import Reservation
from apps.rateplans.policies import PolicyTerms, compute_refund, full_refund
from apps.users.models import User
from shared.domain.exceptions import (
    AlreadyCancelledError,
    CannotCancelNoShowError,
    PastCheckInError,
    PermissionDeniedError,
    ReservationNotFoundError,
    UserNotFoundError,
)

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60


def days_before_check_in(reservation: Reservation, now: datetime) -> int:
    """Whole days left until check-in midnight, rounded up."""
    remaining = (reservation.check_in_datetime() - now).total_seconds()
    return math.ceil(remaining / SECONDS_PER_DAY)


def policy_terms_for(reservation: Reservation) -> PolicyTerms:
    if reservation.rate_plan_id is None:
        return PolicyTerms.default()
    return PolicyTerms.from_policy(reservation.rate_plan.get_cancellation_policy())


def build_cancellation_preview(
    reservation: Reservation,
    user_id: int,
    now: Optional[datetime] = None,
) -> CancellationPreview:
    """
    Compute the refund for cancelling ``reservation`` as ``user_id``

    Raises PermissionDeniedError for non-stakeholders and InvalidStateError
    subclasses when the reservation can no longer be cancelled.
    """
    now = now or timezone.now()

    if not reservation.is_stakeholder(user_id):
        raise PermissionDeniedError("You do not have permission to cancel this reservation")
    if reservation.status == Reservation.Status.CANCELLED:
        raise AlreadyCancelledError()
    if reservation.status == Reservation.Status.NO_SHOW:
        raise CannotCancelNoShowError()

    days = days_before_check_in(reservation, now)
    if days < 0:
        raise PastCheckInError()

    terms = policy_terms_for(reservation)
    initiated_by_host = reservation.property.owner_id == user_id
    if initiated_by_host:
        quote = full_refund(reservation.total_price)
    else:
        quote = compute_refund(reservation.total_price, terms, days)

    return CancellationPreview(
        reservation_id=reservation.pk,
        original_amount=reservation.total_price,
        refund_amount=quote.refund_amount,
        cancellation_fee=quote.cancellation_fee,
        refund_percentage=quote.refund_percentage,
        policy_type=str(terms.cancellation_type),
        policy_details=terms.description,
        days_before_check_in=days,
        initiated_by_host=initiated_by_host,
    )


def get_cancellation_preview(
    reservation_id: int,
    user_id: int,
    now: Optional[datetime] = None,
) -> CancellationPreview:
    reservation = (
        Reservation.objects.select_related("property", "rate_plan__cancellation_policy")
        .filter(pk=reservation_id)
        .first()
    )
    if reservation is None:
        raise ReservationNotFoundError()
    return build_cancellation_preview(reservation, user_id, now)


@dataclass(frozen=True)
class CancellationRecord:
    reservation: Reservation
    cancelled_at: Optional[datetime]
    description: str
    metadata: dict


def get_cancellation_history(user_id: int) -> List[CancellationRecord]:
    """Cancelled reservations of a guest, of a host's properties, or all for managers."""
    user = User.objects.filter(pk=user_id).first()
    if user is None:
        raise UserNotFoundError()

    queryset = Reservation.objects.filter(status=Reservation.Status.CANCELLED).select_related(
        "property", "rate_plan"
    )
    if user.is_host() and not user.is_manager():
        queryset = queryset.filter(property__owner_id=user.pk)
    elif not user.is_manager():
        queryset = queryset.filter(guest_id=user.pk)

    reservations = list(queryset.order_by("-cancelled_at", "-id"))
    entries = {}
    for entry in AuditLogEntry.objects.filter(
        reservation__in=reservations, action=AuditLogEntry.Action.CANCELLED
    ).order_by("created_at"):
        entries[entry.reservation_id] = entry

    history = []
    for reservation in reservations:
        entry = entries.get(reservation.pk)
        history.append(
            CancellationRecord(
                reservation=reservation,
                cancelled_at=entry.created_at if entry else reservation.cancelled_at,
                description=entry.description if entry else "",
                metadata=entry.metadata if entry else {},
            )
        )
    logger.debug(f"Loaded {len(history)} cancellations for user {user_id}")
    return history
