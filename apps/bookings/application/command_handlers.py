"""
Booking Command Handlers

These are the write-side use cases for the booking domain.
They orchestrate domain operations within transactions.

Commands:
- ProcessCancellationCommand: Cancel a reservation, release its dates,
  schedule the refund and record the change in the audit trail
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional
import logging

from django.utils import timezone

from shared.application.uow import DjangoUnitOfWork
from shared.domain.exceptions import DomainValidationError, ReservationNotFoundError
from apps.audit.ledger import AuditLedger
from apps.audit.models import AuditLogEntry
from apps.bookings.application.queries import build_cancellation_preview
from apps.bookings.domain.entities import CancellationDetails
from apps.bookings.domain.events import ReservationCancelled
from apps.bookings.models import Reservation
from apps.bookings.services import lock_reservation, release_dates_for_reservation
from apps.finances.services import schedule_refund_payout
from apps.users.models import User

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass
class ProcessCancellationCommand:
    """
    Command to cancel a reservation

    ``reason_category`` takes a Reservation.CancellationReason value.
    ``initiated_by`` is optional: the handler works it out from the acting
    user and only checks a supplied value against it.
    """
    reservation_id: int
    user_id: int
    reason: str
    reason_category: str = Reservation.CancellationReason.OTHER
    initiated_by: Optional[str] = None


@dataclass
class CancellationResult:
    reservation: Reservation
    details: CancellationDetails


# ===== Command Handlers =====

class ProcessCancellationHandler:
    """
    Handler for ProcessCancellation command

    Everything happens in one transaction:
    1. Lock the reservation row (SELECT FOR UPDATE where supported)
    2. Recompute the preview on the locked row; a concurrent cancellation
       that committed first makes this raise AlreadyCancelledError
    3. Mark the reservation cancelled and append the cancellation note
    4. Write exactly one CANCELLED audit entry
    5. Release the availability of every night of the stay
    6. Schedule a negative payout when something is refunded
    7. Queue ReservationCancelled, published only after commit

    Any failure rolls back all of the above.
    """

    def __init__(self, ledger: Optional[AuditLedger] = None, clock=timezone.now):
        self.ledger = ledger or AuditLedger()
        self._clock = clock

    def _validate(self, command: ProcessCancellationCommand):
        initiator = command.initiated_by
        if initiator is not None and initiator not in Reservation.CancellationSource.values:
            raise DomainValidationError(f"Unknown cancellation initiator: {command.initiated_by}")
        if command.reason_category not in Reservation.CancellationReason.values:
            raise DomainValidationError(f"Unknown cancellation reason: {command.reason_category}")
        if not (command.reason or "").strip():
            raise DomainValidationError("Cancellation reason is required")

    def handle(self, command: ProcessCancellationCommand) -> CancellationResult:
        self._validate(command)
        logger.info(
            f"Cancelling reservation {command.reservation_id} by user {command.user_id}, "
            f"category {command.reason_category}"
        )
        now: datetime = self._clock()

        with DjangoUnitOfWork() as uow:
            reservation = lock_reservation(command.reservation_id)
            if reservation is None:
                raise ReservationNotFoundError()

            preview = build_cancellation_preview(reservation, command.user_id, now)
            initiated_by = (
                Reservation.CancellationSource.HOST
                if preview.initiated_by_host
                else Reservation.CancellationSource.GUEST
            )
            if command.initiated_by is not None and command.initiated_by != initiated_by:
                raise DomainValidationError(
                    f"Cancellation cannot be recorded as {command.initiated_by} for this user"
                )
            actor = User.objects.get(pk=command.user_id)
            previous_status = reservation.status

            reservation.mark_cancelled(
                f"Cancelled by {initiated_by}. Reason: {command.reason}",
                cancelled_at=now,
            )

            entry = self.ledger.log_change(
                reservation.pk,
                actor.pk,
                actor.role,
                AuditLogEntry.Action.CANCELLED,
                field="status",
                old_value=str(previous_status),
                new_value=str(reservation.status),
                metadata={
                    "reason": command.reason,
                    "reason_category": str(command.reason_category),
                    "initiated_by": str(initiated_by),
                    "refund_amount": preview.refund_amount,
                    "cancellation_fee": preview.cancellation_fee,
                    "refund_percentage": preview.refund_percentage,
                    "policy_type": preview.policy_type,
                },
            )

            released = release_dates_for_reservation(reservation)

            payout = None
            if preview.refund_amount > Decimal("0"):
                payout = schedule_refund_payout(reservation, preview.refund_amount, scheduled_at=now)

            uow.add_event(
                ReservationCancelled(
                    reservation_id=reservation.pk,
                    property_id=reservation.property_id,
                    guest_id=reservation.guest_id,
                    host_id=reservation.property.owner_id,
                    cancelled_by_user_id=actor.pk,
                    initiated_by=str(initiated_by),
                    refund_amount=preview.refund_amount,
                    payout_id=payout.pk if payout else None,
                )
            )

        details = CancellationDetails(
            reservation_id=reservation.pk,
            original_amount=preview.original_amount,
            refund_amount=preview.refund_amount,
            cancellation_fee=preview.cancellation_fee,
            refund_percentage=preview.refund_percentage,
            policy_type=preview.policy_type,
            cancelled_by_user_id=actor.pk,
            initiated_by=str(initiated_by),
            reason_category=str(command.reason_category),
            reason=command.reason,
            cancelled_at=now,
            released_dates=released,
            payout_id=payout.pk if payout else None,
            audit_entry_id=entry.pk,
        )
        logger.info(
            f"Reservation {reservation.pk} cancelled, refund {preview.refund_amount} "
            f"({preview.refund_percentage}%)"
        )
        return CancellationResult(reservation=reservation, details=details)


def process_cancellation(command: ProcessCancellationCommand) -> CancellationResult:
    """Message bus entry point for ProcessCancellationCommand"""
    return ProcessCancellationHandler().handle(command)
