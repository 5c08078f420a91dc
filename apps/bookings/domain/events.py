"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
These are published after successful transaction commits.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from shared.domain.base import DomainEvent


@dataclass
class ReservationCancelled(DomainEvent):
    """
    Event: A reservation was cancelled and its refund scheduled

    Triggers:
    - Notify the guest and the host (best effort)
    """
    reservation_id: int
    property_id: int
    guest_id: int
    host_id: int
    cancelled_by_user_id: int
    initiated_by: str
    refund_amount: Decimal
    payout_id: Optional[int] = None
