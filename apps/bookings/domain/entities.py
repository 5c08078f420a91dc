"""
Booking Domain Results

Immutable results returned by the booking calculator and the
cancellation workflow. They carry plain values only, so views can
serialize them and callers can compare them in tests.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from shared.domain.base import ValueObject


@dataclass(frozen=True)
class BookingCriteria(ValueObject):
    """What the guest asked for"""
    property_id: int
    check_in: date
    check_out: date
    guest_count: int = 1
    is_half_day: bool = False


@dataclass(frozen=True)
class NightlyPrice(ValueObject):
    """One night of a stay before and after the rate plan modifier"""
    date: date
    base_price: Decimal
    final_price: Decimal
    is_override: bool = False
    override_reason: Optional[str] = None


@dataclass(frozen=True)
class PriceBreakdown(ValueObject):
    base_total: Decimal
    modifier_description: str
    nightly_prices: List[NightlyPrice] = field(default_factory=list)


@dataclass(frozen=True)
class PolicySummary(ValueObject):
    cancellation_type: str
    description: str
    free_cancellation_days: Optional[int] = None
    partial_refund_days: Optional[int] = None


@dataclass(frozen=True)
class RatePlanOption(ValueObject):
    """
    A bookable price for the stay

    ``rate_plan_id`` is None for the direct "Standard Rate" option.
    """
    rate_plan_id: Optional[int]
    name: str
    description: str
    nights: int
    total_price: Decimal
    average_nightly_price: Decimal
    savings: Decimal
    currency: str
    features: List[str]
    cancellation_policy: PolicySummary
    price_breakdown: PriceBreakdown
    priority: int = 0

    @property
    def is_direct(self) -> bool:
        return self.rate_plan_id is None


@dataclass(frozen=True)
class BookingOptions(ValueObject):
    property_id: int
    check_in: date
    check_out: date
    nights: int
    guest_count: int
    is_half_day: bool
    currency: str
    base_total: Decimal
    options: List[RatePlanOption]

    @property
    def direct_option(self) -> RatePlanOption:
        return next(option for option in self.options if option.is_direct)

    def find(self, rate_plan_id: int) -> Optional[RatePlanOption]:
        return next((option for option in self.options if option.rate_plan_id == rate_plan_id), None)


@dataclass(frozen=True)
class CancellationPreview(ValueObject):
    reservation_id: int
    original_amount: Decimal
    refund_amount: Decimal
    cancellation_fee: Decimal
    refund_percentage: int
    policy_type: str
    policy_details: str
    days_before_check_in: int
    initiated_by_host: bool
    can_cancel: bool = True


@dataclass(frozen=True)
class CancellationDetails(ValueObject):
    """What was applied by a completed cancellation"""
    reservation_id: int
    original_amount: Decimal
    refund_amount: Decimal
    cancellation_fee: Decimal
    refund_percentage: int
    policy_type: str
    cancelled_by_user_id: int
    initiated_by: str
    reason_category: str
    reason: str
    cancelled_at: datetime
    released_dates: int
    payout_id: Optional[int] = None
    audit_entry_id: Optional[int] = None
