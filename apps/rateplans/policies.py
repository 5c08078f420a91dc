"""Cancellation refund rules.

Refund percentage depends only on the policy type, its optional
thresholds and the number of days left before check-in.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from shared.domain.value_objects import quantize_amount

from .constants import (
    DEFAULT_FLEXIBLE_FREE_DAYS,
    DEFAULT_MODERATE_FREE_DAYS,
    DEFAULT_MODERATE_PARTIAL_DAYS,
    MODERATE_PARTIAL_REFUND_PERCENT,
    CancellationType,
)


@dataclass(frozen=True)
class PolicyTerms:
    """Cancellation terms in effect for a reservation."""

    cancellation_type: str
    free_cancellation_days: int | None = None
    partial_refund_days: int | None = None

    @classmethod
    def default(cls) -> "PolicyTerms":
        return cls(CancellationType.FULLY_FLEXIBLE, DEFAULT_FLEXIBLE_FREE_DAYS)

    @classmethod
    def from_policy(cls, policy) -> "PolicyTerms":
        if policy is None:
            return cls.default()
        return cls(
            policy.cancellation_type,
            policy.free_cancellation_days,
            policy.partial_refund_days,
        )

    @property
    def description(self) -> str:
        return describe_policy(self)


@dataclass(frozen=True)
class RefundQuote:
    refund_amount: Decimal
    cancellation_fee: Decimal
    refund_percentage: int


def _or_default(value: int | None, default: int) -> int:
    return default if value is None else value


def refund_percentage(terms: PolicyTerms, days_before_check_in: int) -> int:
    if terms.cancellation_type == CancellationType.NON_REFUNDABLE:
        return 0
    if terms.cancellation_type == CancellationType.FULLY_FLEXIBLE:
        free_days = _or_default(terms.free_cancellation_days, DEFAULT_FLEXIBLE_FREE_DAYS)
        return 100 if days_before_check_in >= free_days else 0
    if terms.cancellation_type == CancellationType.MODERATE:
        free_days = _or_default(terms.free_cancellation_days, DEFAULT_MODERATE_FREE_DAYS)
        partial_days = _or_default(terms.partial_refund_days, DEFAULT_MODERATE_PARTIAL_DAYS)
        if days_before_check_in >= free_days:
            return 100
        if days_before_check_in >= partial_days:
            return MODERATE_PARTIAL_REFUND_PERCENT
        return 0
    raise ValueError(f"Unknown cancellation policy type: {terms.cancellation_type}")


def quote_for_percentage(total_price: Decimal, percentage: int) -> RefundQuote:
    total = Decimal(total_price)
    refund = quantize_amount(total * percentage / 100)
    return RefundQuote(
        refund_amount=refund,
        cancellation_fee=quantize_amount(total - refund),
        refund_percentage=percentage,
    )


def compute_refund(total_price: Decimal, terms: PolicyTerms, days_before_check_in: int) -> RefundQuote:
    return quote_for_percentage(total_price, refund_percentage(terms, days_before_check_in))


def full_refund(total_price: Decimal) -> RefundQuote:
    return quote_for_percentage(total_price, 100)


def describe_policy(terms: PolicyTerms) -> str:
    if terms.cancellation_type == CancellationType.NON_REFUNDABLE:
        return "Non-refundable - no refund upon cancellation"
    if terms.cancellation_type == CancellationType.FULLY_FLEXIBLE:
        days = _or_default(terms.free_cancellation_days, DEFAULT_FLEXIBLE_FREE_DAYS)
        return f"Free cancellation up to {days} day(s) before check-in"
    if terms.cancellation_type == CancellationType.MODERATE:
        free_days = _or_default(terms.free_cancellation_days, DEFAULT_MODERATE_FREE_DAYS)
        partial_days = _or_default(terms.partial_refund_days, DEFAULT_MODERATE_PARTIAL_DAYS)
        return (
            f"Full refund up to {free_days} days before check-in, "
            f"{MODERATE_PARTIAL_REFUND_PERCENT}% refund up to {partial_days} days before check-in"
        )
    return "Standard cancellation policy applies"
