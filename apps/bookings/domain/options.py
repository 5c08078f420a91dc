"""
Booking Options

Turns resolved nightly base prices into priced, ranked options: the
direct "Standard Rate" plus one option per eligible rate plan.
Pure functions; rate plans are read through their attributes only.
"""

from decimal import Decimal
from typing import Iterable, List, Sequence

from apps.rateplans.constants import STANDARD_RATE_DESCRIPTION, STANDARD_RATE_NAME
from apps.rateplans.modifiers import apply_modifier, describe_modifier
from apps.rateplans.policies import PolicyTerms
from shared.domain.value_objects import quantize_amount

from .entities import NightlyPrice, PolicySummary, PriceBreakdown, RatePlanOption


def _summary(terms: PolicyTerms) -> PolicySummary:
    return PolicySummary(
        cancellation_type=str(terms.cancellation_type),
        description=terms.description,
        free_cancellation_days=terms.free_cancellation_days,
        partial_refund_days=terms.partial_refund_days,
    )


def base_total(resolved_nights: Sequence) -> Decimal:
    return quantize_amount(sum((night.price for night in resolved_nights), Decimal('0')))


def _average(total: Decimal, nights: int) -> Decimal:
    return quantize_amount(total / nights)


def build_direct_option(resolved_nights: Sequence, currency: str) -> RatePlanOption:
    nightly = [
        NightlyPrice(
            date=night.date,
            base_price=night.price,
            final_price=night.price,
            is_override=night.is_override,
            override_reason=night.override_reason,
        )
        for night in resolved_nights
    ]
    total = base_total(resolved_nights)
    return RatePlanOption(
        rate_plan_id=None,
        name=STANDARD_RATE_NAME,
        description=STANDARD_RATE_DESCRIPTION,
        nights=len(nightly),
        total_price=total,
        average_nightly_price=_average(total, len(nightly)),
        savings=Decimal('0.00'),
        currency=currency,
        features=[],
        cancellation_policy=_summary(PolicyTerms.default()),
        price_breakdown=PriceBreakdown(
            base_total=total,
            modifier_description="No price adjustment",
            nightly_prices=nightly,
        ),
    )


def build_rate_plan_option(rate_plan, resolved_nights: Sequence, currency: str) -> RatePlanOption:
    """Price the stay under ``rate_plan``; every night is rounded on its own."""
    modifier = rate_plan.get_modifier()
    nightly = [
        NightlyPrice(
            date=night.date,
            base_price=night.price,
            final_price=apply_modifier(modifier, night.price),
            is_override=night.is_override,
            override_reason=night.override_reason,
        )
        for night in resolved_nights
    ]
    base = base_total(resolved_nights)
    total = quantize_amount(sum((night.final_price for night in nightly), Decimal('0')))
    terms = PolicyTerms.from_policy(rate_plan.get_cancellation_policy())
    return RatePlanOption(
        rate_plan_id=rate_plan.pk,
        name=rate_plan.name,
        description=rate_plan.description or "",
        nights=len(nightly),
        total_price=total,
        average_nightly_price=_average(total, len(nightly)),
        savings=quantize_amount(base - total),
        currency=currency,
        features=list(rate_plan.features or []),
        cancellation_policy=_summary(terms),
        price_breakdown=PriceBreakdown(
            base_total=base,
            modifier_description=describe_modifier(modifier, currency),
            nightly_prices=nightly,
        ),
        priority=rate_plan.priority,
    )


def rank_options(options: Iterable[RatePlanOption]) -> List[RatePlanOption]:
    """Cheapest first; ties keep their incoming order."""
    return sorted(options, key=lambda option: option.total_price)
