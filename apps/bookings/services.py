"""Domain services for booking workflows."""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable

from django.db import transaction  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore
from django.utils import timezone  # type: ignore

from apps.properties.models import AvailabilityRecord, Property
from apps.properties.pricing import PricingResolver
from apps.rateplans.eligibility import StayCriteria, eligibility_failures
from apps.rateplans.models import RatePlan
from shared.domain.exceptions import (
    InvalidDateRangeError,
    PricingNotConfiguredError,
    PropertyNotBookableError,
    PropertyNotFoundError,
    RatePlanNotFoundError,
    RatePlanUnavailableError,
)
from shared.domain.value_objects import DateRange

from .domain.entities import BookingCriteria, BookingOptions, RatePlanOption
from .domain.options import base_total, build_direct_option, build_rate_plan_option, rank_options
from .models import Reservation

logger = logging.getLogger(__name__)


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def lock_reservation(reservation_id) -> Reservation | None:
    """Fetch a reservation holding its row lock for the rest of the transaction."""

    queryset = _lock_queryset_if_possible(Reservation.objects.filter(pk=reservation_id))
    return queryset.first()


def release_dates_for_reservation(reservation: Reservation) -> int:
    """Mark every night of the stay as available again; safe to repeat."""

    released = AvailabilityRecord.objects.filter(
        property_id=reservation.property_id,
        date__gte=reservation.check_in,
        date__lt=reservation.check_out,
    ).update(is_available=True)
    logger.info(f"Released {released} availability days for reservation {reservation.pk}")
    return released


class BookingCalculator:
    """Builds the ranked price options for a requested stay."""

    def __init__(
        self,
        resolver: PricingResolver | None = None,
        today: Callable[[], date] = timezone.localdate,
    ):
        self.resolver = resolver or PricingResolver()
        self._today = today

    def calculate_booking_options(self, criteria: BookingCriteria) -> BookingOptions:
        nights = (criteria.check_out - criteria.check_in).days
        if nights <= 0:
            raise InvalidDateRangeError()

        prop = Property.objects.filter(pk=criteria.property_id).first()
        if prop is None:
            raise PropertyNotFoundError()
        if not prop.is_bookable:
            raise PropertyNotBookableError()
        weekly = self.resolver.get_weekly_pricing(prop.pk)
        if weekly is None:
            raise PricingNotConfiguredError()

        resolved = self.resolver.resolve_stay(
            prop.pk,
            DateRange(criteria.check_in, criteria.check_out),
            criteria.is_half_day,
            weekly=weekly,
        )
        stay = StayCriteria.for_stay(
            criteria.check_in, criteria.check_out, criteria.guest_count, self._today()
        )

        options = [build_direct_option(resolved, prop.currency)]
        rate_plans = (
            RatePlan.objects.for_property(prop.pk)
            .active()
            .select_related("cancellation_policy")
            .by_priority()
        )
        for rate_plan in rate_plans:
            failures = eligibility_failures(rate_plan, stay)
            if failures:
                logger.debug(f"Rate plan {rate_plan.pk} skipped: {'; '.join(failures)}")
                continue
            options.append(build_rate_plan_option(rate_plan, resolved, prop.currency))

        return BookingOptions(
            property_id=prop.pk,
            check_in=criteria.check_in,
            check_out=criteria.check_out,
            nights=nights,
            guest_count=criteria.guest_count,
            is_half_day=criteria.is_half_day,
            currency=prop.currency,
            base_total=base_total(resolved),
            options=rank_options(options),
        )

    def calculate_booking_price(
        self,
        criteria: BookingCriteria,
        rate_plan_id: int | None = None,
    ) -> RatePlanOption:
        """Price of one option: the direct rate, or the given rate plan.

        Plans are re-read on every call, so a plan deactivated after the
        options were shown is rejected here.
        """

        booking_options = self.calculate_booking_options(criteria)
        if rate_plan_id is None:
            return booking_options.direct_option

        option = booking_options.find(rate_plan_id)
        if option is not None:
            return option

        rate_plan = RatePlan.objects.filter(pk=rate_plan_id, property_id=criteria.property_id).first()
        if rate_plan is None:
            raise RatePlanNotFoundError()
        reasons = []
        if not rate_plan.is_active:
            reasons.append("Rate plan is not active")
        reasons.extend(
            eligibility_failures(
                rate_plan,
                StayCriteria.for_stay(
                    criteria.check_in, criteria.check_out, criteria.guest_count, self._today()
                ),
            )
        )
        raise RatePlanUnavailableError(reasons=reasons)
