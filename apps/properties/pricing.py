"""Nightly price resolution and pricing configuration.

Two sources can price a night: the property's weekly grid and a
date-specific override. An override always wins for its date. Half-day
requests use the dedicated half-day price and, for overrides that lack
one, a fixed share of the full price.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal, InvalidOperation
from typing import Callable, Iterable, Mapping, Sequence

from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore

from shared.domain.exceptions import (
    DomainValidationError,
    InvalidDateRangeError,
    PricingNotConfiguredError,
    PropertyNotFoundError,
)
from shared.domain.value_objects import DateRange, quantize_amount

from .models import (
    MAX_NIGHTLY_PRICE,
    WEEKDAY_NAMES,
    DateOverride,
    Property,
    WeeklyPricing,
)

logger = logging.getLogger(__name__)

# Share of the full override price charged for a half-day stay when the
# override has no half-day price of its own.
HALF_DAY_FALLBACK_RATIO = Decimal("0.7")

MAX_OVERRIDES_PER_REQUEST = 365
MAX_CALENDAR_DAYS = 365

OWNERSHIP_ERROR = "Property not found or you do not have permission"


def weekday_index(day: date) -> int:
    """Weekday of ``day`` with 0 = Sunday through 6 = Saturday."""
    return (day.weekday() + 1) % 7


def resolve_price(
    weekly: WeeklyPricing | None,
    override: DateOverride | None,
    day: date,
    is_half_day: bool = False,
) -> Decimal:
    """Pure price resolution for a single night.

    Raises PricingNotConfiguredError when neither source can price ``day``.
    """

    if override is not None:
        if not is_half_day:
            return override.price
        if override.half_day_price is not None:
            return override.half_day_price
        return quantize_amount(override.price * HALF_DAY_FALLBACK_RATIO)

    if weekly is None:
        raise PricingNotConfiguredError()

    index = weekday_index(day)
    if is_half_day:
        return weekly.half_day_price(index)
    return weekly.full_day_price(index)


@dataclass(frozen=True)
class ResolvedNight:
    date: date
    price: Decimal
    is_override: bool
    override_reason: str | None = None


@dataclass(frozen=True)
class CalendarDay:
    date: date
    day_of_week: str
    price: Decimal
    half_day_price: Decimal
    is_override: bool
    reason: str | None = None


class PricingResolver:
    """Resolves nightly prices for a property from the database."""

    def get_weekly_pricing(self, property_id) -> WeeklyPricing | None:
        return WeeklyPricing.objects.filter(property_id=property_id).first()

    def resolve(self, property_id, day: date, is_half_day: bool = False) -> Decimal:
        override = DateOverride.objects.filter(property_id=property_id, date=day).first()
        weekly = None if override is not None else self.get_weekly_pricing(property_id)
        return resolve_price(weekly, override, day, is_half_day)

    def resolve_stay(
        self,
        property_id,
        stay: DateRange,
        is_half_day: bool = False,
        *,
        weekly: WeeklyPricing | None = None,
    ) -> list[ResolvedNight]:
        """Price every night of ``stay`` with a single override query."""

        if weekly is None:
            weekly = self.get_weekly_pricing(property_id)
        overrides = {
            item.date: item
            for item in DateOverride.objects.filter(
                property_id=property_id,
                date__gte=stay.start_date,
                date__lt=stay.end_date,
            )
        }
        nights = []
        for day in stay.days():
            override = overrides.get(day)
            nights.append(
                ResolvedNight(
                    date=day,
                    price=resolve_price(weekly, override, day, is_half_day),
                    is_override=override is not None,
                    override_reason=(override.reason or None) if override else None,
                )
            )
        return nights


def _coerce_price(label: str, value) -> Decimal:
    try:
        price = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise DomainValidationError(f"{label} must be a number")
    if price <= 0:
        raise DomainValidationError(f"{label} must be greater than 0")
    if price > MAX_NIGHTLY_PRICE:
        raise DomainValidationError(f"{label} must not exceed {MAX_NIGHTLY_PRICE}")
    return quantize_amount(price)


class PricingConfigurationService:
    """Owner-facing management of the weekly grid and date overrides."""

    def __init__(self, today: Callable[[], date] = timezone.localdate):
        self._today = today

    def _owned_property(self, property_id, user) -> Property:
        prop = Property.objects.filter(pk=property_id).first()
        if prop is None or not prop.is_owned_by(getattr(user, "pk", None)):
            raise PropertyNotFoundError(OWNERSHIP_ERROR)
        return prop

    def get_weekly_pricing(self, property_id) -> WeeklyPricing | None:
        if not Property.objects.filter(pk=property_id).exists():
            raise PropertyNotFoundError()
        return WeeklyPricing.objects.filter(property_id=property_id).first()

    def set_weekly_pricing(self, property_id, user, prices: Mapping[str, object]) -> WeeklyPricing:
        """Create or replace the weekly grid.

        ``prices`` maps ``price_<day>`` and ``half_day_price_<day>`` for all
        seven days to amounts.
        """

        prop = self._owned_property(property_id, user)
        values: dict[str, Decimal] = {}
        for day in WEEKDAY_NAMES:
            full = _coerce_price(f"{day.capitalize()} price", prices.get(f"price_{day}"))
            half = _coerce_price(
                f"{day.capitalize()} half-day price", prices.get(f"half_day_price_{day}")
            )
            if half > full:
                raise DomainValidationError(
                    f"{day.capitalize()} half-day price cannot exceed the full-day price"
                )
            values[f"price_{day}"] = full
            values[f"half_day_price_{day}"] = half

        weekly, created = WeeklyPricing.objects.update_or_create(property=prop, defaults=values)
        logger.info(
            f"{'Created' if created else 'Updated'} weekly pricing for property {prop.pk} "
            f"by user {user.pk}"
        )
        return weekly

    def set_date_overrides(
        self,
        property_id,
        user,
        overrides: Sequence[Mapping[str, object]],
    ) -> list[DateOverride]:
        """Upsert date overrides; all-or-nothing."""

        prop = self._owned_property(property_id, user)
        if not overrides:
            raise DomainValidationError("At least one override is required")
        if len(overrides) > MAX_OVERRIDES_PER_REQUEST:
            raise DomainValidationError(
                f"Cannot set more than {MAX_OVERRIDES_PER_REQUEST} overrides at once"
            )

        today = self._today()
        cleaned = []
        for item in overrides:
            day = item.get("date")
            if not isinstance(day, date):
                raise DomainValidationError("Each override needs a date")
            if day < today:
                raise DomainValidationError(f"Cannot set price override for past date {day}")
            price = _coerce_price(f"Price for {day}", item.get("price"))
            half = item.get("half_day_price")
            half_price = None
            if half is not None:
                half_price = _coerce_price(f"Half-day price for {day}", half)
                if half_price > price:
                    raise DomainValidationError(
                        f"Half-day price cannot exceed the full-day price for {day}"
                    )
            cleaned.append((day, price, half_price, item.get("reason") or ""))

        saved = []
        with transaction.atomic():
            for day, price, half_price, reason in cleaned:
                override, _ = DateOverride.objects.update_or_create(
                    property=prop,
                    date=day,
                    defaults={"price": price, "half_day_price": half_price, "reason": reason},
                )
                saved.append(override)
        logger.info(f"Saved {len(saved)} date overrides for property {prop.pk}")
        return saved

    def delete_date_overrides(self, property_id, user, dates: Iterable[date]) -> int:
        prop = self._owned_property(property_id, user)
        dates = list(dates)
        if not dates:
            raise DomainValidationError("At least one date is required")
        today = self._today()
        past = [day for day in dates if day < today]
        if past:
            raise DomainValidationError(f"Cannot delete price override for past date {min(past)}")

        deleted, _ = DateOverride.objects.filter(property=prop, date__in=dates).delete()
        logger.info(f"Deleted {deleted} date overrides for property {prop.pk}")
        return deleted

    def get_pricing_calendar(self, property_id, start: date, end: date) -> list[CalendarDay]:
        """Full and half-day price for every day of ``[start, end]``."""

        if start >= end:
            raise InvalidDateRangeError("Start date must be before end date")
        if (end - start).days + 1 > MAX_CALENDAR_DAYS:
            raise DomainValidationError(f"Date range cannot exceed {MAX_CALENDAR_DAYS} days")
        if not Property.objects.filter(pk=property_id).exists():
            raise PropertyNotFoundError()

        weekly = WeeklyPricing.objects.filter(property_id=property_id).first()
        if weekly is None:
            raise PricingNotConfiguredError()

        overrides = {
            item.date: item
            for item in DateOverride.objects.filter(
                property_id=property_id, date__gte=start, date__lte=end
            )
        }

        calendar = []
        day = start
        while day <= end:
            override = overrides.get(day)
            calendar.append(
                CalendarDay(
                    date=day,
                    day_of_week=WEEKDAY_NAMES[weekday_index(day)].capitalize(),
                    price=resolve_price(weekly, override, day),
                    half_day_price=resolve_price(weekly, override, day, is_half_day=True),
                    is_override=override is not None,
                    reason=(override.reason or None) if override else None,
                )
            )
            day += timedelta(days=1)
        return calendar
