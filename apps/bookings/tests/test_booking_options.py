"""Tests for booking option pricing and ranking."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.domain.entities import BookingCriteria
from apps.bookings.domain.options import build_direct_option, rank_options
from apps.bookings.services import BookingCalculator
from apps.properties.models import WEEKDAY_NAMES, DateOverride, Property, WeeklyPricing
from apps.properties.pricing import ResolvedNight
from apps.rateplans.constants import CancellationType, ModifierType
from apps.rateplans.models import CancellationPolicy, RatePlan
from apps.users.models import User
from shared.domain.exceptions import (
    InvalidDateRangeError,
    PricingNotConfiguredError,
    PropertyNotBookableError,
    PropertyNotFoundError,
    RatePlanNotFoundError,
    RatePlanUnavailableError,
)

TODAY = date(2030, 1, 1)
CHECK_IN = date(2030, 1, 6)
CHECK_OUT = date(2030, 1, 9)


def flat_weekly_pricing(prop: Property, full: str = "100.00", half: str = "70.00") -> WeeklyPricing:
    prices = {}
    for day in WEEKDAY_NAMES:
        prices[f"price_{day}"] = Decimal(full)
        prices[f"half_day_price_{day}"] = Decimal(half)
    return WeeklyPricing.objects.create(property=prop, **prices)


class BookingCalculatorTests(TestCase):
    def setUp(self) -> None:
        self.owner = User.objects.create_user(
            email="host-options@example.com",
            password="HostPass123",
            role=User.RoleChoices.HOST,
        )
        self.property = Property.objects.create(
            owner=self.owner,
            title="Creek apartment",
            status=Property.Status.LIVE,
        )
        flat_weekly_pricing(self.property)
        self.calculator = BookingCalculator(today=lambda: TODAY)

        self.non_refundable = RatePlan.objects.create(
            property=self.property,
            name="Non-refundable",
            modifier_type=ModifierType.PERCENTAGE,
            modifier_value=Decimal("-10"),
            features=["Best price"],
        )
        CancellationPolicy.objects.create(
            rate_plan=self.non_refundable,
            cancellation_type=CancellationType.NON_REFUNDABLE,
        )
        self.early_bird = RatePlan.objects.create(
            property=self.property,
            name="Early bird",
            modifier_value=Decimal("-25"),
            min_advance_booking=30,
        )
        self.breakfast = RatePlan.objects.create(
            property=self.property,
            name="Bed and breakfast",
            modifier_type=ModifierType.FIXED_AMOUNT,
            modifier_value=Decimal("20"),
        )
        self.retired = RatePlan.objects.create(
            property=self.property,
            name="Retired",
            modifier_value=Decimal("-50"),
            is_active=False,
        )

    def _criteria(self, **overrides) -> BookingCriteria:
        values = dict(property_id=self.property.pk, check_in=CHECK_IN, check_out=CHECK_OUT, guest_count=2)
        values.update(overrides)
        return BookingCriteria(**values)

    def test_options_are_ranked_cheapest_first(self) -> None:
        result = self.calculator.calculate_booking_options(self._criteria())

        self.assertEqual(result.nights, 3)
        self.assertEqual(result.base_total, Decimal("300.00"))
        self.assertEqual(
            [(option.name, option.total_price) for option in result.options],
            [
                ("Non-refundable", Decimal("270.00")),
                ("Standard Rate", Decimal("300.00")),
                ("Bed and breakfast", Decimal("360.00")),
            ],
        )

    def test_direct_option_uses_default_flexible_policy(self) -> None:
        direct = self.calculator.calculate_booking_options(self._criteria()).direct_option

        self.assertIsNone(direct.rate_plan_id)
        self.assertEqual(direct.savings, Decimal("0.00"))
        self.assertEqual(direct.cancellation_policy.cancellation_type, CancellationType.FULLY_FLEXIBLE)
        self.assertEqual(
            direct.cancellation_policy.description,
            "Free cancellation up to 1 day(s) before check-in",
        )
        self.assertEqual(direct.price_breakdown.modifier_description, "No price adjustment")

    def test_rate_plan_option_breakdown(self) -> None:
        option = self.calculator.calculate_booking_options(self._criteria()).find(self.non_refundable.pk)

        self.assertEqual(option.savings, Decimal("30.00"))
        self.assertEqual(option.average_nightly_price, Decimal("90.00"))
        self.assertEqual(option.features, ["Best price"])
        self.assertEqual(option.price_breakdown.modifier_description, "10% discount")
        self.assertEqual(option.cancellation_policy.cancellation_type, CancellationType.NON_REFUNDABLE)
        self.assertEqual(
            [night.final_price for night in option.price_breakdown.nightly_prices],
            [Decimal("90.00")] * 3,
        )

    def test_surcharge_has_negative_savings(self) -> None:
        option = self.calculator.calculate_booking_options(self._criteria()).find(self.breakfast.pk)

        self.assertEqual(option.savings, Decimal("-60.00"))
        self.assertEqual(option.price_breakdown.modifier_description, "+AED 20 per night")

    def test_each_night_is_rounded_before_summing(self) -> None:
        for offset in range(2):
            DateOverride.objects.create(
                property=self.property,
                date=CHECK_IN + timedelta(days=offset),
                price=Decimal("10.05"),
            )
        premium = RatePlan.objects.create(
            property=self.property, name="Premium", modifier_value=Decimal("10")
        )

        option = self.calculator.calculate_booking_options(
            self._criteria(check_out=CHECK_IN + timedelta(days=2))
        ).find(premium.pk)

        # 11.055 rounds to 11.06 per night; rounding the 22.11 sum would lose a cent
        self.assertEqual(option.total_price, Decimal("22.12"))

    def test_half_day_override_without_half_price(self) -> None:
        DateOverride.objects.create(property=self.property, date=CHECK_IN, price=Decimal("200.00"))

        result = self.calculator.calculate_booking_options(
            self._criteria(check_out=CHECK_IN + timedelta(days=1), is_half_day=True)
        )

        self.assertEqual(result.direct_option.total_price, Decimal("140.00"))
        night = result.direct_option.price_breakdown.nightly_prices[0]
        self.assertTrue(night.is_override)

    def test_ineligible_and_inactive_plans_are_skipped(self) -> None:
        ids = {option.rate_plan_id for option in self.calculator.calculate_booking_options(self._criteria()).options}

        self.assertNotIn(self.early_bird.pk, ids)
        self.assertNotIn(self.retired.pk, ids)

    def test_equal_totals_keep_priority_order(self) -> None:
        neutral = RatePlan.objects.create(property=self.property, name="Flexible plus", priority=5)

        options = self.calculator.calculate_booking_options(self._criteria()).options
        names = [option.name for option in options]

        self.assertLess(names.index("Standard Rate"), names.index(neutral.name))

    def test_price_without_plan_is_the_direct_option(self) -> None:
        option = self.calculator.calculate_booking_price(self._criteria())

        self.assertTrue(option.is_direct)
        self.assertEqual(option.total_price, Decimal("300.00"))

    def test_price_for_eligible_plan(self) -> None:
        option = self.calculator.calculate_booking_price(self._criteria(), self.non_refundable.pk)
        self.assertEqual(option.total_price, Decimal("270.00"))

    def test_price_for_ineligible_plan_lists_reasons(self) -> None:
        with self.assertRaises(RatePlanUnavailableError) as caught:
            self.calculator.calculate_booking_price(self._criteria(), self.early_bird.pk)
        self.assertEqual(caught.exception.reasons, ["Must be booked at least 30 days in advance"])

    def test_price_for_inactive_plan(self) -> None:
        with self.assertRaises(RatePlanUnavailableError) as caught:
            self.calculator.calculate_booking_price(self._criteria(), self.retired.pk)
        self.assertEqual(caught.exception.reasons, ["Rate plan is not active"])

    def test_price_for_unknown_plan(self) -> None:
        with self.assertRaises(RatePlanNotFoundError):
            self.calculator.calculate_booking_price(self._criteria(), 999_999)

    def test_invalid_requests(self) -> None:
        with self.assertRaises(InvalidDateRangeError):
            self.calculator.calculate_booking_options(self._criteria(check_out=CHECK_IN))
        with self.assertRaises(PropertyNotFoundError):
            self.calculator.calculate_booking_options(self._criteria(property_id=999_999))

    def test_unbookable_property(self) -> None:
        self.property.status = Property.Status.CLOSED
        self.property.save(update_fields=["status"])

        with self.assertRaises(PropertyNotBookableError):
            self.calculator.calculate_booking_options(self._criteria())

    def test_property_without_pricing(self) -> None:
        bare = Property.objects.create(owner=self.owner, title="Bare", status=Property.Status.LIVE)

        with self.assertRaises(PricingNotConfiguredError):
            self.calculator.calculate_booking_options(self._criteria(property_id=bare.pk))


def test_rank_options_is_stable_for_ties():
    nights = [ResolvedNight(date=CHECK_IN, price=Decimal("100.00"), is_override=False)]
    first = build_direct_option(nights, "AED")
    second = build_direct_option(nights, "USD")

    assert rank_options([first, second]) == [first, second]
    assert rank_options([second, first]) == [second, first]


class BookingOptionsAPITests(APITestCase):
    def setUp(self) -> None:
        self.owner = User.objects.create_user(
            email="host-options-api@example.com",
            password="HostPass123",
            role=User.RoleChoices.HOST,
        )
        self.property = Property.objects.create(
            owner=self.owner,
            title="Jumeirah flat",
            status=Property.Status.LIVE,
        )
        flat_weekly_pricing(self.property)
        self.last_minute = RatePlan.objects.create(
            property=self.property,
            name="Last minute",
            modifier_value=Decimal("-20"),
            max_advance_booking=3,
        )
        self.check_in = timezone.localdate() + timedelta(days=10)
        self.params = {
            "property_id": self.property.pk,
            "check_in": str(self.check_in),
            "check_out": str(self.check_in + timedelta(days=2)),
            "guest_count": 2,
        }

    def test_options_endpoint(self) -> None:
        response = self.client.get(reverse("booking-options"), self.params)

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["nights"], 2)
        self.assertEqual(response.data["base_total"], "200.00")
        self.assertEqual(len(response.data["options"]), 1)
        self.assertEqual(response.data["options"][0]["name"], "Standard Rate")
        self.assertEqual(len(response.data["options"][0]["price_breakdown"]["nightly_prices"]), 2)

    def test_price_endpoint_reports_unavailable_plan(self) -> None:
        response = self.client.get(
            reverse("booking-price"), {**self.params, "rate_plan_id": self.last_minute.pk}
        )

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data["code"], "rate_plan_unavailable")
        self.assertEqual(response.data["reasons"], ["Cannot be booked more than 3 days in advance"])

    def test_invalid_dates_are_rejected(self) -> None:
        response = self.client.get(
            reverse("booking-options"), {**self.params, "check_out": str(self.check_in)}
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_property(self) -> None:
        response = self.client.get(reverse("booking-options"), {**self.params, "property_id": 999_999})

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
