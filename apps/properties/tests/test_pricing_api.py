"""API tests for weekly pricing, date overrides and the pricing calendar."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.properties.models import WEEKDAY_NAMES, DateOverride, Property, WeeklyPricing
from apps.users.models import User


def weekly_payload(full="100.00", half="70.00") -> dict[str, str]:
    payload = {}
    for day in WEEKDAY_NAMES:
        payload[f"price_{day}"] = full
        payload[f"half_day_price_{day}"] = half
    return payload


class PricingAPITests(APITestCase):
    def setUp(self) -> None:
        self.owner = User.objects.create_user(
            email="host-api@example.com",
            password="HostPass123",
            role=User.RoleChoices.HOST,
        )
        self.other_host = User.objects.create_user(
            email="other-host-api@example.com",
            password="HostPass123",
            role=User.RoleChoices.HOST,
        )
        self.guest = User.objects.create_user(
            email="guest-api@example.com",
            password="GuestPass123",
            role=User.RoleChoices.GUEST,
        )
        self.property = Property.objects.create(
            owner=self.owner,
            title="Downtown studio",
            status=Property.Status.LIVE,
        )
        self.today = timezone.localdate()

    def _url(self, name: str, property_id=None) -> str:
        return reverse(name, kwargs={"property_id": property_id or self.property.id})

    def test_owner_can_set_weekly_pricing(self) -> None:
        self.client.force_authenticate(self.owner)

        response = self.client.put(
            self._url("property-pricing-weekly"), weekly_payload(), format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        weekly = WeeklyPricing.objects.get(property=self.property)
        self.assertEqual(weekly.price_friday, Decimal("100.00"))
        self.assertEqual(weekly.half_day_price_friday, Decimal("70.00"))

    def test_weekly_pricing_is_public_to_read(self) -> None:
        WeeklyPricing.objects.create(
            property=self.property,
            **{key: Decimal(value) for key, value in weekly_payload().items()},
        )

        response = self.client.get(self._url("property-pricing-weekly"))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["price_sunday"], "100.00")

    def test_missing_weekly_pricing_returns_404(self) -> None:
        response = self.client.get(self._url("property-pricing-weekly"))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_half_day_above_full_day_is_rejected(self) -> None:
        self.client.force_authenticate(self.owner)
        payload = weekly_payload()
        payload["half_day_price_monday"] = "150.00"

        response = self.client.put(self._url("property-pricing-weekly"), payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("half_day_price_monday", response.data)

    def test_other_host_cannot_change_pricing(self) -> None:
        self.client.force_authenticate(self.other_host)

        response = self.client.put(
            self._url("property-pricing-weekly"), weekly_payload(), format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["code"], "not_found")
        self.assertFalse(WeeklyPricing.objects.exists())

    def test_guest_cannot_change_pricing(self) -> None:
        self.client.force_authenticate(self.guest)

        response = self.client.put(
            self._url("property-pricing-weekly"), weekly_payload(), format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_owner_can_save_and_delete_overrides(self) -> None:
        self.client.force_authenticate(self.owner)
        first = self.today + timedelta(days=10)
        second = self.today + timedelta(days=11)

        response = self.client.post(
            self._url("property-pricing-overrides"),
            {
                "overrides": [
                    {"date": str(first), "price": "250.00", "reason": "Festival"},
                    {"date": str(second), "price": "260.00", "half_day_price": "150.00"},
                ]
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(DateOverride.objects.filter(property=self.property).count(), 2)

        response = self.client.post(
            self._url("property-pricing-overrides-bulk-delete"),
            {"dates": [str(first)]},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["deleted"], 1)
        self.assertEqual(
            list(DateOverride.objects.filter(property=self.property).values_list("date", flat=True)),
            [second],
        )

    def test_override_in_the_past_is_rejected(self) -> None:
        self.client.force_authenticate(self.owner)

        response = self.client.post(
            self._url("property-pricing-overrides"),
            {"overrides": [{"date": str(self.today - timedelta(days=1)), "price": "250.00"}]},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "validation_error")

    def test_calendar_merges_overrides(self) -> None:
        WeeklyPricing.objects.create(
            property=self.property,
            **{key: Decimal(value) for key, value in weekly_payload().items()},
        )
        start = self.today + timedelta(days=5)
        DateOverride.objects.create(
            property=self.property,
            date=start + timedelta(days=1),
            price=Decimal("300.00"),
            reason="Expo",
        )

        response = self.client.get(
            self._url("property-pricing-calendar"),
            {"start": str(start), "end": str(start + timedelta(days=2))},
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        days = response.data["days"]
        self.assertEqual(len(days), 3)
        self.assertEqual([day["price"] for day in days], ["100.00", "300.00", "100.00"])
        self.assertEqual(days[1]["half_day_price"], "210.00")
        self.assertTrue(days[1]["is_override"])
        self.assertEqual(days[1]["reason"], "Expo")

    def test_calendar_without_pricing_is_rejected(self) -> None:
        start = self.today + timedelta(days=5)

        response = self.client.get(
            self._url("property-pricing-calendar"),
            {"start": str(start), "end": str(start + timedelta(days=2))},
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
