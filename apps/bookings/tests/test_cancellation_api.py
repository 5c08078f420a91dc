"""API tests for reservation listing and cancellation endpoints."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.audit.models import AuditLogEntry
from apps.bookings.models import Reservation
from apps.finances.models import Payout
from apps.properties.models import Property
from apps.rateplans.constants import CancellationType
from apps.rateplans.models import CancellationPolicy, RatePlan
from apps.users.models import User


class ReservationCancellationAPITests(APITestCase):
    def setUp(self) -> None:
        self.guest = User.objects.create_user(
            email="guest-cancel-api@example.com",
            password="GuestPass123",
            role=User.RoleChoices.GUEST,
        )
        self.host = User.objects.create_user(
            email="host-cancel-api@example.com",
            password="HostPass123",
            role=User.RoleChoices.HOST,
        )
        self.stranger = User.objects.create_user(
            email="stranger-cancel-api@example.com",
            password="GuestPass123",
            role=User.RoleChoices.GUEST,
        )
        self.property = Property.objects.create(
            owner=self.host,
            title="Old town house",
            status=Property.Status.LIVE,
        )
        self.non_refundable = RatePlan.objects.create(property=self.property, name="Non-refundable")
        CancellationPolicy.objects.create(
            rate_plan=self.non_refundable,
            cancellation_type=CancellationType.NON_REFUNDABLE,
        )
        check_in = timezone.localdate() + timedelta(days=10)
        self.reservation = Reservation.objects.create(
            guest=self.guest,
            property=self.property,
            rate_plan=self.non_refundable,
            check_in=check_in,
            check_out=check_in + timedelta(days=2),
            status=Reservation.Status.CONFIRMED,
            total_price=Decimal("360.00"),
        )

    def _url(self, name: str) -> str:
        return reverse(name, kwargs={"pk": self.reservation.pk})

    def test_guest_lists_only_own_reservations(self) -> None:
        Reservation.objects.create(
            guest=self.stranger,
            property=self.property,
            check_in=self.reservation.check_in,
            check_out=self.reservation.check_out,
            total_price=Decimal("300.00"),
        )
        self.client.force_authenticate(self.guest)

        response = self.client.get(reverse("reservation-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual([item["id"] for item in response.data], [self.reservation.pk])
        self.assertEqual(response.data[0]["rate_plan_name"], "Non-refundable")

    def test_host_sees_property_reservations(self) -> None:
        self.client.force_authenticate(self.host)

        response = self.client.get(reverse("reservation-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

    def test_preview_for_guest(self) -> None:
        self.client.force_authenticate(self.guest)

        response = self.client.get(self._url("reservation-cancellation-preview"))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["refund_amount"], "0.00")
        self.assertEqual(response.data["cancellation_fee"], "360.00")
        self.assertEqual(response.data["policy_type"], CancellationType.NON_REFUNDABLE)
        self.assertFalse(response.data["initiated_by_host"])

    def test_preview_for_stranger_is_forbidden(self) -> None:
        self.client.force_authenticate(self.stranger)

        response = self.client.get(self._url("reservation-cancellation-preview"))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["code"], "permission_denied")

    def test_guest_cancels_non_refundable_reservation(self) -> None:
        self.client.force_authenticate(self.guest)

        response = self.client.post(
            self._url("reservation-cancel"),
            {"reason": "Visa refused", "reason_category": Reservation.CancellationReason.EMERGENCY},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["reservation"]["status"], Reservation.Status.CANCELLED)
        self.assertEqual(response.data["cancellation"]["refund_amount"], "0.00")
        self.assertEqual(response.data["cancellation"]["initiated_by"], "guest")
        self.assertIsNone(response.data["cancellation"]["payout_id"])
        self.assertFalse(Payout.objects.exists())
        self.assertEqual(
            AuditLogEntry.objects.filter(
                reservation=self.reservation, action=AuditLogEntry.Action.CANCELLED
            ).count(),
            1,
        )

    def test_host_cancellation_is_refunded_in_full(self) -> None:
        self.client.force_authenticate(self.host)

        response = self.client.post(
            self._url("reservation-cancel"), {"reason": "Pipe burst"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["cancellation"]["initiated_by"], "host")
        self.assertEqual(response.data["cancellation"]["refund_percentage"], 100)
        self.assertEqual(Payout.objects.get().amount, Decimal("-360.00"))

    def test_cancelling_twice_conflicts(self) -> None:
        self.client.force_authenticate(self.guest)
        url = self._url("reservation-cancel")
        self.client.post(url, {"reason": "Visa refused"}, format="json")

        response = self.client.post(url, {"reason": "Visa refused"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["code"], "invalid_state")

    def test_reason_is_required(self) -> None:
        self.client.force_authenticate(self.guest)

        response = self.client.post(self._url("reservation-cancel"), {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("reason", response.data)

    def test_unknown_reservation(self) -> None:
        self.client.force_authenticate(self.guest)

        response = self.client.post(
            reverse("reservation-cancel", kwargs={"pk": 999_999}),
            {"reason": "Typo"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_anonymous_cannot_cancel(self) -> None:
        response = self.client.post(self._url("reservation-cancel"), {"reason": "Nope"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_cancellation_history(self) -> None:
        self.client.force_authenticate(self.guest)
        self.client.post(self._url("reservation-cancel"), {"reason": "Visa refused"}, format="json")

        response = self.client.get(reverse("reservation-cancellations"))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["reservation"]["id"], self.reservation.pk)
        self.assertEqual(response.data[0]["description"], "Reservation cancelled. Reason: Visa refused")
