from datetime import date
from decimal import Decimal

import pytest

from apps.bookings.models import Reservation
from apps.finances.models import Payout
from apps.finances.services import schedule_refund_payout
from apps.properties.models import Property
from apps.users.models import User


@pytest.fixture
def reservation():
    host = User.objects.create_user(email="host-payout@example.com", password="Pass12345", role=User.RoleChoices.HOST)
    guest = User.objects.create_user(email="guest-payout@example.com", password="Pass12345")
    prop = Property.objects.create(owner=host, title="Harbour room", status=Property.Status.LIVE)
    return Reservation.objects.create(
        guest=guest,
        property=prop,
        check_in=date(2030, 6, 1),
        check_out=date(2030, 6, 3),
        status=Reservation.Status.CANCELLED,
        total_price=Decimal("240.00"),
    )


@pytest.mark.django_db
def test_refund_is_booked_as_negative_payout(reservation):
    payout = schedule_refund_payout(reservation, Decimal("120.005"))

    payout.refresh_from_db()
    assert payout.amount == Decimal("-120.01")
    assert payout.is_refund
    assert payout.host_id == reservation.property.owner_id
    assert payout.status == Payout.Status.PENDING
    assert payout.currency == "AED"
    assert payout.description == f"Refund for cancelled reservation #{reservation.pk}"


@pytest.mark.django_db
@pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-10")])
def test_non_positive_refund_is_rejected(reservation, amount):
    with pytest.raises(ValueError):
        schedule_refund_payout(reservation, amount)
    assert not Payout.objects.exists()
