from datetime import date, timedelta
from decimal import Decimal

import pytest

from apps.properties.models import WEEKDAY_NAMES, DateOverride, Property, WeeklyPricing
from apps.properties.pricing import (
    PricingConfigurationService,
    PricingResolver,
    resolve_price,
    weekday_index,
)
from apps.users.models import User
from shared.domain.exceptions import (
    DomainValidationError,
    InvalidDateRangeError,
    PricingNotConfiguredError,
    PropertyNotFoundError,
)
from shared.domain.value_objects import DateRange

# 2030-01-06 is a Sunday
SUNDAY = date(2030, 1, 6)
TODAY = date(2029, 12, 1)


def weekly_prices(base=100, step=10):
    """Sunday costs ``base``, every following day ``step`` more; half-day is 60%."""
    prices = {}
    for index, day in enumerate(WEEKDAY_NAMES):
        full = Decimal(base + step * index)
        prices[f"price_{day}"] = full
        prices[f"half_day_price_{day}"] = (full * Decimal("0.6")).quantize(Decimal("0.01"))
    return prices


@pytest.fixture
def host():
    return User.objects.create_user(
        email="host-pricing@example.com",
        password="HostPass123",
        role=User.RoleChoices.HOST,
    )


@pytest.fixture
def listing(host):
    return Property.objects.create(owner=host, title="Marina loft", status=Property.Status.LIVE)


@pytest.fixture
def service():
    return PricingConfigurationService(today=lambda: TODAY)


def test_weekday_index_starts_on_sunday():
    assert weekday_index(SUNDAY) == 0
    assert weekday_index(SUNDAY + timedelta(days=1)) == 1
    assert weekday_index(SUNDAY + timedelta(days=6)) == 6


def test_resolve_price_uses_weekly_grid():
    weekly = WeeklyPricing(**weekly_prices())

    assert resolve_price(weekly, None, SUNDAY) == Decimal("100")
    assert resolve_price(weekly, None, SUNDAY + timedelta(days=5)) == Decimal("150")
    assert resolve_price(weekly, None, SUNDAY + timedelta(days=5), is_half_day=True) == Decimal("90.00")


def test_override_wins_over_weekly_grid():
    weekly = WeeklyPricing(**weekly_prices())
    override = DateOverride(date=SUNDAY, price=Decimal("400.00"), half_day_price=Decimal("250.00"))

    assert resolve_price(weekly, override, SUNDAY) == Decimal("400.00")
    assert resolve_price(weekly, override, SUNDAY, is_half_day=True) == Decimal("250.00")


def test_override_without_half_day_price_falls_back_to_seventy_percent():
    override = DateOverride(date=SUNDAY, price=Decimal("155.55"))

    # 155.55 * 0.7 = 108.885, rounded half up
    assert resolve_price(None, override, SUNDAY, is_half_day=True) == Decimal("108.89")


def test_resolve_price_without_any_source_fails():
    with pytest.raises(PricingNotConfiguredError):
        resolve_price(None, None, SUNDAY)


@pytest.mark.django_db
def test_resolve_stay_marks_override_nights(listing):
    WeeklyPricing.objects.create(property=listing, **weekly_prices())
    DateOverride.objects.create(
        property=listing,
        date=SUNDAY + timedelta(days=1),
        price=Decimal("300.00"),
        reason="Expo week",
    )

    nights = PricingResolver().resolve_stay(listing.pk, DateRange(SUNDAY, SUNDAY + timedelta(days=3)))

    assert [night.price for night in nights] == [Decimal("100.00"), Decimal("300.00"), Decimal("120.00")]
    assert [night.is_override for night in nights] == [False, True, False]
    assert nights[1].override_reason == "Expo week"
    assert nights[0].override_reason is None


@pytest.mark.django_db
def test_resolve_single_night_without_pricing_fails(listing):
    with pytest.raises(PricingNotConfiguredError):
        PricingResolver().resolve(listing.pk, SUNDAY)


@pytest.mark.django_db
def test_set_weekly_pricing_upserts(listing, host, service):
    service.set_weekly_pricing(listing.pk, host, weekly_prices())
    updated = service.set_weekly_pricing(listing.pk, host, weekly_prices(base=200))

    assert WeeklyPricing.objects.filter(property=listing).count() == 1
    assert updated.price_sunday == Decimal("200.00")


@pytest.mark.django_db
def test_set_weekly_pricing_rejects_foreign_property(listing, service):
    stranger = User.objects.create_user(
        email="other-host@example.com",
        password="HostPass123",
        role=User.RoleChoices.HOST,
    )

    with pytest.raises(PropertyNotFoundError):
        service.set_weekly_pricing(listing.pk, stranger, weekly_prices())


@pytest.mark.django_db
def test_set_weekly_pricing_rejects_half_day_above_full_day(listing, host, service):
    prices = weekly_prices()
    prices["half_day_price_monday"] = prices["price_monday"] + 1

    with pytest.raises(DomainValidationError):
        service.set_weekly_pricing(listing.pk, host, prices)
    assert not WeeklyPricing.objects.exists()


@pytest.mark.django_db
def test_set_date_overrides_rejects_past_dates_atomically(listing, host, service):
    overrides = [
        {"date": TODAY + timedelta(days=3), "price": Decimal("250")},
        {"date": TODAY - timedelta(days=1), "price": Decimal("250")},
    ]

    with pytest.raises(DomainValidationError):
        service.set_date_overrides(listing.pk, host, overrides)
    assert not DateOverride.objects.exists()


@pytest.mark.django_db
def test_set_date_overrides_updates_existing_day(listing, host, service):
    day = TODAY + timedelta(days=3)
    service.set_date_overrides(listing.pk, host, [{"date": day, "price": Decimal("250")}])
    service.set_date_overrides(
        listing.pk,
        host,
        [{"date": day, "price": Decimal("275"), "half_day_price": Decimal("150"), "reason": "Holiday"}],
    )

    override = DateOverride.objects.get(property=listing, date=day)
    assert override.price == Decimal("275.00")
    assert override.half_day_price == Decimal("150.00")
    assert override.reason == "Holiday"


@pytest.mark.django_db
def test_delete_date_overrides(listing, host, service):
    first, second = TODAY + timedelta(days=3), TODAY + timedelta(days=4)
    service.set_date_overrides(
        listing.pk,
        host,
        [{"date": first, "price": Decimal("250")}, {"date": second, "price": Decimal("260")}],
    )

    assert service.delete_date_overrides(listing.pk, host, [first]) == 1
    assert list(DateOverride.objects.values_list("date", flat=True)) == [second]


@pytest.mark.django_db
def test_pricing_calendar_is_inclusive(listing, host, service):
    WeeklyPricing.objects.create(property=listing, **weekly_prices())
    DateOverride.objects.create(property=listing, date=SUNDAY + timedelta(days=2), price=Decimal("500.00"))

    calendar = service.get_pricing_calendar(listing.pk, SUNDAY, SUNDAY + timedelta(days=6))

    assert len(calendar) == 7
    assert calendar[0].day_of_week == "Sunday"
    assert calendar[-1].day_of_week == "Saturday"
    assert calendar[2].is_override is True
    assert calendar[2].price == Decimal("500.00")
    assert calendar[2].half_day_price == Decimal("350.00")


@pytest.mark.django_db
def test_pricing_calendar_rejects_inverted_range(listing, service):
    with pytest.raises(InvalidDateRangeError):
        service.get_pricing_calendar(listing.pk, SUNDAY, SUNDAY)
