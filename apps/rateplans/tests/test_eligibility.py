from datetime import date
from types import SimpleNamespace

from apps.rateplans.eligibility import StayCriteria, eligibility_failures, is_eligible


def plan(**bounds):
    defaults = dict(
        min_stay=None,
        max_stay=None,
        min_advance_booking=None,
        max_advance_booking=None,
        min_guests=None,
        max_guests=None,
    )
    defaults.update(bounds)
    return SimpleNamespace(**defaults)


def test_stay_criteria_from_dates():
    criteria = StayCriteria.for_stay(date(2030, 3, 10), date(2030, 3, 14), 2, today=date(2030, 3, 1))

    assert criteria == StayCriteria(nights=4, days_in_advance=9, guest_count=2)


def test_plan_without_bounds_is_always_eligible():
    assert is_eligible(plan(), StayCriteria(nights=1, days_in_advance=0, guest_count=1))


def test_bounds_are_inclusive():
    weekly = plan(min_stay=7, max_stay=7, min_guests=2, max_guests=2)

    assert is_eligible(weekly, StayCriteria(nights=7, days_in_advance=0, guest_count=2))


def test_every_violated_rule_is_reported():
    early_bird = plan(min_stay=3, min_advance_booking=30, max_guests=4)

    failures = eligibility_failures(early_bird, StayCriteria(nights=2, days_in_advance=10, guest_count=5))

    assert failures == [
        "Minimum stay is 3 nights",
        "Must be booked at least 30 days in advance",
        "Allows at most 4 guests",
    ]


def test_last_minute_window():
    last_minute = plan(max_advance_booking=3)

    assert is_eligible(last_minute, StayCriteria(nights=2, days_in_advance=3, guest_count=1))
    assert eligibility_failures(last_minute, StayCriteria(nights=2, days_in_advance=4, guest_count=1)) == [
        "Cannot be booked more than 3 days in advance"
    ]


def test_zero_bound_is_enforced():
    same_day = plan(max_advance_booking=0, max_stay=1)

    assert is_eligible(same_day, StayCriteria(nights=1, days_in_advance=0, guest_count=1))
    assert not is_eligible(same_day, StayCriteria(nights=1, days_in_advance=1, guest_count=1))
