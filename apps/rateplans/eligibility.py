"""Rate plan eligibility rules.

A plan applies to a stay only when every configured bound holds. Unset
bounds impose nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class StayCriteria:
    nights: int
    days_in_advance: int
    guest_count: int

    @classmethod
    def for_stay(cls, check_in: date, check_out: date, guest_count: int, today: date) -> "StayCriteria":
        return cls(
            nights=(check_out - check_in).days,
            days_in_advance=(check_in - today).days,
            guest_count=guest_count,
        )


# (attribute, criteria field, comparison, message)
_RULES = (
    ("min_stay", "nights", "min", "Minimum stay is {bound} nights"),
    ("max_stay", "nights", "max", "Maximum stay is {bound} nights"),
    ("min_advance_booking", "days_in_advance", "min", "Must be booked at least {bound} days in advance"),
    ("max_advance_booking", "days_in_advance", "max", "Cannot be booked more than {bound} days in advance"),
    ("min_guests", "guest_count", "min", "Requires at least {bound} guests"),
    ("max_guests", "guest_count", "max", "Allows at most {bound} guests"),
)


def eligibility_failures(rate_plan, criteria: StayCriteria) -> list[str]:
    """Every rule of ``rate_plan`` that ``criteria`` violates."""

    failures = []
    for attribute, field, kind, message in _RULES:
        bound = getattr(rate_plan, attribute, None)
        if bound is None:
            continue
        actual = getattr(criteria, field)
        if (kind == "min" and actual < bound) or (kind == "max" and actual > bound):
            failures.append(message.format(bound=bound))
    return failures


def is_eligible(rate_plan, criteria: StayCriteria) -> bool:
    return not eligibility_failures(rate_plan, criteria)
