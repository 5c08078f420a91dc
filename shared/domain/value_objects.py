"""
Common Value Objects

Value objects used across multiple domains:
- DateRange: Represents a range of dates (check-in to check-out)
- quantize_amount: Rounds monetary amounts to cents
"""

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterator

from shared.domain.base import ValueObject

CENT = Decimal('0.01')


def quantize_amount(value) -> Decimal:
    """
    Round a monetary amount to two decimal places

    Half-up rounding, so 0.005 becomes 0.01. Accepts Decimal, int or str;
    floats are converted through ``str`` to avoid binary artefacts.
    """
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class DateRange(ValueObject):
    """
    Date range value object

    Represents a range from start_date (inclusive) to end_date (exclusive).
    Used for stays, availability release and pricing lookups.
    """
    start_date: date
    end_date: date

    def __post_init__(self):
        if self.start_date >= self.end_date:
            raise ValueError(f"Start date ({self.start_date}) must be before end date ({self.end_date})")

    def days(self) -> Iterator[date]:
        """Yield every night of the range, check-out day excluded"""
        current = self.start_date
        while current < self.end_date:
            yield current
            current += timedelta(days=1)

    def __len__(self) -> int:
        """
        Return the number of days (nights) in this range

        This is the number of nights for a booking.
        """
        return (self.end_date - self.start_date).days

    def __str__(self):
        return f"{self.start_date.isoformat()} - {self.end_date.isoformat()}"

    def __repr__(self):
        return f"DateRange({self.start_date}, {self.end_date})"
