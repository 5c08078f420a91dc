"""
Price Modifiers

A rate plan adjusts every night's base price either by a percentage or
by a fixed amount. Each nightly result is rounded to cents immediately,
so stay totals are sums of already-rounded nights.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Union

from shared.domain.base import ValueObject
from shared.domain.value_objects import quantize_amount

ZERO = Decimal('0')
HUNDRED = Decimal('100')


@dataclass(frozen=True)
class Percentage(ValueObject):
    """Relative adjustment; -10 means ten percent off."""
    value: Decimal


@dataclass(frozen=True)
class FixedAmount(ValueObject):
    """Absolute adjustment per night; negative values are discounts."""
    value: Decimal


PriceModifier = Union[Percentage, FixedAmount]


def apply_modifier(modifier: PriceModifier, base_price: Decimal) -> Decimal:
    """Apply ``modifier`` to one night's base price and round to cents."""
    match modifier:
        case Percentage(value=value):
            adjusted = base_price * (1 + Decimal(value) / HUNDRED)
        case FixedAmount(value=value):
            adjusted = max(ZERO, base_price + Decimal(value))
        case _:
            raise TypeError(f"Unsupported price modifier: {modifier!r}")
    return quantize_amount(adjusted)


def _plain(value: Decimal) -> str:
    return format(Decimal(value).normalize(), 'f')


def describe_modifier(modifier: PriceModifier, currency: str) -> str:
    """Human readable summary shown next to a booking option."""
    match modifier:
        case Percentage(value=value) if value > 0:
            return f"+{_plain(value)}% premium"
        case Percentage(value=value) if value < 0:
            return f"{_plain(abs(value))}% discount"
        case FixedAmount(value=value) if value > 0:
            return f"+{currency} {_plain(value)} per night"
        case FixedAmount(value=value) if value < 0:
            return f"{currency} {_plain(abs(value))} discount per night"
        case _:
            return "No price adjustment"
