"""Enumerations and default thresholds for rate plans and cancellation."""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class ModifierType(models.TextChoices):
    PERCENTAGE = "percentage", _("Процент")
    FIXED_AMOUNT = "fixed_amount", _("Фиксированная сумма")


class CancellationType(models.TextChoices):
    NON_REFUNDABLE = "non_refundable", _("Без возврата")
    FULLY_FLEXIBLE = "fully_flexible", _("Гибкая")
    MODERATE = "moderate", _("Умеренная")


# Days before check-in that still give a full refund under FullyFlexible.
DEFAULT_FLEXIBLE_FREE_DAYS = 1
# Full-refund horizon for Moderate.
DEFAULT_MODERATE_FREE_DAYS = 7
# Partial-refund horizon for Moderate.
DEFAULT_MODERATE_PARTIAL_DAYS = 3
MODERATE_PARTIAL_REFUND_PERCENT = 50

STANDARD_RATE_NAME = "Standard Rate"
STANDARD_RATE_DESCRIPTION = "Direct property booking with flexible cancellation"
