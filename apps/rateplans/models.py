"""Rate plan models for Nestly.

Тариф изменяет базовую цену ночи (процентом или фиксированной суммой),
ограничивает применимость (длительность, глубина бронирования, гости)
и несёт собственную политику отмены.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from .constants import CancellationType, ModifierType
from .modifiers import FixedAmount, Percentage, PriceModifier


class RatePlanQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)

    def for_property(self, property_id):
        return self.filter(property_id=property_id)

    def by_priority(self):
        return self.order_by("priority", "id")


class RatePlan(models.Model):
    """Тариф объекта."""

    property = models.ForeignKey(
        "properties.Property",
        on_delete=models.CASCADE,
        related_name="rate_plans",
    )
    name = models.CharField(max_length=120)
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    priority = models.IntegerField(
        default=0,
        help_text=_("Меньшее значение показывается раньше при равной цене."),
    )
    modifier_type = models.CharField(
        max_length=20,
        choices=ModifierType.choices,
        default=ModifierType.PERCENTAGE,
    )
    modifier_value = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text=_("Процент (может быть отрицательным) или сумма за ночь."),
    )
    min_stay = models.PositiveSmallIntegerField(null=True, blank=True, validators=[MinValueValidator(1)])
    max_stay = models.PositiveSmallIntegerField(null=True, blank=True, validators=[MinValueValidator(1)])
    min_advance_booking = models.PositiveSmallIntegerField(null=True, blank=True)
    max_advance_booking = models.PositiveSmallIntegerField(null=True, blank=True)
    min_guests = models.PositiveSmallIntegerField(null=True, blank=True, validators=[MinValueValidator(1)])
    max_guests = models.PositiveSmallIntegerField(null=True, blank=True, validators=[MinValueValidator(1)])
    features = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = RatePlanQuerySet.as_manager()

    class Meta:
        verbose_name = _("Тариф")
        verbose_name_plural = _("Тарифы")
        ordering = ["priority", "id"]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(min_stay__isnull=True)
                    | models.Q(max_stay__isnull=True)
                    | models.Q(max_stay__gte=models.F("min_stay"))
                ),
                name="rate_plan_stay_bounds_valid",
            ),
            models.CheckConstraint(
                condition=(
                    models.Q(min_guests__isnull=True)
                    | models.Q(max_guests__isnull=True)
                    | models.Q(max_guests__gte=models.F("min_guests"))
                ),
                name="rate_plan_guest_bounds_valid",
            ),
        ]
        indexes = [
            models.Index(fields=["property", "is_active", "priority"]),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.property_id})"

    def get_modifier(self) -> PriceModifier:
        if self.modifier_type == ModifierType.FIXED_AMOUNT:
            return FixedAmount(Decimal(self.modifier_value))
        return Percentage(Decimal(self.modifier_value))

    def get_cancellation_policy(self) -> CancellationPolicy | None:
        try:
            return self.cancellation_policy
        except CancellationPolicy.DoesNotExist:
            return None


class CancellationPolicy(models.Model):
    """Политика отмены тарифа."""

    rate_plan = models.OneToOneField(
        RatePlan,
        on_delete=models.CASCADE,
        related_name="cancellation_policy",
    )
    cancellation_type = models.CharField(
        max_length=20,
        choices=CancellationType.choices,
        default=CancellationType.FULLY_FLEXIBLE,
    )
    free_cancellation_days = models.PositiveSmallIntegerField(null=True, blank=True)
    partial_refund_days = models.PositiveSmallIntegerField(null=True, blank=True)

    class Meta:
        verbose_name = _("Политика отмены")
        verbose_name_plural = _("Политики отмены")

    def __str__(self) -> str:
        return f"{self.get_cancellation_type_display()} for {self.rate_plan_id}"
