"""Booking domain models for Nestly."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.exceptions import ValidationError  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore



class Reservation(models.Model):
    """Бронирование объекта гостем."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Ожидает подтверждения")
        CONFIRMED = "confirmed", _("Подтверждено")
        CANCELLED = "cancelled", _("Отменено")
        COMPLETED = "completed", _("Завершено")
        NO_SHOW = "no_show", _("Гость не приехал")

    class CancellationSource(models.TextChoices):
        GUEST = "guest", _("Гость")
        HOST = "host", _("Хозяин")
        SYSTEM = "system", _("Система")

    class CancellationReason(models.TextChoices):
        PLANS_CHANGED = "plans_changed", _("Изменились планы")
        EMERGENCY = "emergency", _("Чрезвычайная ситуация")
        FOUND_BETTER_OPTION = "found_better_option", _("Нашёлся вариант лучше")
        NO_LONGER_NEEDED = "no_longer_needed", _("Больше не нужно")
        OTHER = "other", _("Другое")

    guest = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="reservations",
    )
    property = models.ForeignKey(
        "properties.Property",
        on_delete=models.CASCADE,
        related_name="reservations",
    )
    rate_plan = models.ForeignKey(
        "rateplans.RatePlan",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="reservations",
        help_text=_("Пусто для прямого бронирования по стандартному тарифу."),
    )
    check_in = models.DateField()
    check_out = models.DateField()
    guest_count = models.PositiveSmallIntegerField(default=1)
    is_half_day = models.BooleanField(default=False)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
    )
    total_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=3, default=settings.PRICING_CURRENCY)
    notes = models.TextField(blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Бронирование")
        verbose_name_plural = _("Бронирования")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(check_out__gt=models.F("check_in")),
                name="reservation_valid_dates",
            ),
        ]
        indexes = [
            models.Index(fields=["property", "check_in", "check_out"]),
            models.Index(fields=["guest", "status"]),
            models.Index(fields=["status"]),
        ]

    def __str__(self) -> str:
        return f"Reservation #{self.pk} for {self.property_id}"

    def clean(self) -> None:
        if self.check_in and self.check_out and self.check_in >= self.check_out:
            raise ValidationError(_("Дата выезда должна быть позже даты заезда."))

    def is_stakeholder(self, user_id) -> bool:
        return user_id is not None and (self.guest_id == user_id or self.property.owner_id == user_id)

    def check_in_datetime(self) -> datetime:
        """Midnight of the check-in day in the active time zone."""
        return timezone.make_aware(datetime.combine(self.check_in, datetime.min.time()))

    def mark_cancelled(self, note: str, *, cancelled_at: datetime | None = None) -> None:
        self.status = self.Status.CANCELLED
        self.cancelled_at = cancelled_at or timezone.now()
        self.notes = f"{self.notes}\n{note}" if self.notes else note
        self.save(update_fields=["status", "cancelled_at", "notes", "updated_at"])
