"""Financial domain models for Nestly."""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Payout(models.Model):
    """Выплата хозяину; отрицательная сумма означает возврат гостю."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Запланирована")
        PROCESSING = "processing", _("В обработке")
        PAID = "paid", _("Выплачена")
        FAILED = "failed", _("Ошибка")

    reservation = models.ForeignKey(
        "bookings.Reservation",
        on_delete=models.PROTECT,
        related_name="payouts",
    )
    host = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="payouts",
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=3, default=settings.PRICING_CURRENCY)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    description = models.CharField(max_length=255, blank=True)
    scheduled_at = models.DateTimeField(default=timezone.now)
    processed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Выплата")
        verbose_name_plural = _("Выплаты")
        ordering = ["-scheduled_at"]
        indexes = [
            models.Index(fields=["host", "status"]),
            models.Index(fields=["reservation"]),
        ]

    def __str__(self) -> str:
        return f"Payout {self.amount} {self.currency} ({self.get_status_display()})"

    @property
    def is_refund(self) -> bool:
        return self.amount < 0
