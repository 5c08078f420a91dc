"""Property domain models for Nestly.

Содержит объекты размещения и всё, что нужно движку цен: недельную
сетку цен, точечные переопределения на даты и посуточный календарь
доступности. CRUD самих объектов и фотографии живут вне этого проекта.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

# Index 0 is Sunday, matching the convention of the pricing grid.
WEEKDAY_NAMES: tuple[str, ...] = (
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)

MIN_NIGHTLY_PRICE = Decimal("0.01")
MAX_NIGHTLY_PRICE = Decimal("99999.99")

PRICE_VALIDATORS = [
    MinValueValidator(MIN_NIGHTLY_PRICE),
    MaxValueValidator(MAX_NIGHTLY_PRICE),
]


def _price_field(verbose_name: str) -> models.DecimalField:
    return models.DecimalField(
        verbose_name,
        max_digits=10,
        decimal_places=2,
        validators=PRICE_VALIDATORS,
    )


class Property(models.Model):
    """Объект недвижимости, выставленный на посуточную аренду."""

    class Status(models.TextChoices):
        DRAFT = "draft", _("Черновик")
        LIVE = "live", _("Опубликован")
        CLOSED = "closed", _("Закрыт")

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="properties",
    )
    title = models.CharField(max_length=255)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT)
    currency = models.CharField(max_length=3, default=settings.PRICING_CURRENCY)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Объект")
        verbose_name_plural = _("Объекты")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["owner", "status"]),
        ]

    def __str__(self) -> str:
        return self.title

    @property
    def is_bookable(self) -> bool:
        return self.status == self.Status.LIVE

    def is_owned_by(self, user_id) -> bool:
        return user_id is not None and self.owner_id == user_id


class WeeklyPricing(models.Model):
    """Базовая недельная сетка: полная и полусуточная цена на каждый день."""

    property = models.OneToOneField(
        Property,
        on_delete=models.CASCADE,
        related_name="weekly_pricing",
    )

    price_sunday = _price_field(_("Воскресенье"))
    price_monday = _price_field(_("Понедельник"))
    price_tuesday = _price_field(_("Вторник"))
    price_wednesday = _price_field(_("Среда"))
    price_thursday = _price_field(_("Четверг"))
    price_friday = _price_field(_("Пятница"))
    price_saturday = _price_field(_("Суббота"))

    half_day_price_sunday = _price_field(_("Воскресенье, полсуток"))
    half_day_price_monday = _price_field(_("Понедельник, полсуток"))
    half_day_price_tuesday = _price_field(_("Вторник, полсуток"))
    half_day_price_wednesday = _price_field(_("Среда, полсуток"))
    half_day_price_thursday = _price_field(_("Четверг, полсуток"))
    half_day_price_friday = _price_field(_("Пятница, полсуток"))
    half_day_price_saturday = _price_field(_("Суббота, полсуток"))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Недельная цена")
        verbose_name_plural = _("Недельные цены")
        constraints = [
            models.CheckConstraint(
                condition=models.Q(**{f"half_day_price_{day}__lte": models.F(f"price_{day}")}),
                name=f"weekly_pricing_half_day_{day}_lte_full",
            )
            for day in WEEKDAY_NAMES
        ]

    def __str__(self) -> str:
        return f"Weekly pricing for {self.property_id}"

    def full_day_price(self, weekday_index: int) -> Decimal:
        return getattr(self, f"price_{WEEKDAY_NAMES[weekday_index]}")

    def half_day_price(self, weekday_index: int) -> Decimal:
        return getattr(self, f"half_day_price_{WEEKDAY_NAMES[weekday_index]}")


class DateOverride(models.Model):
    """Цена на конкретную дату, перекрывающая недельную сетку."""

    property = models.ForeignKey(
        Property,
        on_delete=models.CASCADE,
        related_name="date_overrides",
    )
    date = models.DateField()
    price = _price_field(_("Цена"))
    half_day_price = models.DecimalField(
        _("Цена за полсуток"),
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=PRICE_VALIDATORS,
    )
    reason = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Цена на дату")
        verbose_name_plural = _("Цены на даты")
        ordering = ["date"]
        constraints = [
            models.UniqueConstraint(fields=["property", "date"], name="date_override_unique_day"),
            models.CheckConstraint(
                condition=(
                    models.Q(half_day_price__isnull=True)
                    | models.Q(half_day_price__lte=models.F("price"))
                ),
                name="date_override_half_day_lte_full",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.property_id} @ {self.date}: {self.price}"


class AvailabilityRecord(models.Model):
    """Посуточная доступность объекта."""

    property = models.ForeignKey(
        Property,
        on_delete=models.CASCADE,
        related_name="availability",
    )
    date = models.DateField()
    is_available = models.BooleanField(default=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Доступность")
        verbose_name_plural = _("Доступность")
        ordering = ["date"]
        constraints = [
            models.UniqueConstraint(fields=["property", "date"], name="availability_unique_day"),
        ]

    def __str__(self) -> str:
        state = "free" if self.is_available else "busy"
        return f"{self.property_id} @ {self.date}: {state}"
