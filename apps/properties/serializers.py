"""Serializers for the properties pricing API."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import MAX_NIGHTLY_PRICE, MIN_NIGHTLY_PRICE, WEEKDAY_NAMES, DateOverride, WeeklyPricing
from .pricing import MAX_OVERRIDES_PER_REQUEST


def _price(**kwargs) -> serializers.DecimalField:
    return serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=MIN_NIGHTLY_PRICE,
        max_value=MAX_NIGHTLY_PRICE,
        **kwargs,
    )


class WeeklyPricingSerializer(serializers.ModelSerializer):
    class Meta:
        model = WeeklyPricing
        fields = (
            ["property"]
            + [f"price_{day}" for day in WEEKDAY_NAMES]
            + [f"half_day_price_{day}" for day in WEEKDAY_NAMES]
            + ["updated_at"]
        )
        read_only_fields = ["property", "updated_at"]

    def validate(self, attrs):  # type: ignore
        for day in WEEKDAY_NAMES:
            full = attrs.get(f"price_{day}")
            half = attrs.get(f"half_day_price_{day}")
            if full is not None and half is not None and half > full:
                raise serializers.ValidationError(
                    {f"half_day_price_{day}": "Цена за полсуток не может превышать цену за сутки."}
                )
        return attrs


class DateOverrideSerializer(serializers.ModelSerializer):
    price = _price()
    half_day_price = _price(required=False, allow_null=True)

    class Meta:
        model = DateOverride
        fields = ["id", "date", "price", "half_day_price", "reason", "updated_at"]
        read_only_fields = ["id", "updated_at"]
        # Upserts by (property, date) are handled by the service.
        validators: list = []

    def validate(self, attrs):  # type: ignore
        half = attrs.get("half_day_price")
        if half is not None and half > attrs["price"]:
            raise serializers.ValidationError(
                {"half_day_price": "Цена за полсуток не может превышать цену за сутки."}
            )
        return attrs


class DateOverrideBulkSerializer(serializers.Serializer):
    overrides = DateOverrideSerializer(many=True, allow_empty=False)

    def validate_overrides(self, value):  # type: ignore
        if len(value) > MAX_OVERRIDES_PER_REQUEST:
            raise serializers.ValidationError(
                f"Нельзя задать больше {MAX_OVERRIDES_PER_REQUEST} дат за один запрос."
            )
        return value


class DateOverrideDeleteSerializer(serializers.Serializer):
    dates = serializers.ListField(child=serializers.DateField(), allow_empty=False)


class CalendarQuerySerializer(serializers.Serializer):
    start = serializers.DateField()
    end = serializers.DateField()

    def validate(self, attrs):  # type: ignore
        if attrs["start"] >= attrs["end"]:
            raise serializers.ValidationError({"end": "Дата окончания должна быть позже даты начала."})
        return attrs


class CalendarDaySerializer(serializers.Serializer):
    date = serializers.DateField()
    day_of_week = serializers.CharField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2)
    half_day_price = serializers.DecimalField(max_digits=10, decimal_places=2)
    is_override = serializers.BooleanField()
    reason = serializers.CharField(allow_null=True)
