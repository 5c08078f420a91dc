"""Serializers for rate plan management."""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers  # type: ignore

from .constants import CancellationType, ModifierType
from .models import CancellationPolicy, RatePlan
from .policies import PolicyTerms


class CancellationPolicySerializer(serializers.ModelSerializer):
    description = serializers.SerializerMethodField()

    class Meta:
        model = CancellationPolicy
        fields = ["cancellation_type", "free_cancellation_days", "partial_refund_days", "description"]

    def get_description(self, obj: CancellationPolicy) -> str:
        return PolicyTerms.from_policy(obj).description

    def validate(self, attrs):  # type: ignore
        free_days = attrs.get("free_cancellation_days")
        partial_days = attrs.get("partial_refund_days")
        if (
            attrs.get("cancellation_type") == CancellationType.MODERATE
            and free_days is not None
            and partial_days is not None
            and partial_days > free_days
        ):
            raise serializers.ValidationError(
                {"partial_refund_days": "Срок частичного возврата не может превышать срок бесплатной отмены."}
            )
        return attrs


class RatePlanSerializer(serializers.ModelSerializer):
    cancellation_policy = CancellationPolicySerializer(required=False)
    features = serializers.ListField(child=serializers.CharField(max_length=120), required=False)

    class Meta:
        model = RatePlan
        fields = [
            "id",
            "property",
            "name",
            "description",
            "is_active",
            "priority",
            "modifier_type",
            "modifier_value",
            "min_stay",
            "max_stay",
            "min_advance_booking",
            "max_advance_booking",
            "min_guests",
            "max_guests",
            "features",
            "cancellation_policy",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "property", "created_at", "updated_at"]

    def validate(self, attrs):  # type: ignore
        instance = self.instance

        def current(name):
            if name in attrs:
                return attrs[name]
            return getattr(instance, name, None) if instance else None

        modifier_type = current("modifier_type") or ModifierType.PERCENTAGE
        modifier_value = current("modifier_value")
        if (
            modifier_type == ModifierType.PERCENTAGE
            and modifier_value is not None
            and modifier_value < Decimal("-100")
        ):
            raise serializers.ValidationError({"modifier_value": "Скидка не может превышать 100%."})

        for low, high in (
            ("min_stay", "max_stay"),
            ("min_advance_booking", "max_advance_booking"),
            ("min_guests", "max_guests"),
        ):
            low_value, high_value = current(low), current(high)
            if low_value is not None and high_value is not None and low_value > high_value:
                raise serializers.ValidationError({high: f"Значение должно быть не меньше {low}."})
        return attrs
