"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .domain.entities import BookingCriteria
from .models import Reservation


def _money(**kwargs) -> serializers.DecimalField:
    return serializers.DecimalField(max_digits=12, decimal_places=2, **kwargs)


class BookingCriteriaSerializer(serializers.Serializer):
    """Параметры запроса цены проживания."""

    property_id = serializers.IntegerField(min_value=1)
    check_in = serializers.DateField()
    check_out = serializers.DateField()
    guest_count = serializers.IntegerField(min_value=1, default=1)
    is_half_day = serializers.BooleanField(default=False)

    def to_criteria(self) -> BookingCriteria:
        return BookingCriteria(**self.validated_data)


class BookingPriceQuerySerializer(BookingCriteriaSerializer):
    rate_plan_id = serializers.IntegerField(min_value=1, required=False)

    def to_criteria(self) -> BookingCriteria:
        data = dict(self.validated_data)
        data.pop("rate_plan_id", None)
        return BookingCriteria(**data)


class NightlyPriceSerializer(serializers.Serializer):
    date = serializers.DateField()
    base_price = _money()
    final_price = _money()
    is_override = serializers.BooleanField()
    override_reason = serializers.CharField(allow_null=True)


class PriceBreakdownSerializer(serializers.Serializer):
    base_total = _money()
    modifier_description = serializers.CharField()
    nightly_prices = NightlyPriceSerializer(many=True)


class PolicySummarySerializer(serializers.Serializer):
    cancellation_type = serializers.CharField()
    description = serializers.CharField()
    free_cancellation_days = serializers.IntegerField(allow_null=True)
    partial_refund_days = serializers.IntegerField(allow_null=True)


class RatePlanOptionSerializer(serializers.Serializer):
    rate_plan_id = serializers.IntegerField(allow_null=True)
    name = serializers.CharField()
    description = serializers.CharField()
    nights = serializers.IntegerField()
    total_price = _money()
    average_nightly_price = _money()
    savings = _money()
    currency = serializers.CharField()
    features = serializers.ListField(child=serializers.CharField())
    cancellation_policy = PolicySummarySerializer()
    price_breakdown = PriceBreakdownSerializer()


class BookingOptionsSerializer(serializers.Serializer):
    property_id = serializers.IntegerField()
    check_in = serializers.DateField()
    check_out = serializers.DateField()
    nights = serializers.IntegerField()
    guest_count = serializers.IntegerField()
    is_half_day = serializers.BooleanField()
    currency = serializers.CharField()
    base_total = _money()
    options = RatePlanOptionSerializer(many=True)


class ReservationSerializer(serializers.ModelSerializer):
    property_title = serializers.CharField(source="property.title", read_only=True)
    rate_plan_name = serializers.CharField(source="rate_plan.name", read_only=True, default=None)

    class Meta:
        model = Reservation
        fields = [
            "id",
            "guest",
            "property",
            "property_title",
            "rate_plan",
            "rate_plan_name",
            "check_in",
            "check_out",
            "guest_count",
            "is_half_day",
            "status",
            "total_price",
            "currency",
            "notes",
            "cancelled_at",
            "created_at",
        ]
        read_only_fields = fields


class CancellationRequestSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=1000)
    reason_category = serializers.ChoiceField(
        choices=Reservation.CancellationReason.choices,
        default=Reservation.CancellationReason.OTHER,
    )


class CancellationPreviewSerializer(serializers.Serializer):
    reservation_id = serializers.IntegerField()
    original_amount = _money()
    refund_amount = _money()
    cancellation_fee = _money()
    refund_percentage = serializers.IntegerField()
    policy_type = serializers.CharField()
    policy_details = serializers.CharField()
    days_before_check_in = serializers.IntegerField()
    initiated_by_host = serializers.BooleanField()
    can_cancel = serializers.BooleanField()


class CancellationDetailsSerializer(serializers.Serializer):
    reservation_id = serializers.IntegerField()
    original_amount = _money()
    refund_amount = _money()
    cancellation_fee = _money()
    refund_percentage = serializers.IntegerField()
    policy_type = serializers.CharField()
    cancelled_by_user_id = serializers.IntegerField()
    initiated_by = serializers.CharField()
    reason_category = serializers.CharField()
    reason = serializers.CharField()
    cancelled_at = serializers.DateTimeField()
    released_dates = serializers.IntegerField()
    payout_id = serializers.IntegerField(allow_null=True)


class CancellationRecordSerializer(serializers.Serializer):
    reservation = ReservationSerializer()
    cancelled_at = serializers.DateTimeField(allow_null=True)
    description = serializers.CharField()
    metadata = serializers.DictField()
