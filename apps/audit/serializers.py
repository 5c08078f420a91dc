"""Serializers for the audit API."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .ledger import EXPORT_FORMATS
from .models import AuditLogEntry


class AuditLogEntrySerializer(serializers.ModelSerializer):
    user_name = serializers.SerializerMethodField()

    class Meta:
        model = AuditLogEntry
        fields = [
            "id",
            "reservation",
            "user",
            "user_name",
            "user_role",
            "action",
            "field",
            "old_value",
            "new_value",
            "metadata",
            "description",
            "created_at",
        ]
        read_only_fields = fields

    def get_user_name(self, obj: AuditLogEntry) -> str | None:
        return obj.user.display_name if obj.user else None


class AuditPageQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(min_value=1, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=1000, required=False)


class AuditExportQuerySerializer(serializers.Serializer):
    file_format = serializers.ChoiceField(choices=EXPORT_FORMATS, default="json")


class AuditSummaryQuerySerializer(serializers.Serializer):
    reservation_ids = serializers.CharField(required=False)

    def validate_reservation_ids(self, value: str) -> list[int]:  # type: ignore
        try:
            return [int(item) for item in value.split(",") if item.strip()]
        except ValueError:
            raise serializers.ValidationError("Ожидается список идентификаторов через запятую.")


def serialize_page(page) -> dict:
    return {
        "audit_logs": AuditLogEntrySerializer(page.entries, many=True).data,
        "pagination": page.pagination,
    }
