"""Filters for audit trail queries."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import AuditLogEntry


class AuditTrailFilter(django_filters.FilterSet):
    """Filters available on a single reservation's trail."""

    action = django_filters.CharFilter(field_name="action")
    user = django_filters.NumberFilter(field_name="user_id")
    field = django_filters.CharFilter(field_name="field")
    start_date = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="gte")
    end_date = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="lte")

    class Meta:
        model = AuditLogEntry
        fields = ["action", "user", "field", "start_date", "end_date"]


class SystemAuditFilter(AuditTrailFilter):
    """System-wide log adds property and reservation scoping."""

    property = django_filters.NumberFilter(field_name="reservation__property_id")
    reservation = django_filters.NumberFilter(field_name="reservation_id")

    class Meta(AuditTrailFilter.Meta):
        fields = AuditTrailFilter.Meta.fields + ["property", "reservation"]
