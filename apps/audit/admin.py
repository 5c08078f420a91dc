"""Admin registrations for the audit domain (read-only)."""

from __future__ import annotations

from django.contrib import admin

from .models import AuditLogEntry


@admin.register(AuditLogEntry)
class AuditLogEntryAdmin(admin.ModelAdmin):
    list_display = ("created_at", "reservation", "user", "user_role", "action", "field")
    list_filter = ("action", "user_role")
    search_fields = ("description", "user__email", "reservation__id")
    date_hierarchy = "created_at"

    def has_add_permission(self, request):  # type: ignore
        return False

    def has_change_permission(self, request, obj=None):  # type: ignore
        return False

    def has_delete_permission(self, request, obj=None):  # type: ignore
        return False
