"""Admin registrations for rate plans."""

from __future__ import annotations

from django.contrib import admin

from .models import CancellationPolicy, RatePlan


class CancellationPolicyInline(admin.StackedInline):
    model = CancellationPolicy
    extra = 0
    max_num = 1


@admin.register(RatePlan)
class RatePlanAdmin(admin.ModelAdmin):
    list_display = ("name", "property", "is_active", "priority", "modifier_type", "modifier_value")
    list_filter = ("is_active", "modifier_type")
    search_fields = ("name", "property__title")
    inlines = [CancellationPolicyInline]
    readonly_fields = ("created_at", "updated_at")
