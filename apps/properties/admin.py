"""Admin registrations for properties domain."""

from __future__ import annotations

from django.contrib import admin

from .models import AvailabilityRecord, DateOverride, Property, WeeklyPricing


class WeeklyPricingInline(admin.StackedInline):
    model = WeeklyPricing
    extra = 0
    max_num = 1


class DateOverrideInline(admin.TabularInline):
    model = DateOverride
    extra = 0
    fields = ("date", "price", "half_day_price", "reason")


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = ("title", "owner", "status", "currency", "created_at")
    list_filter = ("status", "currency")
    search_fields = ("title", "owner__email")
    inlines = [WeeklyPricingInline, DateOverrideInline]
    readonly_fields = ("created_at", "updated_at")


@admin.register(DateOverride)
class DateOverrideAdmin(admin.ModelAdmin):
    list_display = ("property", "date", "price", "half_day_price", "reason")
    list_filter = ("date",)
    search_fields = ("property__title", "reason")
    date_hierarchy = "date"


@admin.register(AvailabilityRecord)
class AvailabilityRecordAdmin(admin.ModelAdmin):
    list_display = ("property", "date", "is_available", "updated_at")
    list_filter = ("is_available",)
    search_fields = ("property__title",)
    date_hierarchy = "date"
