"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Reservation


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "property",
        "guest",
        "rate_plan",
        "status",
        "check_in",
        "check_out",
        "total_price",
        "created_at",
    )
    list_filter = ("status", "is_half_day", "check_in", "check_out")
    search_fields = ("property__title", "guest__email")
    readonly_fields = ("cancelled_at", "created_at", "updated_at")
    raw_id_fields = ("guest", "property", "rate_plan")
    date_hierarchy = "check_in"
