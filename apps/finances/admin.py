"""Admin registrations for finances domain."""

from __future__ import annotations

from django.contrib import admin

from .models import Payout


@admin.register(Payout)
class PayoutAdmin(admin.ModelAdmin):
    list_display = ("reservation", "host", "amount", "currency", "status", "scheduled_at")
    list_filter = ("status", "currency")
    search_fields = ("host__email", "reservation__id")
    readonly_fields = ("created_at",)
