"""URL routing for the properties pricing API."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import (
    DateOverrideBulkDeleteView,
    DateOverrideListView,
    PricingCalendarView,
    WeeklyPricingView,
)

urlpatterns = [
    path(
        "<int:property_id>/pricing/weekly/",
        WeeklyPricingView.as_view(),
        name="property-pricing-weekly",
    ),
    path(
        "<int:property_id>/pricing/overrides/",
        DateOverrideListView.as_view(),
        name="property-pricing-overrides",
    ),
    path(
        "<int:property_id>/pricing/overrides/bulk-delete/",
        DateOverrideBulkDeleteView.as_view(),
        name="property-pricing-overrides-bulk-delete",
    ),
    path(
        "<int:property_id>/pricing/calendar/",
        PricingCalendarView.as_view(),
        name="property-pricing-calendar",
    ),
]
