"""URL routing for the audit domain."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import (
    AuditSummaryView,
    ReservationAuditExportView,
    ReservationAuditStatsView,
    ReservationAuditTrailView,
    SystemAuditLogView,
)

urlpatterns = [
    path("reservations/<int:reservation_id>/", ReservationAuditTrailView.as_view(), name="audit-trail"),
    path(
        "reservations/<int:reservation_id>/stats/",
        ReservationAuditStatsView.as_view(),
        name="audit-stats",
    ),
    path(
        "reservations/<int:reservation_id>/export/",
        ReservationAuditExportView.as_view(),
        name="audit-export",
    ),
    path("system/", SystemAuditLogView.as_view(), name="audit-system-log"),
    path("summary/", AuditSummaryView.as_view(), name="audit-summary"),
]
