"""API views for the reservation audit trail."""

from __future__ import annotations

import structlog
from django.http import HttpResponse  # type: ignore
from rest_framework import permissions  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.users.permissions import IsManager

from .ledger import AuditLedger
from .serializers import (
    AuditExportQuerySerializer,
    AuditLogEntrySerializer,
    AuditPageQuerySerializer,
    AuditSummaryQuerySerializer,
    serialize_page,
)

logger = structlog.get_logger(__name__)

FILTER_PARAMS = ("action", "user", "field", "start_date", "end_date")
SYSTEM_FILTER_PARAMS = FILTER_PARAMS + ("property", "reservation")


def _filters(request, names) -> dict[str, str]:
    return {name: request.query_params[name] for name in names if request.query_params.get(name)}


class AuditLedgerMixin:
    permission_classes = [permissions.IsAuthenticated]
    ledger_class = AuditLedger

    @property
    def ledger(self) -> AuditLedger:
        return self.ledger_class()

    def page_params(self, request) -> dict:
        query = AuditPageQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        return query.validated_data


class ReservationAuditTrailView(AuditLedgerMixin, APIView):
    """История изменений бронирования (хозяин объекта или менеджер)."""

    def get(self, request, reservation_id: int):  # type: ignore
        params = self.page_params(request)
        page = self.ledger.get_audit_trail(
            reservation_id,
            request.user.pk,
            _filters(request, FILTER_PARAMS),
            page=params["page"],
            limit=params.get("limit"),
        )
        return Response(serialize_page(page))


class ReservationAuditStatsView(AuditLedgerMixin, APIView):
    def get(self, request, reservation_id: int):  # type: ignore
        stats = self.ledger.get_audit_stats(reservation_id, request.user.pk)
        recent = stats["most_recent_change"]
        stats["most_recent_change"] = AuditLogEntrySerializer(recent).data if recent else None
        return Response(stats)


class ReservationAuditExportView(AuditLedgerMixin, APIView):
    """Выгрузка журнала в JSON или CSV."""

    def get(self, request, reservation_id: int):  # type: ignore
        query = AuditExportQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        file_format = query.validated_data["file_format"]
        exported = self.ledger.export_audit_log(reservation_id, request.user.pk, file_format)
        if file_format == "csv":
            response = HttpResponse(exported, content_type="text/csv; charset=utf-8")
            response["Content-Disposition"] = (
                f'attachment; filename="reservation-{reservation_id}-audit.csv"'
            )
            return response
        exported["audit_logs"] = AuditLogEntrySerializer(exported["audit_logs"], many=True).data
        return Response(exported)


class SystemAuditLogView(AuditLedgerMixin, APIView):
    """Системный журнал для менеджеров платформы."""

    permission_classes = [permissions.IsAuthenticated, IsManager]

    def get(self, request):  # type: ignore
        params = self.page_params(request)
        page = self.ledger.get_system_audit_log(
            request.user.pk,
            _filters(request, SYSTEM_FILTER_PARAMS),
            page=params["page"],
            limit=params.get("limit"),
        )
        logger.info("audit.system_log_viewed", user_id=request.user.pk, page=page.page)
        return Response(serialize_page(page))


class AuditSummaryView(AuditLedgerMixin, APIView):
    def get(self, request):  # type: ignore
        query = AuditSummaryQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        summary = self.ledger.get_reservations_audit_summary(
            request.user.pk, query.validated_data.get("reservation_ids")
        )
        summary["recent_activity"] = AuditLogEntrySerializer(summary["recent_activity"], many=True).data
        return Response(summary)
