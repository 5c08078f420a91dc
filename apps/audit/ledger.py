"""Reservation audit ledger.

Append-only record of who changed what on a reservation, plus the
readers built on it: paginated trails, statistics, the manager-only
system log, exports and the retention sweep.

Access rules for readers: guests never see audit data, hosts see the
reservations of their own properties, managers see everything.
"""

from __future__ import annotations

import csv
import dataclasses
import io
import math
from collections import Counter
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Iterable, Mapping

import structlog
from django.conf import settings  # type: ignore
from django.db import transaction  # type: ignore
from django.db.models import Count, Max  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.models import Reservation
from apps.users.models import User
from shared.domain.exceptions import (
    DomainValidationError,
    PermissionDeniedError,
    ReservationNotFoundError,
    UserNotFoundError,
)

from .filters import AuditTrailFilter, SystemAuditFilter
from .models import AuditLogEntry

logger = structlog.get_logger(__name__)

CSV_HEADERS = ["Date", "User", "Role", "Action", "Field", "Old Value", "New Value", "Description"]

EXPORT_FORMATS = ("json", "csv")


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def describe_change(action: str, field_name: str = "", old_value: Any = None,
                    new_value: Any = None, metadata: Mapping[str, Any] | None = None) -> str:
    """Human readable description of an audit entry."""

    metadata = metadata or {}
    A = AuditLogEntry.Action
    if action == A.CREATED:
        return "Reservation created"
    if action == A.MODIFIED:
        if field_name:
            return f"{field_name} changed from {_text(old_value)} to {_text(new_value)}"
        return "Reservation modified"
    if action == A.STATUS_CHANGED:
        return f"Status changed from {_text(old_value)} to {_text(new_value)}"
    if action == A.CANCELLED:
        return f"Reservation cancelled. Reason: {metadata.get('reason') or 'Not specified'}"
    if action == A.NOTES_UPDATED:
        return "Private notes updated"
    if action == A.FEE_BREAKDOWN_UPDATED:
        return "Fee breakdown recalculated"
    if action == A.PAYOUT_CREATED:
        return f"Payout scheduled for {_text(new_value)}"
    if action == A.PAYOUT_STATUS_CHANGED:
        return f"Payout status changed from {_text(old_value)} to {_text(new_value)}"
    if action == A.MESSAGE_SENT:
        return "Message sent to guest"
    if action == A.MESSAGE_RECEIVED:
        return "Message received from guest"
    return f"Action performed: {action}"


@dataclass(frozen=True)
class ChangeRecord:
    action: str
    field: str = ""
    old_value: Any = None
    new_value: Any = None
    metadata: Mapping[str, Any] = dataclasses.field(default_factory=dict)


@dataclass
class AuditPage:
    entries: list[AuditLogEntry]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def pagination(self) -> dict[str, int]:
        return {
            "current_page": self.page,
            "total_pages": self.total_pages,
            "total_count": self.total,
            "limit": self.limit,
        }


class AuditLedger:
    def __init__(self, clock=timezone.now):
        self._clock = clock

    # ----- writers -----------------------------------------------------------

    def log_change(
        self,
        reservation_id,
        user_id,
        user_role: str,
        action: str,
        *,
        field: str = "",
        old_value: Any = None,
        new_value: Any = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> AuditLogEntry:
        entry = AuditLogEntry.objects.create(
            reservation_id=reservation_id,
            user_id=user_id,
            user_role=user_role or "",
            action=action,
            field=field or "",
            old_value=old_value,
            new_value=new_value,
            metadata=dict(metadata or {}),
            description=describe_change(action, field, old_value, new_value, metadata),
            created_at=self._clock(),
        )
        logger.info(
            "audit.logged",
            reservation_id=reservation_id,
            user_id=user_id,
            action=action,
            field=field or None,
        )
        return entry

    def log_multiple_changes(
        self,
        reservation_id,
        user_id,
        user_role: str,
        changes: Iterable[ChangeRecord],
    ) -> list[AuditLogEntry]:
        """Write several entries in one transaction; all or none persist."""

        with transaction.atomic():
            return [
                self.log_change(
                    reservation_id,
                    user_id,
                    user_role,
                    change.action,
                    field=change.field,
                    old_value=change.old_value,
                    new_value=change.new_value,
                    metadata=change.metadata,
                )
                for change in changes
            ]

    # ----- access ------------------------------------------------------------

    def _get_user(self, user_id) -> User:
        user = User.objects.filter(pk=user_id).first()
        if user is None:
            raise UserNotFoundError()
        return user

    def validate_access(self, reservation_id, user_id) -> tuple[Reservation, User]:
        user = self._get_user(user_id)
        reservation = Reservation.objects.select_related("property").filter(pk=reservation_id).first()
        if reservation is None:
            raise ReservationNotFoundError()
        if user.is_manager():
            return reservation, user
        if user.is_host() and reservation.property.owner_id == user.pk:
            return reservation, user
        raise PermissionDeniedError("You do not have permission to view this audit trail")

    # ----- readers -----------------------------------------------------------

    def _filter(self, filterset_class, queryset, filters: Mapping[str, Any] | None):
        filterset = filterset_class(data=dict(filters or {}), queryset=queryset)
        if not filterset.is_valid():
            raise DomainValidationError(f"Invalid audit filters: {dict(filterset.errors)}")
        return filterset.qs

    def _paginate(self, queryset, page: int, limit: int) -> AuditPage:
        page = max(1, int(page))
        limit = max(1, int(limit))
        total = queryset.count()
        offset = (page - 1) * limit
        entries = list(queryset[offset:offset + limit])
        return AuditPage(entries=entries, page=page, limit=limit, total=total)

    def get_audit_trail(
        self,
        reservation_id,
        user_id,
        filters: Mapping[str, Any] | None = None,
        page: int = 1,
        limit: int | None = None,
    ) -> AuditPage:
        self.validate_access(reservation_id, user_id)
        queryset = AuditLogEntry.objects.filter(reservation_id=reservation_id).select_related("user")
        queryset = self._filter(AuditTrailFilter, queryset, filters).order_by("-created_at", "-id")
        return self._paginate(queryset, page, limit or settings.AUDIT_TRAIL_PAGE_SIZE)

    def get_audit_stats(self, reservation_id, user_id) -> dict[str, Any]:
        self.validate_access(reservation_id, user_id)
        entries = list(
            AuditLogEntry.objects.filter(reservation_id=reservation_id)
            .select_related("user")
            .order_by("-created_at", "-id")
        )
        by_action: Counter = Counter()
        by_user: Counter = Counter()
        by_field: Counter = Counter()
        by_day: Counter = Counter()
        for entry in entries:
            by_action[entry.action] += 1
            by_user[entry.user.display_name if entry.user else "Unknown"] += 1
            if entry.field:
                by_field[entry.field] += 1
            by_day[timezone.localtime(entry.created_at).date().isoformat()] += 1

        return {
            "total_changes": len(entries),
            "changes_by_action": dict(by_action),
            "changes_by_user": dict(by_user),
            "changes_by_field": dict(by_field),
            "most_recent_change": entries[0] if entries else None,
            "timeline": [{"date": day, "count": count} for day, count in sorted(by_day.items())],
        }

    def get_system_audit_log(
        self,
        user_id,
        filters: Mapping[str, Any] | None = None,
        page: int = 1,
        limit: int | None = None,
    ) -> AuditPage:
        user = self._get_user(user_id)
        if not user.is_manager():
            raise PermissionDeniedError("Only managers can view the system audit log")
        queryset = AuditLogEntry.objects.select_related("user", "reservation", "reservation__property")
        queryset = self._filter(SystemAuditFilter, queryset, filters).order_by("-created_at", "-id")
        return self._paginate(queryset, page, limit or settings.AUDIT_SYSTEM_PAGE_SIZE)

    def get_reservations_audit_summary(self, user_id, reservation_ids: Iterable[int] | None = None) -> dict[str, Any]:
        user = self._get_user(user_id)
        queryset = AuditLogEntry.objects.all()
        if user.is_host() and not user.is_manager():
            queryset = queryset.filter(reservation__property__owner_id=user.pk)
        elif not user.is_manager():
            raise PermissionDeniedError("Insufficient permissions")
        if reservation_ids is not None:
            queryset = queryset.filter(reservation_id__in=list(reservation_ids))

        most_active = (
            queryset.values("reservation_id")
            .annotate(change_count=Count("id"), last_change=Max("created_at"))
            .order_by("-change_count", "reservation_id")[:10]
        )
        return {
            "total_reservations": queryset.order_by().values("reservation_id").distinct().count(),
            "total_changes": queryset.count(),
            "most_active_reservations": list(most_active),
            "recent_activity": list(queryset.select_related("user").order_by("-created_at", "-id")[:20]),
        }

    def export_audit_log(self, reservation_id, user_id, file_format: str = "json") -> dict[str, Any] | str:
        if file_format not in EXPORT_FORMATS:
            raise DomainValidationError(f"Unsupported export format: {file_format}")
        _, user = self.validate_access(reservation_id, user_id)
        page = self.get_audit_trail(reservation_id, user_id, page=1, limit=settings.AUDIT_EXPORT_LIMIT)
        logger.info(
            "audit.exported",
            reservation_id=reservation_id,
            user_id=user_id,
            file_format=file_format,
            entries=len(page.entries),
        )
        if file_format == "csv":
            return entries_to_csv(page.entries)
        return {
            "reservation_id": reservation_id,
            "audit_logs": page.entries,
            "exported_at": self._clock(),
            "exported_by": {"id": user.pk, "role": user.role},
            "format": file_format,
        }

    # ----- retention ---------------------------------------------------------

    def purge_expired(self, older_than_days: int | None = None) -> dict[str, int]:
        """Remove entries older than the retention horizon.

        Archiving to cold storage is not implemented, so ``archived_count``
        is always zero.
        """

        days = settings.AUDIT_RETENTION_DAYS if older_than_days is None else older_than_days
        cutoff = self._clock() - timedelta(days=days)
        deleted, _ = AuditLogEntry.objects.filter(created_at__lt=cutoff).delete()
        logger.info("audit.purged", older_than_days=days, deleted_count=deleted)
        return {"archived_count": 0, "deleted_count": deleted}


def entries_to_csv(entries: Iterable[AuditLogEntry]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for entry in entries:
        writer.writerow(
            [
                entry.created_at.isoformat(),
                entry.user.display_name if entry.user else "",
                entry.user_role,
                entry.action,
                entry.field,
                _text(entry.old_value),
                _text(entry.new_value),
                entry.description,
            ]
        )
    return buffer.getvalue()
