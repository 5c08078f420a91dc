"""Audit trail models for Nestly."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.core.serializers.json import DjangoJSONEncoder  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.exceptions import ImmutableAuditEntryError


class AuditLogEntry(models.Model):
    """Неизменяемая запись журнала изменений бронирования."""

    class Action(models.TextChoices):
        CREATED = "created", _("Создано")
        MODIFIED = "modified", _("Изменено")
        STATUS_CHANGED = "status_changed", _("Смена статуса")
        CANCELLED = "cancelled", _("Отменено")
        NOTES_UPDATED = "notes_updated", _("Заметки обновлены")
        FEE_BREAKDOWN_UPDATED = "fee_breakdown_updated", _("Пересчёт сборов")
        PAYOUT_CREATED = "payout_created", _("Выплата запланирована")
        PAYOUT_STATUS_CHANGED = "payout_status_changed", _("Статус выплаты")
        MESSAGE_SENT = "message_sent", _("Сообщение отправлено")
        MESSAGE_RECEIVED = "message_received", _("Сообщение получено")

    reservation = models.ForeignKey(
        "bookings.Reservation",
        on_delete=models.PROTECT,
        related_name="audit_entries",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="audit_entries",
    )
    user_role = models.CharField(max_length=20, blank=True)
    # Free-form: unknown actions are stored and described generically.
    action = models.CharField(max_length=50, choices=Action.choices)
    field = models.CharField(max_length=100, blank=True)
    old_value = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    new_value = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    metadata = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)
    description = models.TextField()
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        verbose_name = _("Запись аудита")
        verbose_name_plural = _("Журнал аудита")
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["reservation", "created_at"]),
            models.Index(fields=["user", "created_at"]),
            models.Index(fields=["action", "created_at"]),
        ]

    def __str__(self) -> str:
        return f"{self.reservation_id} - {self.action} - {self.created_at:%Y-%m-%d %H:%M}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableAuditEntryError()
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableAuditEntryError()
