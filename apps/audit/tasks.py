"""Celery tasks for the audit domain."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from .ledger import AuditLedger

logger = logging.getLogger(__name__)


@shared_task(name="audit.purge_expired_audit_logs")
def purge_expired_audit_logs(older_than_days: int | None = None) -> dict[str, int]:
    """
    Удаляет записи аудита старше горизонта хранения.

    Запускается ежедневно через Celery Beat.
    """
    result = AuditLedger().purge_expired(older_than_days)
    logger.info(f"Audit retention sweep finished: {result}")
    return result
