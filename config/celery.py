import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("nestly")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Удаление записей аудита старше срока хранения - ежедневно в 03:00
    "purge-expired-audit-logs": {
        "task": "audit.purge_expired_audit_logs",
        "schedule": crontab(hour=3, minute=0),
    },
}
