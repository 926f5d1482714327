import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("method_passion")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Expired admin and team sessions, every night
    "purge-expired-sessions": {
        "task": "users.purge_expired_sessions",
        "schedule": crontab(minute=30, hour=3),
    },
}

app.conf.timezone = "Europe/Lisbon"
