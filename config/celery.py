import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("spacebook")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Доходы после окончания удержания становятся доступными - каждый час
    "release-due-earnings": {
        "task": "finances.release_due_earnings",
        "schedule": crontab(minute=5),
    },
}

app.conf.timezone = "UTC"
