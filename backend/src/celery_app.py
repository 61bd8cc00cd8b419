"""Celery application for background lifecycle jobs.

Run a worker and the scheduler with:
    celery -A celery_app worker --loglevel=INFO
    celery -A celery_app beat --loglevel=INFO
"""

from celery import Celery
from celery.schedules import crontab
from celery.signals import setup_logging

from config import settings
from observability.logging_config import configure_logging

celery_app = Celery(
    "teamspace",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=[
        "retention.tasks",
    ],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    result_expires=86400,
    task_track_started=True,
    broker_connection_retry_on_startup=True,
)

celery_app.conf.beat_schedule = {
    "account-cleanup": {
        "task": "accounts.cleanup_expired",
        "schedule": crontab(**settings.cron_fields()),
        "options": {
            "expires": 3600,  # Task expires after 1 hour if not picked up
        },
    },
}


@setup_logging.connect
def _configure_worker_logging(**kwargs):
    configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)
