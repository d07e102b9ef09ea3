"""
Listing Shield Celery Application
Celery worker configuration for periodic maintenance
"""

from celery import Celery
from celery.schedules import crontab
from celery.signals import setup_logging as celery_setup_logging

from listing_shield.core.config import settings
from listing_shield.core.logging_config import setup_logging

# Create Celery application
celery_app = Celery(
    "listing_shield_worker",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
)

# Celery configuration
celery_app.conf.update(
    # Serialization
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",

    # Timezone
    timezone="UTC",
    enable_utc=True,

    # Task tracking
    task_track_started=True,
    task_acks_late=True,

    # Timeouts
    task_time_limit=300,
    task_soft_time_limit=240,

    # Worker settings
    worker_prefetch_multiplier=1,
    worker_concurrency=1,

    # Result backend settings
    result_expires=3600,

    # ===========================================
    # Celery Beat Schedule (Periodic Tasks)
    # ===========================================
    beat_schedule={
        # Expired compliance cache sweep - every hour
        "cleanup-expired-cache-hourly": {
            "task": "cleanup_expired_cache",
            "schedule": crontab(minute=0),
        },

        # Cleanup old jobs - daily at 3 AM
        "cleanup-old-jobs-daily": {
            "task": "cleanup_old_jobs",
            "schedule": crontab(minute=0, hour=3),
            "args": (settings.JOB_RETENTION_DAYS,),
        },
    },
)


@celery_setup_logging.connect
def _configure_worker_logging(**kwargs):
    setup_logging()


# Auto-discover tasks in the tasks module
celery_app.autodiscover_tasks(["listing_shield.worker.tasks"])
