"""Celery application configuration"""

from celery import Celery
from hostmate.config import settings

# Create Celery app
celery_app = Celery(
    "hostmate",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=[
        "hostmate.jobs.tasks",
    ],
)

# Configure Celery
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=300,  # 5 minutes
    worker_prefetch_multiplier=1,
    task_acks_late=True,
    task_reject_on_worker_lost=True,

    # Beat schedule for periodic tasks
    beat_schedule={
        "process-email-queue": {
            "task": "process_email_queue",
            "schedule": 60.0,  # Every minute
        },
        "cleanup-past-reservations": {
            "task": "cleanup_past_reservations",
            "schedule": 86400.0,  # Daily
        },
    },
)
