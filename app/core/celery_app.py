"""
Celery application configuration.

Redis is both the message broker and result backend. The worker only runs
notification tasks, which are short and idempotent enough to retry.
"""

from celery import Celery
from app.core.config import settings

celery_app = Celery(
    "job_tracker_worker",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL
)

celery_app.conf.update(
    # Serialization
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",

    # Timezone
    timezone="UTC",
    enable_utc=True,

    # Task behavior
    task_track_started=True,
    task_time_limit=60,
    task_soft_time_limit=45,

    result_expires=3600,

    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=200,
)

celery_app.autodiscover_tasks(['app.tasks'], related_name='notification_tasks')
