"""
Celery application configuration for scheduled integration runs.
"""
from datetime import timedelta

from celery import Celery
from dashboard.core.config import settings

celery_app = Celery(
    "dashboard",
    include=[
        "dashboard.integrations.tasks",
    ],
)

celery_app.conf.update(
    broker_url=settings.celery_broker_url,
    result_backend=settings.celery_result_backend,
    task_serializer=settings.celery_task_serializer,
    result_serializer=settings.celery_result_serializer,
    accept_content=settings.celery_accept_content,
    timezone=settings.celery_timezone,
    enable_utc=settings.celery_enable_utc,
    beat_schedule={
        "run-all-integrations-interval": {
            "task": "dashboard.integrations.tasks.run_all_integrations_task",
            "schedule": timedelta(hours=settings.integration_sync_interval_hours),
        },
    },
    task_track_started=True,
    task_time_limit=900,  # 15 minute hard limit for a batch run
    task_soft_time_limit=840,
    worker_prefetch_multiplier=1,  # One task at a time
    worker_max_tasks_per_child=1000,  # Restart worker after 1000 tasks
    broker_connection_retry_on_startup=True,
)
