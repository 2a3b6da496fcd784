"""Celery worker configuration.

Used when ``NOTIFICATION_BACKEND=celery``: booking emails are queued here
instead of being sent from the API process.

Run with:
    celery -A app.worker.celery_app worker --loglevel=info
"""

from celery import Celery

from app.config import settings

# Create Celery app
celery_app = Celery(
    "panem_tasks",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["app.tasks"],
)

celery_app.conf.update(
    # Task settings
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="Asia/Kolkata",
    enable_utc=True,

    # Task execution settings
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_time_limit=120,
    task_soft_time_limit=90,

    # Worker settings
    worker_prefetch_multiplier=1,

    # Email results are not read back
    task_ignore_result=True,

    # Retry settings
    task_default_retry_delay=60,  # 1 minute
    task_max_retries=3,

    # Don't hang the API process when the broker is down
    broker_connection_timeout=5,
    task_publish_retry_policy={
        "max_retries": 2,
        "interval_start": 0,
        "interval_step": 0.5,
        "interval_max": 1,
    },
)


if __name__ == "__main__":
    celery_app.start()
