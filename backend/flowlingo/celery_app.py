"""Celery application configuration."""

import os

from celery import Celery

# Create Celery app
celery = Celery(
    "flowlingo",
    broker=os.environ.get("CELERY_BROKER_URL", "redis://localhost:6379/1"),
    backend=os.environ.get("CELERY_RESULT_BACKEND", "redis://localhost:6379/1"),
    include=[
        "flowlingo.tasks.ai_tasks",
        "flowlingo.tasks.progress_tasks",
    ],
)

celery.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=300,  # 5 minutes hard limit
    task_soft_time_limit=240,  # 4 minutes soft limit
    worker_prefetch_multiplier=1,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    result_expires=3600,
    broker_connection_retry_on_startup=True,
    beat_schedule={
        "regenerate-hearts": {
            "task": "flowlingo.tasks.progress_tasks.regenerate_hearts_async",
            "schedule": 15 * 60,
        },
    },
)


def init_celery(app):
    """Initialize Celery with Flask app context."""
    celery.conf.update(app.config)
    if app.testing:
        celery.conf.task_always_eager = True

    class ContextTask(celery.Task):
        """Task that runs within Flask app context."""

        def __call__(self, *args, **kwargs):
            with app.app_context():
                return self.run(*args, **kwargs)

    celery.Task = ContextTask
    return celery
