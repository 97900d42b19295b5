"""Celery tasks package."""

from flowlingo.tasks.ai_tasks import generate_text_async
from flowlingo.tasks.progress_tasks import regenerate_hearts_async

__all__ = [
    "generate_text_async",
    "regenerate_hearts_async",
]
