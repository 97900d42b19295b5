"""Periodic progress maintenance tasks."""

import structlog

from flowlingo.celery_app import celery

logger = structlog.get_logger()


@celery.task
def regenerate_hearts_async():
    """Apply pending heart regeneration to every user below max hearts."""
    from flowlingo.services.heart_service import HeartService

    updated = HeartService().regenerate_all()
    logger.info("hearts_regenerated", users_updated=updated)
    return {"success": True, "users_updated": updated}
