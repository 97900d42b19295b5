"""AI-related async tasks."""

import structlog

from flowlingo.celery_app import celery

logger = structlog.get_logger()


@celery.task(bind=True, max_retries=3, default_retry_delay=60)
def generate_text_async(
    self, user_id: int, topic: str, difficulty: str, length: str = "medium"
):
    """Generate a reading text in the background."""
    from flowlingo.services.ai_tutor import AITutor, AIUnavailableError

    try:
        logger.info("generate_text_started", user_id=user_id, topic=topic)

        result = AITutor().generate_text(user_id, topic, difficulty, length)

        logger.info(
            "generate_text_completed",
            user_id=user_id,
            text_id=result.get("id"),
            cached=result.get("cached"),
        )
        return {"success": True, "text_id": result.get("id")}

    except AIUnavailableError:
        logger.warning("generate_text_skipped", user_id=user_id, reason="no_api_key")
        return {"success": False, "error": "AI features are not configured"}

    except Exception as e:
        logger.error("generate_text_failed", user_id=user_id, error=str(e))
        raise self.retry(exc=e)
