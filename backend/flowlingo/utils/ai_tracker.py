"""OpenAI usage tracking for cost monitoring."""

import logging
import time

from sqlalchemy.exc import SQLAlchemyError

from flowlingo import db
from flowlingo.models.ai_usage_log import AIUsageLog

logger = logging.getLogger(__name__)

# USD per 1M tokens (input/output)
MODEL_PRICING = {
    "gpt-4o": {"input": 2.50, "output": 10.00},
    "gpt-4o-mini": {"input": 0.15, "output": 0.60},
    "gpt-4.1-mini": {"input": 0.40, "output": 1.60},
}


def calculate_cost(model: str, prompt_tokens: int, completion_tokens: int) -> float:
    """Estimated cost in USD for a call."""
    pricing = MODEL_PRICING.get(model, {"input": 1.0, "output": 3.0})
    input_cost = (prompt_tokens / 1_000_000) * pricing["input"]
    output_cost = (completion_tokens / 1_000_000) * pricing["output"]
    return round(input_cost + output_cost, 6)


def track_ai_usage(user_id, model: str, response, latency_ms: int, endpoint: str):
    """Store an ``AIUsageLog`` row. Tracking failures are logged, not raised."""
    usage = getattr(response, "usage", None)
    if not usage:
        return

    prompt_tokens = getattr(usage, "prompt_tokens", 0) or 0
    completion_tokens = getattr(usage, "completion_tokens", 0) or 0

    try:
        db.session.add(
            AIUsageLog(
                user_id=user_id,
                model=model,
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
                estimated_cost_usd=calculate_cost(
                    model, prompt_tokens, completion_tokens
                ),
                latency_ms=latency_ms,
                endpoint=endpoint,
            )
        )
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.warning(f"Failed to track AI usage: {e}")


def tracked_openai_call(client, user_id, endpoint: str, **kwargs):
    """Run a chat completion and log its token usage.

    Usage:
        response = tracked_openai_call(
            client, user_id=1, endpoint="translate",
            model="gpt-4o", messages=[...],
        )
    """
    model = kwargs.get("model", "unknown")

    start = time.time()
    response = client.chat.completions.create(**kwargs)
    latency_ms = int((time.time() - start) * 1000)

    track_ai_usage(
        user_id=user_id,
        model=model,
        response=response,
        latency_ms=latency_ms,
        endpoint=endpoint,
    )
    return response
