"""API blueprint."""

import logging

from flask import Blueprint
from flask_limiter.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError

from flowlingo import db
from flowlingo.services.ai_tutor import AITutorError, AIUnavailableError
from flowlingo.utils.response import (rate_limited, server_error,
                                      service_unavailable)

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)


@api_bp.errorhandler(SQLAlchemyError)
def handle_database_error(error):
    db.session.rollback()
    logger.exception(f"Database error: {error}")
    return server_error("Something went wrong, please try again")


@api_bp.errorhandler(AIUnavailableError)
def handle_ai_unavailable(error):
    return service_unavailable("AI_UNAVAILABLE", "AI features are not configured")


@api_bp.errorhandler(AITutorError)
def handle_ai_error(error):
    logger.error(f"AI request failed: {error}")
    return server_error("AI request failed, please try again")


@api_bp.errorhandler(RateLimitExceeded)
def handle_rate_limit(error):
    return rate_limited(f"Rate limit exceeded: {error.description}")


from flowlingo.api import (ai, auth, documents,  # noqa: E402, F401
                           practice, progress, rewards, stickers,
                           vocabulary)
