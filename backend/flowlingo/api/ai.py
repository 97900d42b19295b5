"""AI practice endpoints: reading texts, translation and tutor chat."""

from flask_jwt_extended import jwt_required

from flowlingo.api import api_bp
from flowlingo.extensions import limiter
from flowlingo.schemas import (ConversationRequest, GenerateTextRequest,
                               TranslateRequest, parse_body)
from flowlingo.services.ai_tutor import AITutor
from flowlingo.utils import success_response
from flowlingo.utils.auth import current_user_id


@api_bp.route("/generate-text", methods=["POST"])
@jwt_required()
@limiter.limit("20 per hour")
def generate_text():
    """
    Generate a segmented Chinese reading text.

    Request body:
    {
        "topic": "ordering food",
        "difficulty": "beginner",  // beginner | intermediate | advanced
        "length": "short"          // short | medium | long
    }
    """
    body, error = parse_body(GenerateTextRequest)
    if error:
        return error

    result = AITutor().generate_text(
        current_user_id(), body.topic, body.difficulty, body.length
    )
    return success_response(result)


@api_bp.route("/translate", methods=["POST"])
@jwt_required()
@limiter.limit("60 per minute")
def translate():
    body, error = parse_body(TranslateRequest)
    if error:
        return error

    return success_response(AITutor().translate(body.text, user_id=current_user_id()))


@api_bp.route("/conversation", methods=["POST"])
@jwt_required()
@limiter.limit("30 per minute")
def converse():
    """Send a message to the tutor; starts a new conversation without an id."""
    body, error = parse_body(ConversationRequest)
    if error:
        return error

    result = AITutor().converse(
        current_user_id(),
        body.message,
        conversation_id=body.conversation_id,
        topic=body.topic,
    )
    return success_response(result)


@api_bp.route("/conversations", methods=["GET"])
@jwt_required()
def list_conversations():
    conversations = AITutor.list_conversations(current_user_id())
    return success_response({"conversations": conversations})
