"""Progress API endpoints: profile, hearts, XP, sessions and assessment."""

from flask_jwt_extended import jwt_required

from flowlingo import db
from flowlingo.api import api_bp
from flowlingo.schemas import (AddXpRequest, AssessmentCompleteRequest,
                               AssessmentSubmitRequest, ConversationXpRequest,
                               FlashcardXpRequest, PracticeSessionRequest,
                               TextReaderXpRequest, parse_body)
from flowlingo.services.assessment import (ASSESSMENT_QUESTIONS,
                                          flashcard_fields, grade,
                                          recommendations_for)
from flowlingo.services.heart_service import HeartService
from flowlingo.services.progress_service import ProgressService
from flowlingo.services.sticker_catalog import mascot_emoji
from flowlingo.services.vocabulary_service import VocabularyService
from flowlingo.services.xp_calculator import XPCalculator
from flowlingo.utils import (error_response, not_found, success_response,
                             validation_error)
from flowlingo.utils.auth import current_user, current_user_id, debug_only


def _award(amount: int, source: str, description: str, source_id=None,
           idempotency_key=None):
    """Award XP to the current user and wrap the outcome."""
    if amount <= 0:
        return success_response(
            {"xp_awarded": 0, "leveled_up": False, "new_stickers": []}
        )

    try:
        result = ProgressService().add_xp(
            current_user_id(),
            amount,
            source=source,
            source_id=source_id,
            description=description,
            idempotency_key=idempotency_key,
        )
    except ValueError as e:
        return validation_error({"amount": str(e)})

    if result is None:
        return not_found("User not found")

    return success_response({"xp_awarded": amount, **result})


@api_bp.route("/user/profile", methods=["GET"])
@jwt_required()
def get_user_profile():
    """User progress with up-to-date hearts and the heart countdown."""
    user = current_user()
    if not user:
        return not_found("User not found")

    hearts = HeartService().status(user)
    db.session.commit()

    return success_response(
        {
            **user.to_dict(),
            **hearts,
            "mascot_emoji": mascot_emoji(user.mascot_sticker_id),
        }
    )


@api_bp.route("/user/hearts/consume", methods=["POST"])
@jwt_required()
def consume_heart():
    """Spend one heart after a wrong answer."""
    result = HeartService().consume_heart(current_user_id())

    if not result["success"]:
        if result["error"] == "user_not_found":
            return not_found("User not found")
        return error_response(
            "NO_HEARTS",
            "No hearts left, wait for one to regenerate",
            details={
                "hearts": result["hearts"],
                "regen_at": result["regen_at"],
                "next_heart_in": result["next_heart_in"],
            },
            status_code=409,
        )

    return success_response(
        {key: value for key, value in result.items() if key != "success"}
    )


@api_bp.route("/user/refill-hearts", methods=["POST"])
@jwt_required()
@debug_only
def refill_hearts():
    """Development helper: restore all hearts."""
    user = HeartService().refill(current_user_id())
    if not user:
        return not_found("User not found")
    return success_response({"hearts": user.hearts}, message="Hearts refilled")


@api_bp.route("/xp/add", methods=["POST"])
@jwt_required()
def add_xp():
    """
    Award XP.

    Request body:
    {
        "amount": 25,
        "source": "lesson",
        "idempotency_key": "lesson-42-attempt-1"  // optional, dedupes retries
    }
    """
    body, error = parse_body(AddXpRequest)
    if error:
        return error

    return _award(
        body.amount,
        source=body.source,
        source_id=body.source_id,
        description=body.description,
        idempotency_key=body.idempotency_key,
    )


@api_bp.route("/conversation/award-xp", methods=["POST"])
@jwt_required()
def award_conversation_xp():
    body, error = parse_body(ConversationXpRequest)
    if error:
        return error

    amount = XPCalculator.conversation(body.message_count, body.quality)
    return _award(
        amount,
        source="conversation",
        source_id=str(body.conversation_id) if body.conversation_id else None,
        description=f"Conversation with {body.message_count} messages",
        idempotency_key=body.idempotency_key,
    )


@api_bp.route("/flashcards/award-xp", methods=["POST"])
@jwt_required()
def award_flashcard_xp():
    body, error = parse_body(FlashcardXpRequest)
    if error:
        return error

    amount = XPCalculator.flashcard_session(body.words_reviewed, body.correct_answers)
    return _award(
        amount,
        source="flashcards",
        description=(
            f"Reviewed {body.words_reviewed} flashcards "
            f"({body.correct_answers} correct)"
        ),
        idempotency_key=body.idempotency_key,
    )


@api_bp.route("/text-generator/award-xp", methods=["POST"])
@jwt_required()
def award_reading_xp():
    body, error = parse_body(TextReaderXpRequest)
    if error:
        return error

    amount = XPCalculator.text_reading(body.characters_read, body.time_spent_seconds)
    return _award(
        amount,
        source="text_reading",
        source_id=str(body.text_id) if body.text_id else None,
        description=f"Read {body.characters_read} characters",
        idempotency_key=body.idempotency_key,
    )


@api_bp.route("/practice/save-session", methods=["POST"])
@jwt_required()
def save_practice_session():
    """Record a practice run; 80%+ at the current level advances a level."""
    body, error = parse_body(PracticeSessionRequest)
    if error:
        return error

    result = ProgressService().save_practice_session(
        current_user_id(),
        level=body.level,
        questions_answered=body.questions_answered,
        correct_answers=body.correct_answers,
        wrong_answers=body.wrong_answers,
        accuracy=body.accuracy,
        xp_earned=body.xp_earned,
        time_spent_seconds=body.time_spent_seconds,
    )
    if result is None:
        return not_found("User not found")

    return success_response(result)


@api_bp.route("/assessment/complete", methods=["POST"])
@jwt_required()
def complete_assessment():
    """Store the placement test and move the user to the placed level."""
    body, error = parse_body(AssessmentCompleteRequest)
    if error:
        return error

    if body.score > body.total_questions:
        return validation_error({"score": "Score cannot exceed total_questions"})

    result = ProgressService().apply_assessment(
        current_user_id(),
        score=body.score,
        total_questions=body.total_questions,
        strengths=body.strengths,
        weaknesses=body.weaknesses,
    )
    if result is None:
        return not_found("User not found")

    return success_response(result)


@api_bp.route("/assessment/questions", methods=["GET"])
def get_assessment_questions():
    """The placement test. Answers are graded server side."""
    return success_response(
        {"questions": [q.to_dict() for q in ASSESSMENT_QUESTIONS]}
    )


@api_bp.route("/assessment/submit", methods=["POST"])
@jwt_required()
def submit_assessment():
    """
    Grade the placement test, place the user and add missed words to the deck.

    Request body:
    {
        "answers": {"q1": "好 (hǎo)", "q2": "我/是/学生"}
    }
    """
    body, error = parse_body(AssessmentSubmitRequest)
    if error:
        return error

    user_id = current_user_id()
    graded = grade(body.answers)

    result = ProgressService().apply_assessment(
        user_id,
        score=graded["score"],
        total_questions=graded["total_questions"],
        strengths=graded["strengths"],
        weaknesses=graded["weaknesses"],
    )
    if result is None:
        return not_found("User not found")

    vocabulary = VocabularyService()
    flashcards = []
    for question in graded["wrong"]:
        word, created = vocabulary.create_word(user_id, **flashcard_fields(question))
        if created:
            flashcards.append(word.to_dict())

    return success_response(
        {
            **result,
            "recommendations": recommendations_for(graded["score"]),
            "flashcards_added": flashcards,
        }
    )


@api_bp.route("/user/reset-assessment", methods=["POST"])
@jwt_required()
def reset_assessment():
    """Let the user retake the placement test."""
    user = ProgressService().reset_assessment(current_user_id())
    if not user:
        return not_found("User not found")
    return success_response(user.to_dict(), message="Assessment status reset")
