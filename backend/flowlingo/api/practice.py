"""Curriculum and per-level practice endpoints."""

from flask_jwt_extended import jwt_required

from flowlingo.api import api_bp
from flowlingo.schemas import (PracticeAnswerRequest, PracticeProgressRequest,
                               parse_body)
from flowlingo.services.level_structure import (LEVEL_STRUCTURE,
                                                can_attempt_level,
                                                get_hsk_level, get_level_info)
from flowlingo.services.practice_service import PracticeService
from flowlingo.utils import error_response, not_found, success_response
from flowlingo.utils.auth import current_user, current_user_id


def _level_locked(level: int, user_level: int):
    return error_response(
        "LEVEL_LOCKED",
        f"Level {level} is more than one HSK band above your level",
        details={"level": level, "user_level": user_level},
        status_code=403,
    )


@api_bp.route("/levels", methods=["GET"])
@jwt_required()
def list_levels():
    """The whole curriculum with what the user may attempt."""
    user = current_user()
    if not user:
        return not_found("User not found")

    levels = [
        {
            **info.to_dict(),
            "can_attempt": can_attempt_level(user.level, info.level),
            "is_current": info.level == user.level,
        }
        for info in LEVEL_STRUCTURE
    ]
    return success_response(
        {
            "levels": levels,
            "user_level": user.level,
            "user_hsk_level": get_hsk_level(user.level),
        }
    )


@api_bp.route("/levels/<int:level>", methods=["GET"])
@jwt_required()
def get_level(level: int):
    info = get_level_info(level)
    if not info:
        return not_found("Level not found")

    user = current_user()
    if not user:
        return not_found("User not found")

    return success_response(
        {**info.to_dict(), "can_attempt": can_attempt_level(user.level, level)}
    )


@api_bp.route("/practice/questions/<int:level>", methods=["GET"])
@jwt_required()
def get_practice_questions(level: int):
    """Ten questions drawn from the vocabulary of this level and below."""
    if not get_level_info(level):
        return not_found("Level not found")

    user = current_user()
    if not user:
        return not_found("User not found")
    if not can_attempt_level(user.level, level):
        return _level_locked(level, user.level)

    return success_response(PracticeService().questions(level))


@api_bp.route("/practice/all-progress", methods=["GET"])
@jwt_required()
def get_all_practice_progress():
    progress = PracticeService().all_progress(current_user_id())
    return success_response(
        {"progress": {str(level): data for level, data in progress.items()}}
    )


@api_bp.route("/practice/progress/<int:level>", methods=["GET"])
@jwt_required()
def get_practice_progress(level: int):
    """Where the run at this level stopped, so it can resume."""
    return success_response(PracticeService().get_progress(current_user_id(), level))


@api_bp.route("/practice/progress/<int:level>", methods=["POST"])
@jwt_required()
def save_practice_progress(level: int):
    """
    Save the run in progress after each question.

    Request body:
    {
        "current_question": 4,
        "correct_answers": 2,
        "incorrect_answers": 1,
        "answered_questions": ["q1", "q2", "q3"]
    }
    """
    body, error = parse_body(PracticeProgressRequest)
    if error:
        return error

    progress = PracticeService().save_progress(
        current_user_id(),
        level,
        current_question=body.current_question,
        correct_answers=body.correct_answers,
        incorrect_answers=body.incorrect_answers,
        answered_questions=body.answered_questions,
    )
    if progress is None:
        return not_found("User not found")
    return success_response(progress)


@api_bp.route("/practice/answer", methods=["POST"])
@jwt_required()
def record_practice_answer():
    """
    Record one answer. A wrong answer costs a heart.

    Request body:
    {
        "level": 3,
        "question_id": "q4",
        "correct": false
    }
    """
    body, error = parse_body(PracticeAnswerRequest)
    if error:
        return error

    result = PracticeService().record_answer(
        current_user_id(), body.level, body.question_id, body.correct
    )

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
