"""Vocabulary and flashcard endpoints."""

from flask import request
from flask_jwt_extended import jwt_required

from flowlingo.api import api_bp
from flowlingo.schemas import ReviewRequest, VocabularyCreateRequest, parse_body
from flowlingo.services.vocabulary_service import VocabularyService
from flowlingo.utils import not_found, success_response
from flowlingo.utils.auth import current_user_id


@api_bp.route("/vocabulary", methods=["GET"])
@jwt_required()
def list_vocabulary():
    """List the deck, optionally filtered with ``?source=``."""
    words = VocabularyService().list_words(
        current_user_id(), source=request.args.get("source")
    )
    return success_response({"words": [w.to_dict() for w in words]})


@api_bp.route("/vocabulary/due", methods=["GET"])
@jwt_required()
def list_due_vocabulary():
    """Words due for review now."""
    words = VocabularyService().due_words(current_user_id())
    return success_response({"words": [w.to_dict() for w in words]})


@api_bp.route("/vocabulary", methods=["POST"])
@jwt_required()
def create_vocabulary_word():
    """
    Add a word to the deck. Adding a word twice returns the existing one.

    Request body:
    {
        "character": "你好",
        "pinyin": "nǐ hǎo",
        "english": "hello",
        "hsk_level": 1
    }
    """
    body, error = parse_body(VocabularyCreateRequest)
    if error:
        return error

    word, created = VocabularyService().create_word(
        current_user_id(),
        character=body.character,
        pinyin=body.pinyin,
        english=body.english,
        hsk_level=body.hsk_level,
        source=body.source,
    )
    return success_response(
        {"word": word.to_dict(), "created": created},
        status_code=201 if created else 200,
    )


@api_bp.route("/vocabulary/<int:word_id>/review", methods=["POST"])
@jwt_required()
def review_vocabulary_word(word_id: int):
    """Grade a flashcard: again, hard, good or easy."""
    body, error = parse_body(ReviewRequest)
    if error:
        return error

    service = VocabularyService()
    word = service.get_word(current_user_id(), word_id)
    if not word:
        return not_found("Word not found")

    return success_response(service.review(word, body.grade))


@api_bp.route("/vocabulary/<int:word_id>", methods=["DELETE"])
@jwt_required()
def delete_vocabulary_word(word_id: int):
    service = VocabularyService()
    word = service.get_word(current_user_id(), word_id)
    if not word:
        return not_found("Word not found")

    service.delete_word(word)
    return success_response(message="Word deleted")


@api_bp.route("/vocabulary/seed", methods=["POST"])
@jwt_required()
def seed_vocabulary():
    """Add the beginner starter deck."""
    created = VocabularyService().seed_starter_words(current_user_id())
    return success_response(
        {"created": len(created), "words": [w.to_dict() for w in created]}
    )
