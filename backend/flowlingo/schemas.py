"""Pydantic request schemas.

Every JSON body is parsed into one of these models before it reaches a
service, so handlers only ever see typed, validated values.
"""

import re
from typing import Literal

from flask import request
from pydantic import BaseModel, Field, ValidationError, field_validator

from flowlingo.services.loot_box import MANUAL_OPEN_EVENT
from flowlingo.utils.response import validation_error

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

Difficulty = Literal["beginner", "intermediate", "advanced"]
ReviewGrade = Literal["again", "hard", "good", "easy"]


class SignupRequest(BaseModel):
    email: str
    password: str = Field(min_length=6)
    username: str | None = Field(default=None, max_length=255)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        value = value.strip().lower()
        if not EMAIL_RE.match(value):
            raise ValueError("Invalid email address")
        return value


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class GoogleAuthRequest(BaseModel):
    credential: str = Field(min_length=1)


class OpenLootBoxRequest(BaseModel):
    event: str = MANUAL_OPEN_EVENT


class CheckLootBoxRequest(BaseModel):
    event: str = Field(min_length=1)


class ChangeMascotRequest(BaseModel):
    sticker_id: str = Field(min_length=1)


class AddXpRequest(BaseModel):
    amount: int = Field(gt=0, le=10_000)
    source: str = Field(default="manual", max_length=50)
    source_id: str | None = Field(default=None, max_length=100)
    description: str | None = Field(default=None, max_length=255)
    idempotency_key: str | None = Field(default=None, max_length=100)


class ConversationXpRequest(BaseModel):
    message_count: int = Field(ge=0)
    quality: Literal["excellent", "good", "average"] | None = None
    conversation_id: int | None = None
    idempotency_key: str | None = Field(default=None, max_length=100)


class FlashcardXpRequest(BaseModel):
    words_reviewed: int = Field(ge=0)
    correct_answers: int = Field(ge=0)
    idempotency_key: str | None = Field(default=None, max_length=100)


class TextReaderXpRequest(BaseModel):
    characters_read: int = Field(ge=0)
    time_spent_seconds: int = Field(default=0, ge=0)
    text_id: int | None = None
    idempotency_key: str | None = Field(default=None, max_length=100)


class PracticeSessionRequest(BaseModel):
    level: int = Field(ge=1)
    questions_answered: int = Field(ge=0)
    correct_answers: int = Field(ge=0)
    wrong_answers: int = Field(ge=0)
    accuracy: float = Field(ge=0, le=100)
    xp_earned: int = Field(ge=0, le=10_000)
    time_spent_seconds: int = Field(default=0, ge=0)


class AssessmentCompleteRequest(BaseModel):
    score: int = Field(ge=0)
    total_questions: int = Field(gt=0)
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)


class AssessmentSubmitRequest(BaseModel):
    answers: dict[str, str]


class PracticeProgressRequest(BaseModel):
    current_question: int = Field(default=1, ge=1)
    correct_answers: int = Field(default=0, ge=0)
    incorrect_answers: int = Field(default=0, ge=0)
    answered_questions: list[str] = Field(default_factory=list)


class PracticeAnswerRequest(BaseModel):
    level: int = Field(ge=1)
    question_id: str = Field(min_length=1, max_length=50)
    correct: bool


class DocumentCreateRequest(BaseModel):
    filename: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1, max_length=200_000)
    page_count: int = Field(default=1, ge=1)


class VocabularyCreateRequest(BaseModel):
    character: str = Field(min_length=1, max_length=100)
    pinyin: str = Field(min_length=1, max_length=255)
    english: str = Field(min_length=1, max_length=500)
    hsk_level: int = Field(default=1, ge=1, le=6)
    source: str = Field(default="manual", max_length=50)


class ReviewRequest(BaseModel):
    grade: ReviewGrade


class GenerateTextRequest(BaseModel):
    topic: str = Field(min_length=1, max_length=255)
    difficulty: Difficulty = "beginner"
    length: Literal["short", "medium", "long"] = "medium"


class TranslateRequest(BaseModel):
    text: str = Field(min_length=1, max_length=500)


class ConversationRequest(BaseModel):
    message: str = Field(min_length=1, max_length=2000)
    conversation_id: int | None = None
    topic: str | None = Field(default=None, max_length=255)


def parse_body(schema: type[BaseModel]):
    """Validate the JSON body against ``schema``.

    Returns ``(model, None)`` on success or ``(None, error_response)``.
    """
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        return None, validation_error({"body": "Expected a JSON object"})

    try:
        return schema.model_validate(data), None
    except ValidationError as e:
        details = {
            ".".join(str(part) for part in err["loc"]) or "body": err["msg"]
            for err in e.errors()
        }
        return None, validation_error(details)
