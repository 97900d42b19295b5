"""OpenAI-backed reading texts, translations and tutor conversations."""

import json
import logging
import re
from datetime import datetime

from flask import current_app
from openai import OpenAIError
from sqlalchemy.exc import SQLAlchemyError

from flowlingo import db
from flowlingo.extensions import cache
from flowlingo.models.conversation import Conversation, GeneratedText
from flowlingo.models.user import User
from flowlingo.services.openai_client import get_openai_client
from flowlingo.services.progress_service import ProgressService
from flowlingo.services.xp_calculator import XPCalculator
from flowlingo.utils.ai_tracker import tracked_openai_call

logger = logging.getLogger(__name__)

HSK_BANDS = {
    "beginner": "1-2",
    "intermediate": "3-4",
    "advanced": "5-6",
}

TEXT_LENGTHS = {
    "short": 100,
    "medium": 200,
    "long": 300,
}

TEXT_CACHE_TIMEOUT = 60 * 60

PUNCTUATION = "。！？，、；：“”‘’（）《》【】\"'"
_SPLIT_RE = re.compile(rf"([{re.escape(PUNCTUATION)}\s])")


class AITutorError(Exception):
    """Upstream AI call failed or returned something unusable."""


class AIUnavailableError(AITutorError):
    """No OpenAI API key is configured."""


def segment_chinese_text(text: str) -> list[dict]:
    """Split text into 2-3 character phrases for tap-to-translate.

    Punctuation becomes its own segment and whitespace is dropped. A run of
    three leftover characters stays together instead of leaving one alone.
    """
    segments = []
    for part in _SPLIT_RE.split(text):
        if not part or not part.strip():
            continue

        if _SPLIT_RE.fullmatch(part):
            chunks = [part]
        else:
            chunks = []
            i = 0
            while i < len(part):
                remaining = len(part) - i
                size = 3 if remaining == 3 else min(2, remaining)
                chunks.append(part[i:i + size])
                i += size

        for chunk in chunks:
            segments.append(
                {
                    "text": chunk,
                    "index": len(segments),
                    "translation": None,
                    "pinyin": None,
                }
            )
    return segments


def difficulty_for_level(level: int) -> str:
    """Tutor difficulty for a user level."""
    if level <= 3:
        return "beginner"
    if level <= 6:
        return "intermediate"
    return "advanced"


def _text_cache_key(user_id: int, topic: str, difficulty: str, length: str) -> str:
    return f"generated_text:{user_id}:{topic.strip().lower()}:{difficulty}:{length}"


class AITutor:
    """Service wrapping the OpenAI chat API for practice content."""

    def __init__(self, client=None):
        self.client = client or get_openai_client()
        self.model = current_app.config.get("OPENAI_MODEL", "gpt-4o")

    def _complete(self, user_id, endpoint: str, **kwargs) -> str:
        if not self.client:
            raise AIUnavailableError("AI features are not configured")

        try:
            response = tracked_openai_call(
                self.client, user_id=user_id, endpoint=endpoint,
                model=self.model, **kwargs,
            )
        except OpenAIError as e:
            logger.error(f"OpenAI call failed for {endpoint}: {e}")
            raise AITutorError(str(e)) from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise AITutorError(f"Empty response from model for {endpoint}")
        return content

    def generate_text(
        self, user_id: int, topic: str, difficulty: str, length: str = "medium"
    ) -> dict:
        """Generate a reading text for a topic.

        Results are cached per (user, topic, difficulty, length); a cache hit
        is returned as-is and earns no XP.
        """
        cache_key = _text_cache_key(user_id, topic, difficulty, length)
        cached = cache.get(cache_key)
        if cached:
            logger.info(f"Returning cached text for {cache_key}")
            return {**cached, "cached": True}

        hsk_band = HSK_BANDS.get(difficulty, HSK_BANDS["beginner"])
        target_length = TEXT_LENGTHS.get(length, TEXT_LENGTHS["medium"])
        prompt = (
            f'Write about {target_length} characters of Chinese text about "{topic}" '
            f"for HSK {hsk_band} learners. Output only the Chinese text."
        )

        content = self._complete(
            user_id,
            "generate_text",
            messages=[{"role": "user", "content": prompt}],
            max_tokens=400,
            temperature=0.7,
        ).strip()

        generated = GeneratedText(
            user_id=user_id,
            topic=topic,
            difficulty=difficulty,
            content=content,
            segments=segment_chinese_text(content),
        )
        try:
            db.session.add(generated)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception(f"Failed to store generated text for user {user_id}")
            raise

        result = generated.to_dict()
        cache.set(cache_key, result, timeout=TEXT_CACHE_TIMEOUT)

        xp = ProgressService().add_xp(
            user_id,
            XPCalculator.text_generated(),
            source="text_generation",
            source_id=str(generated.id),
            description=f"Generated {difficulty} text about {topic}",
        )
        return {**result, "cached": False, "xp": xp}

    def translate(self, text: str, user_id: int | None = None) -> dict:
        """Translate a Chinese word or phrase to ``{character, pinyin, english}``."""
        prompt = (
            "Translate this Chinese text to English and give its pinyin with tone "
            'marks. Reply as JSON: {"character": "...", "pinyin": "...", '
            f'"english": "..."}}\n\nText: {text}'
        )
        content = self._complete(
            user_id,
            "translate",
            messages=[{"role": "user", "content": prompt}],
            response_format={"type": "json_object"},
        )

        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as e:
            logger.error(f"Translation returned invalid JSON: {e}")
            raise AITutorError("Invalid translation response") from e

        if not isinstance(parsed, dict):
            logger.error(f"Translation returned non-object JSON: {content!r}")
            raise AITutorError("Invalid translation response")

        return {
            "character": parsed.get("character") or text,
            "pinyin": parsed.get("pinyin", ""),
            "english": parsed.get("english", ""),
        }

    def converse(
        self,
        user_id: int,
        message: str,
        conversation_id: int | None = None,
        topic: str | None = None,
    ) -> dict:
        """Send a message to the tutor and persist both turns."""
        user = db.session.get(User, user_id)
        level = user.level if user else 1
        difficulty = difficulty_for_level(level)

        conversation = None
        if conversation_id:
            conversation = Conversation.query.filter_by(
                id=conversation_id, user_id=user_id
            ).first()
        if not conversation:
            conversation = Conversation(
                user_id=user_id,
                topic=topic or "Free Conversation",
                difficulty=difficulty,
                messages=[],
            )

        history = list(conversation.messages or [])
        system_prompt = (
            "You are Xiao Li (小李), a friendly Chinese tutor. Reply in Chinese at "
            f"{difficulty} level (HSK {HSK_BANDS[difficulty]}); the learner is level "
            f"{level}. Ask a follow-up question. Topic: {conversation.topic}."
        )
        chat_messages = [
            {"role": "system", "content": system_prompt},
            *({"role": m["role"], "content": m["content"]} for m in history),
            {"role": "user", "content": message},
        ]

        reply = self._complete(
            user_id, "conversation", messages=chat_messages, max_tokens=400
        )

        now = datetime.utcnow().isoformat()
        # Reassign so SQLAlchemy sees the JSON column change
        conversation.messages = history + [
            {"role": "user", "content": message, "timestamp": now},
            {"role": "assistant", "content": reply, "timestamp": now},
        ]
        conversation.difficulty = difficulty

        try:
            db.session.add(conversation)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception(f"Failed to store conversation for user {user_id}")
            raise

        return {
            "conversation_id": conversation.id,
            "response": reply,
            "messages": conversation.messages,
            "difficulty": difficulty,
        }

    @staticmethod
    def list_conversations(user_id: int) -> list[dict]:
        conversations = (
            Conversation.query.filter_by(user_id=user_id)
            .order_by(Conversation.updated_at.desc())
            .all()
        )
        return [c.to_dict() for c in conversations]
