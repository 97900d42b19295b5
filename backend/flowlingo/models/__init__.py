"""Database models."""

from flowlingo.models.ai_usage_log import AIUsageLog
from flowlingo.models.conversation import Conversation, GeneratedText
from flowlingo.models.document import Document
from flowlingo.models.progress import (AssessmentResult, LevelProgress,
                                       PracticeSession, XpTransaction)
from flowlingo.models.sticker import UserSticker
from flowlingo.models.user import User
from flowlingo.models.vocabulary import VocabularyWord, WordStage

__all__ = [
    "User",
    "UserSticker",
    "XpTransaction",
    "AssessmentResult",
    "PracticeSession",
    "LevelProgress",
    "VocabularyWord",
    "WordStage",
    "Conversation",
    "GeneratedText",
    "Document",
    "AIUsageLog",
]
