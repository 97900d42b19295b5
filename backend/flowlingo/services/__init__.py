"""Business logic services."""

from flowlingo.services.ai_tutor import AITutor, AITutorError
from flowlingo.services.heart_service import HeartService
from flowlingo.services.progress_service import ProgressService
from flowlingo.services.sticker_service import StickerService
from flowlingo.services.vocabulary_service import VocabularyService
from flowlingo.services.xp_calculator import XPCalculator

__all__ = [
    "AITutor",
    "AITutorError",
    "HeartService",
    "ProgressService",
    "StickerService",
    "VocabularyService",
    "XPCalculator",
]
