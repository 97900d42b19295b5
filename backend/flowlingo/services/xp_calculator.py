"""XP calculation service."""


class XPCalculator:
    """Service for calculating XP rewards."""

    # Base XP rewards
    XP_PER_MESSAGE = 5
    XP_CONVERSATION_MAX = 100
    XP_TEXT_GENERATED = 5
    XP_FLASHCARD_SESSION_MAX = 50
    XP_READING_MAX = 30

    QUALITY_BONUS = {
        "excellent": 20,
        "good": 10,
    }

    REVIEW_GRADE_XP = {
        "again": 1,
        "hard": 2,
        "good": 2,
        "easy": 3,
    }

    @classmethod
    def conversation(cls, message_count: int, quality: str | None = None) -> int:
        """
        XP for a tutor conversation.
        Capped per conversation, with a bonus for good quality answers.
        """
        base_xp = min(message_count * cls.XP_PER_MESSAGE, cls.XP_CONVERSATION_MAX)
        return base_xp + cls.QUALITY_BONUS.get(quality, 0)

    @classmethod
    def flashcard_session(cls, words_reviewed: int, correct_answers: int) -> int:
        """XP for a flashcard session."""
        return min(words_reviewed * 2 + correct_answers * 3, cls.XP_FLASHCARD_SESSION_MAX)

    @classmethod
    def text_reading(cls, characters_read: int, time_spent_seconds: int) -> int:
        """XP for reading a generated text."""
        minutes = time_spent_seconds // 60
        return min(characters_read // 10 + minutes * 2, cls.XP_READING_MAX)

    @classmethod
    def flashcard_review(cls, grade: str) -> int:
        """XP for grading a single flashcard."""
        return cls.REVIEW_GRADE_XP.get(grade, 1)

    @classmethod
    def text_generated(cls) -> int:
        """XP for generating a reading text."""
        return cls.XP_TEXT_GENERATED
