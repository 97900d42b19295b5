"""Vocabulary word model."""

from datetime import datetime
from enum import Enum

from flowlingo import db


class WordStage(str, Enum):
    """Learning stage of a vocabulary word."""

    NEW = "new"
    LEARNING = "learning"
    REVIEW = "review"
    GRADUATED = "graduated"


class VocabularyWord(db.Model):
    """A Chinese word in a user's flashcard deck."""

    __tablename__ = "vocabulary_words"
    __table_args__ = (
        db.UniqueConstraint("user_id", "character", name="uq_user_vocabulary_word"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id"), nullable=False, index=True
    )
    character = db.Column(db.String(100), nullable=False)
    pinyin = db.Column(db.String(255), nullable=False)
    english = db.Column(db.String(500), nullable=False)
    hsk_level = db.Column(db.Integer, default=1, nullable=False)
    source = db.Column(db.String(50), default="manual", nullable=False)

    # Review state
    stage = db.Column(db.String(20), default=WordStage.NEW.value, nullable=False)
    next_review = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    last_reviewed = db.Column(db.DateTime, nullable=True)
    times_reviewed = db.Column(db.Integer, default=0, nullable=False)
    times_correct = db.Column(db.Integer, default=0, nullable=False)
    times_wrong = db.Column(db.Integer, default=0, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    @property
    def success_rate(self) -> int:
        """Percentage of correct reviews."""
        if not self.times_reviewed:
            return 0
        return round(self.times_correct / self.times_reviewed * 100)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "character": self.character,
            "pinyin": self.pinyin,
            "english": self.english,
            "hsk_level": self.hsk_level,
            "source": self.source,
            "stage": self.stage,
            "next_review": self.next_review.isoformat(),
            "last_reviewed": (
                self.last_reviewed.isoformat() if self.last_reviewed else None
            ),
            "times_reviewed": self.times_reviewed,
            "times_correct": self.times_correct,
            "times_wrong": self.times_wrong,
            "success_rate": self.success_rate,
        }

    def __repr__(self) -> str:
        return f"<VocabularyWord {self.character} ({self.stage})>"
