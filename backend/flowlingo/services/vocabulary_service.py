"""Vocabulary deck and flashcard reviews."""

import logging
from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError

from flowlingo import db
from flowlingo.models.user import User
from flowlingo.models.vocabulary import VocabularyWord, WordStage
from flowlingo.services.progress_service import ProgressService
from flowlingo.services.xp_calculator import XPCalculator

logger = logging.getLogger(__name__)

REVIEW_INTERVALS = {
    "again": timedelta(minutes=1),
    "hard": timedelta(hours=6),
    "good": timedelta(days=1),
    "easy": timedelta(days=4),
}

# A word graduates after this many correct reviews at >= 80% success
GRADUATION_CORRECT = 5
GRADUATION_SUCCESS_RATE = 80

STARTER_WORDS = [
    # Greetings and common words
    ("你好", "nǐ hǎo", "hello", 1),
    ("谢谢", "xiè xiè", "thank you", 1),
    ("再见", "zài jiàn", "goodbye", 1),
    ("是", "shì", "yes/to be", 1),
    ("不", "bù", "no/not", 1),
    ("我", "wǒ", "I/me", 1),
    ("你", "nǐ", "you", 1),
    ("他", "tā", "he/him", 1),
    ("她", "tā", "she/her", 1),
    ("好", "hǎo", "good", 1),
    # Family and numbers
    ("爸爸", "bà ba", "father", 1),
    ("妈妈", "mā ma", "mother", 1),
    ("朋友", "péng yǒu", "friend", 1),
    ("老师", "lǎo shī", "teacher", 1),
    ("学生", "xué shēng", "student", 1),
    ("一", "yī", "one", 1),
    ("二", "èr", "two", 1),
    ("三", "sān", "three", 1),
    ("十", "shí", "ten", 1),
    ("人", "rén", "person/people", 1),
    # Verbs and places
    ("吃", "chī", "to eat", 1),
    ("喝", "hē", "to drink", 1),
    ("去", "qù", "to go", 1),
    ("来", "lái", "to come", 1),
    ("学习", "xué xí", "to study", 1),
    ("工作", "gōng zuò", "to work", 1),
    ("家", "jiā", "home/family", 1),
    ("学校", "xué xiào", "school", 1),
    ("中国", "zhōng guó", "China", 1),
    ("美国", "měi guó", "America", 1),
]


class VocabularyService:
    """Service for a user's flashcard deck."""

    def __init__(self, progress_service: ProgressService | None = None):
        self.progress_service = progress_service or ProgressService()

    def list_words(self, user_id: int, source: str | None = None) -> list[VocabularyWord]:
        query = VocabularyWord.query.filter_by(user_id=user_id)
        if source:
            query = query.filter_by(source=source)
        return query.order_by(VocabularyWord.created_at.desc()).all()

    def due_words(self, user_id: int, now: datetime | None = None) -> list[VocabularyWord]:
        """Words whose next review time has passed, oldest first."""
        now = now or datetime.utcnow()
        return (
            VocabularyWord.query.filter(
                VocabularyWord.user_id == user_id,
                VocabularyWord.next_review <= now,
            )
            .order_by(VocabularyWord.next_review.asc())
            .all()
        )

    def get_word(self, user_id: int, word_id: int) -> VocabularyWord | None:
        return VocabularyWord.query.filter_by(id=word_id, user_id=user_id).first()

    def create_word(
        self,
        user_id: int,
        character: str,
        pinyin: str,
        english: str,
        hsk_level: int = 1,
        source: str = "manual",
    ) -> tuple[VocabularyWord, bool]:
        """Add a word to the deck. Returns ``(word, created)``.

        A word already in the deck is returned unchanged.
        """
        existing = VocabularyWord.query.filter_by(
            user_id=user_id, character=character
        ).first()
        if existing:
            return existing, False

        word = VocabularyWord(
            user_id=user_id,
            character=character,
            pinyin=pinyin,
            english=english,
            hsk_level=hsk_level,
            source=source,
        )
        try:
            db.session.add(word)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception(f"Failed to add word {character} for user {user_id}")
            raise

        return word, True

    def review(
        self, word: VocabularyWord, grade: str, now: datetime | None = None
    ) -> dict:
        """Grade a flashcard, schedule its next review and award XP."""
        if grade not in REVIEW_INTERVALS:
            raise ValueError(f"Unknown review grade: {grade}")

        now = now or datetime.utcnow()
        was_graduated = word.stage == WordStage.GRADUATED.value

        word.times_reviewed += 1
        if grade == "again":
            word.times_wrong += 1
        else:
            word.times_correct += 1

        word.last_reviewed = now
        word.next_review = now + REVIEW_INTERVALS[grade]

        if grade in ("again", "hard"):
            word.stage = WordStage.LEARNING.value
        elif (
            word.times_correct >= GRADUATION_CORRECT
            and word.success_rate >= GRADUATION_SUCCESS_RATE
        ):
            word.stage = WordStage.GRADUATED.value
        else:
            word.stage = WordStage.REVIEW.value

        if not was_graduated and word.stage == WordStage.GRADUATED.value:
            user = db.session.get(User, word.user_id)
            user.words_learned += 1

        xp = self.progress_service.add_xp(
            word.user_id,
            XPCalculator.flashcard_review(grade),
            source="flashcard_review",
            source_id=str(word.id),
            description=f"Reviewed flashcard with {grade} difficulty",
        )

        return {"word": word.to_dict(), "xp": xp}

    def delete_word(self, word: VocabularyWord) -> None:
        db.session.delete(word)
        db.session.commit()

    def seed_starter_words(self, user_id: int) -> list[VocabularyWord]:
        """Add the beginner starter deck. Words already present are skipped."""
        existing = {
            w.character
            for w in VocabularyWord.query.filter_by(user_id=user_id).all()
        }
        created = []
        for character, pinyin, english, hsk_level in STARTER_WORDS:
            if character in existing:
                continue
            word = VocabularyWord(
                user_id=user_id,
                character=character,
                pinyin=pinyin,
                english=english,
                hsk_level=hsk_level,
                source="starter",
            )
            db.session.add(word)
            created.append(word)

        db.session.commit()
        logger.info(f"Seeded {len(created)} starter words for user {user_id}")
        return created
