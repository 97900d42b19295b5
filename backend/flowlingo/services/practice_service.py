"""Per-level practice: question generation and in-progress run state."""

import logging
import random

from sqlalchemy.exc import SQLAlchemyError

from flowlingo import db
from flowlingo.models.progress import LevelProgress
from flowlingo.models.user import User
from flowlingo.services.heart_service import HeartService
from flowlingo.services.level_structure import curriculum_level, get_level_info

logger = logging.getLogger(__name__)

QUESTIONS_PER_SESSION = 10
OPTIONS_PER_QUESTION = 4

QUESTION_TYPES = ("multiple-choice", "translation")

# (chinese, pinyin, english) by curriculum level
PRACTICE_WORDS = {
    1: [
        ("你好", "nǐ hǎo", "hello"),
        ("谢谢", "xiè xie", "thank you"),
        ("再见", "zài jiàn", "goodbye"),
        ("请", "qǐng", "please"),
        ("对不起", "duì bu qǐ", "sorry"),
        ("没关系", "méi guān xi", "it's okay"),
        ("我", "wǒ", "I/me"),
        ("你", "nǐ", "you"),
        ("他", "tā", "he"),
        ("她", "tā", "she"),
    ],
    2: [
        ("一", "yī", "one"),
        ("二", "èr", "two"),
        ("三", "sān", "three"),
        ("四", "sì", "four"),
        ("五", "wǔ", "five"),
        ("六", "liù", "six"),
        ("七", "qī", "seven"),
        ("八", "bā", "eight"),
        ("九", "jiǔ", "nine"),
        ("十", "shí", "ten"),
    ],
    3: [
        ("家", "jiā", "home/family"),
        ("爸爸", "bà ba", "father"),
        ("妈妈", "mā ma", "mother"),
        ("哥哥", "gē ge", "older brother"),
        ("姐姐", "jiě jie", "older sister"),
        ("弟弟", "dì di", "younger brother"),
        ("妹妹", "mèi mei", "younger sister"),
        ("朋友", "péng you", "friend"),
        ("同学", "tóng xué", "classmate"),
        ("老师", "lǎo shī", "teacher"),
    ],
}

# Used for levels that have no word list of their own
FALLBACK_WORDS = [
    ("学习", "xué xí", "to study"),
    ("练习", "liàn xí", "to practice"),
    ("中文", "zhōng wén", "Chinese"),
    ("汉语", "hàn yǔ", "Chinese language"),
    ("词汇", "cí huì", "vocabulary"),
    ("语法", "yǔ fǎ", "grammar"),
    ("发音", "fā yīn", "pronunciation"),
    ("理解", "lǐ jiě", "to understand"),
    ("记住", "jì zhù", "to remember"),
    ("复习", "fù xí", "to review"),
]


def word_pool(level: int) -> list[tuple[str, str, str]]:
    """Words available at ``level``: its own list plus every level below."""
    pool = []
    for lvl in range(1, curriculum_level(level) + 1):
        for word in PRACTICE_WORDS.get(lvl, FALLBACK_WORDS):
            if word not in pool:
                pool.append(word)
    return pool


def _word_dict(word) -> dict:
    chinese, pinyin, english = word
    return {"chinese": chinese, "pinyin": pinyin, "english": english}


def generate_questions(
    level: int, count: int = QUESTIONS_PER_SESSION, rng=None
) -> list[dict]:
    """Build a practice session for ``level``.

    Each question asks for the meaning of a word ("multiple-choice") or for
    the word given its meaning ("translation"). Correct answers do not repeat
    until the pool runs out.
    """
    rng = rng or random
    pool = word_pool(level)

    targets = rng.sample(pool, min(count, len(pool)))
    while len(targets) < count:
        targets.append(rng.choice(pool))

    questions = []
    for index, word in enumerate(targets):
        kind = rng.choice(QUESTION_TYPES)
        others = [w for w in pool if w != word]
        choices = [word] + rng.sample(
            others, min(OPTIONS_PER_QUESTION - 1, len(others))
        )
        rng.shuffle(choices)

        answer_field = 2 if kind == "multiple-choice" else 0
        questions.append(
            {
                "id": f"q{index + 1}",
                "type": kind,
                "question": (
                    "What does this character mean?"
                    if kind == "multiple-choice"
                    else "How do you say this in Chinese?"
                ),
                **_word_dict(word),
                "options": [choice[answer_field] for choice in choices],
                "option_details": [_word_dict(choice) for choice in choices],
                "correct_answer": word[answer_field],
            }
        )
    return questions


def get_or_create_progress(user_id: int, level: int) -> LevelProgress:
    """Progress row for a level, added to the session if new. Does not commit."""
    progress = LevelProgress.query.filter_by(user_id=user_id, level=level).first()
    if not progress:
        progress = LevelProgress(
            user_id=user_id,
            level=level,
            current_question=1,
            correct_answers=0,
            incorrect_answers=0,
            answered_questions=[],
            sessions_completed=0,
            best_accuracy=0.0,
            completed=False,
        )
        db.session.add(progress)
    return progress


class PracticeService:
    """Service for per-level practice runs."""

    def __init__(self, heart_service: HeartService | None = None):
        self.heart_service = heart_service or HeartService()

    def questions(self, level: int, rng=None) -> dict:
        info = get_level_info(curriculum_level(level))
        return {
            "level": level,
            "level_info": info.to_dict(),
            "questions": generate_questions(level, rng=rng),
        }

    def get_progress(self, user_id: int, level: int) -> dict:
        """The run in progress at ``level``, or a fresh one."""
        progress = LevelProgress.query.filter_by(user_id=user_id, level=level).first()
        if progress:
            return progress.to_dict()
        return {
            "level": level,
            "current_question": 1,
            "correct_answers": 0,
            "incorrect_answers": 0,
            "answered_questions": [],
            "sessions_completed": 0,
            "best_accuracy": 0.0,
            "completed": False,
        }

    def all_progress(self, user_id: int) -> dict[int, dict]:
        """Progress for every level the user has touched, keyed by level."""
        rows = (
            LevelProgress.query.filter_by(user_id=user_id)
            .order_by(LevelProgress.level.asc())
            .all()
        )
        return {row.level: row.to_dict() for row in rows}

    def save_progress(
        self,
        user_id: int,
        level: int,
        current_question: int,
        correct_answers: int,
        incorrect_answers: int,
        answered_questions: list[str],
    ) -> dict | None:
        """Store the run in progress so it can resume. None for unknown users."""
        try:
            user = User.query.filter_by(id=user_id).with_for_update().first()
            if not user:
                return None

            progress = get_or_create_progress(user_id, level)
            progress.current_question = current_question
            progress.correct_answers = correct_answers
            progress.incorrect_answers = incorrect_answers
            progress.answered_questions = list(answered_questions)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception(f"Failed to save level {level} progress for user {user_id}")
            raise

        return progress.to_dict()

    def record_answer(
        self, user_id: int, level: int, question_id: str, correct: bool
    ) -> dict:
        """Count an answer against the run at ``level``.

        A wrong answer costs a heart first; with no hearts left the answer is
        not recorded and the heart service's failure is returned.
        """
        if not correct:
            consumed = self.heart_service.consume_heart(user_id)
            if not consumed["success"]:
                return consumed

        try:
            user = User.query.filter_by(id=user_id).with_for_update().first()
            if not user:
                return {"success": False, "error": "user_not_found"}

            progress = get_or_create_progress(user_id, level)
            progress.current_question += 1
            if correct:
                progress.correct_answers += 1
            else:
                progress.incorrect_answers += 1
            progress.answered_questions = [
                *(progress.answered_questions or []),
                question_id,
            ]

            status = self.heart_service.status(user)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception(f"Failed to record answer for user {user_id}")
            raise

        logger.info(
            f"User {user_id} answered {question_id} at level {level}: "
            f"{'correct' if correct else 'wrong'}"
        )
        return {
            "success": True,
            "correct": correct,
            "progress": progress.to_dict(),
            **status,
        }
