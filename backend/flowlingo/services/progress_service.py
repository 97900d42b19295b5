"""XP, level and streak accounting."""

import logging
import math
from datetime import date, timedelta

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from flowlingo import db
from flowlingo.models.progress import (AssessmentResult, PracticeSession,
                                       XpTransaction)
from flowlingo.models.user import User
from flowlingo.services.level_structure import (MAX_LEVEL, curriculum_level,
                                               get_hsk_level, get_level_info)
from flowlingo.services.loot_box import generate_loot_box_contents
from flowlingo.services.practice_service import get_or_create_progress
from flowlingo.services.sticker_service import StickerService

logger = logging.getLogger(__name__)

# Correct answers in the placement test -> starting level
PLACEMENT_LEVELS = {
    0: 1,
    1: 3,
    2: 5,
    3: 7,
    4: 10,
    5: 15,
    6: 20,
    7: 25,
    8: 30,
    9: 35,
    10: 40,
    11: 45,
    12: 50,
}

# Streak lengths that open a "streak_milestone" loot box
STREAK_MILESTONES = (3, 7, 14, 30, 60, 100)

LEVEL_UP_ACCURACY = 80


def xp_required_for_level(level: int) -> int:
    """XP needed to get from ``level`` to the next one.

    Early levels are flat, the middle band grows linearly and everything
    past 15 grows exponentially.
    """
    if level <= 5:
        return 100
    if level <= 15:
        return 100 + (level - 5) * 50
    return math.floor(600 * 1.3 ** (level - 15))


def placement_level(correct_answers: int) -> int:
    """Starting level for a placement test score."""
    if correct_answers <= 0:
        return 1
    return min(PLACEMENT_LEVELS.get(correct_answers, PLACEMENT_LEVELS[12]), MAX_LEVEL)


class ProgressService:
    """Service for XP awards, level-ups and streaks.

    Every write locks the user row first so concurrent awards for one user
    serialize instead of losing an update.
    """

    def __init__(self, sticker_service: StickerService | None = None, rng=None):
        self.sticker_service = sticker_service or StickerService()
        self.rng = rng

    def _lock_user(self, user_id: int) -> User | None:
        return User.query.filter_by(id=user_id).with_for_update().first()

    def _event_box(self, event_kind: str):
        return generate_loot_box_contents(
            event_kind, self.sticker_service.catalog, self.rng
        )

    def _outcome(self, transaction: XpTransaction, stickers=None, duplicate=False):
        return {
            "amount": transaction.amount,
            "new_xp": transaction.xp_after,
            "old_level": transaction.old_level,
            "new_level": transaction.new_level,
            "leveled_up": transaction.new_level > transaction.old_level,
            "xp_to_next_level": transaction.xp_to_next_level_after,
            "new_stickers": stickers or [],
            "duplicate": duplicate,
        }

    def _replayed(self, user_id: int, idempotency_key: str) -> dict | None:
        existing = XpTransaction.query.filter_by(
            user_id=user_id, idempotency_key=idempotency_key
        ).first()
        if not existing:
            return None
        logger.info(
            f"Replayed XP award for user {user_id} (key={idempotency_key}), skipping"
        )
        return self._outcome(existing, duplicate=True)

    def apply_xp(self, user: User, amount: int) -> tuple[int, int]:
        """Add XP to a locked user row, crossing as many levels as needed.

        Thresholds only move forward: each level reached adds its requirement
        to ``xp_to_next_level``. Returns ``(old_level, new_level)``.
        """
        old_level = user.level
        user.xp += amount
        while user.xp >= user.xp_to_next_level:
            user.level += 1
            user.xp_to_next_level += xp_required_for_level(user.level)
        return old_level, user.level

    def add_xp(
        self,
        user_id: int,
        amount: int,
        source: str,
        source_id: str | None = None,
        description: str | None = None,
        idempotency_key: str | None = None,
        commit: bool = True,
    ) -> dict | None:
        """Award XP, record it in the ledger and open level-up boxes.

        Returns None when the user does not exist. With an idempotency key a
        replay returns the stored outcome with ``duplicate=True``.
        """
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise ValueError("XP amount must be a positive integer")

        if idempotency_key:
            replay = self._replayed(user_id, idempotency_key)
            if replay:
                return replay

        try:
            user = self._lock_user(user_id)
            if not user:
                return None

            old_level, new_level = self.apply_xp(user, amount)
            streak_stickers = self.update_streak(user)

            transaction = XpTransaction(
                user_id=user_id,
                amount=amount,
                source=source,
                source_id=source_id,
                description=description,
                idempotency_key=idempotency_key,
                old_level=old_level,
                new_level=new_level,
                xp_after=user.xp,
                xp_to_next_level_after=user.xp_to_next_level,
            )
            db.session.add(transaction)
            db.session.flush()

            stickers = streak_stickers + self.sticker_service.grant_level_up_boxes(
                user_id, old_level, new_level, rng=self.rng
            )

            if commit:
                db.session.commit()
        except IntegrityError:
            # A concurrent request with the same key got there first
            db.session.rollback()
            if idempotency_key:
                replay = self._replayed(user_id, idempotency_key)
                if replay:
                    return replay
            raise
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception(f"Failed to add {amount} XP for user {user_id}")
            raise

        logger.info(
            f"User {user_id} earned {amount} XP from {source}: "
            f"level {old_level} -> {new_level}"
        )
        return self._outcome(transaction, stickers)

    def update_streak(self, user: User, today: date | None = None) -> list[dict]:
        """Update the consecutive-day streak.

        Returns the stickers of a milestone box, if one was opened.
        """
        today = today or date.today()
        last = user.last_active_date

        if last == today:
            return []

        if last == today - timedelta(days=1):
            user.streak_days += 1
        else:
            user.streak_days = 1

        user.last_active_date = today
        user.longest_streak = max(user.longest_streak or 0, user.streak_days)

        if user.streak_days not in STREAK_MILESTONES:
            return []

        logger.info(f"User {user.id} reached a {user.streak_days}-day streak")
        return self.sticker_service.award_stickers(
            user.id, self._event_box("streak_milestone"), commit=False
        )

    def set_level(self, user: User, level: int) -> None:
        """Move a user to ``level`` without ever lowering level or threshold."""
        if level <= user.level:
            return
        user.level = level
        user.xp_to_next_level = max(
            user.xp_to_next_level, user.xp + xp_required_for_level(level)
        )

    def apply_assessment(
        self,
        user_id: int,
        score: int,
        total_questions: int,
        strengths: list | None = None,
        weaknesses: list | None = None,
    ) -> dict | None:
        """Store a placement result and move the user to the placed level.

        An existing higher level is kept.
        """
        placed = placement_level(score)

        try:
            user = self._lock_user(user_id)
            if not user:
                return None

            old_level = user.level
            if placed > user.level:
                user.xp = max(user.xp, placed * 100)
                self.set_level(user, placed)
            user.assessment_completed = True
            user.initial_level = placed

            result = AssessmentResult(
                user_id=user_id,
                score=score,
                total_questions=total_questions,
                placement_level=placed,
                final_level=user.level,
                strengths=strengths or [],
                weaknesses=weaknesses or [],
            )
            db.session.add(result)

            stickers = self.sticker_service.award_stickers(
                user_id, self._event_box("assessment_complete"), commit=False
            )
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception(f"Failed to save assessment for user {user_id}")
            raise

        logger.info(
            f"User {user_id} placed at level {placed} "
            f"(score {score}/{total_questions}, now level {user.level})"
        )
        return {
            "assessment": result.to_dict(),
            "old_level": old_level,
            "hsk_level": get_hsk_level(user.level),
            "user": user.to_dict(),
            "new_stickers": stickers,
        }

    def reset_assessment(self, user_id: int) -> User | None:
        """Allow the placement test to be retaken. Level and XP are kept."""
        user = db.session.get(User, user_id)
        if not user:
            return None
        user.assessment_completed = False
        user.initial_level = None
        db.session.commit()
        logger.info(f"Assessment reset for user {user_id}")
        return user

    def save_practice_session(
        self,
        user_id: int,
        level: int,
        questions_answered: int,
        correct_answers: int,
        wrong_answers: int,
        accuracy: float,
        xp_earned: int,
        time_spent_seconds: int = 0,
    ) -> dict | None:
        """Record a practice run, award its XP and advance the level.

        Finishing the user's current level at 80% accuracy or better moves
        them to the next level and opens its sticker box; a perfect run also
        opens a ``perfect_score`` box.
        """
        try:
            if xp_earned > 0:
                xp_result = self.add_xp(
                    user_id,
                    xp_earned,
                    source="practice",
                    source_id=str(level),
                    description=f"Practice session at level {level}",
                    commit=False,
                )
                if xp_result is None:
                    return None
                new_stickers = list(xp_result["new_stickers"])
            else:
                new_stickers = []

            user = self._lock_user(user_id)
            if not user:
                return None

            if accuracy >= LEVEL_UP_ACCURACY and level == user.level:
                self.set_level(user, level + 1)
                new_stickers.extend(
                    self.sticker_service.grant_level_up_boxes(
                        user_id, level, level + 1, rng=self.rng
                    )
                )
            user.lessons_completed += 1

            if accuracy >= 100:
                new_stickers.extend(
                    self.sticker_service.award_stickers(
                        user_id, self._event_box("perfect_score"), commit=False
                    )
                )

            session = PracticeSession(
                user_id=user_id,
                level=level,
                questions_answered=questions_answered,
                correct_answers=correct_answers,
                wrong_answers=wrong_answers,
                accuracy=accuracy,
                xp_earned=xp_earned,
                time_spent_seconds=time_spent_seconds,
            )
            db.session.add(session)

            progress = get_or_create_progress(user_id, level)
            progress.sessions_completed += 1
            progress.best_accuracy = max(progress.best_accuracy or 0.0, accuracy)
            progress.completed = progress.completed or accuracy >= LEVEL_UP_ACCURACY
            progress.reset_run()

            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception(f"Failed to save practice session for user {user_id}")
            raise

        return {
            "session": session.to_dict(),
            "xp_earned": xp_earned,
            "new_level": user.level,
            "leveled_up": user.level > level,
            "level_progress": progress.to_dict(),
            "level_info": get_level_info(curriculum_level(user.level)).to_dict(),
            "new_stickers": new_stickers,
            "user_profile": {
                "level": user.level,
                "xp": user.xp,
                "xp_to_next_level": user.xp_to_next_level,
            },
        }
