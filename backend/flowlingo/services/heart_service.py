"""Heart consumption and hourly regeneration."""

import logging
from datetime import datetime, timedelta

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from flowlingo import db
from flowlingo.models.user import User

logger = logging.getLogger(__name__)

MAX_HEARTS = 5
REGEN_INTERVAL = timedelta(hours=1)


class HeartService:
    """Server-side heart bookkeeping.

    Regeneration is anchored to ``last_heart_lost_at``: every full interval
    since the anchor restores one heart, and the anchor advances by exactly
    the intervals consumed so the cadence never restarts per regenerated
    heart. Losing a heart moves the anchor to the loss time; once the user is
    back to full hearts the anchor is cleared.
    """

    def __init__(self, regen_interval: timedelta | None = None):
        if regen_interval is None:
            seconds = current_app.config.get("HEART_REGEN_SECONDS", 3600)
            regen_interval = timedelta(seconds=seconds)
        self.regen_interval = regen_interval

    def _max_hearts(self, user: User) -> int:
        return user.max_hearts or MAX_HEARTS

    def tick(self, user: User, now: datetime | None = None) -> int:
        """Apply pending regeneration to ``user``. Returns hearts after it."""
        now = now or datetime.utcnow()
        max_hearts = self._max_hearts(user)

        if user.hearts >= max_hearts:
            user.hearts = max_hearts
            user.last_heart_lost_at = None
            return user.hearts

        anchor = user.last_heart_lost_at
        if anchor is None:
            # Below max with no anchor: start the clock now
            user.last_heart_lost_at = now
            return user.hearts

        elapsed = now - anchor
        intervals = int(elapsed / self.regen_interval) if elapsed > timedelta(0) else 0
        if intervals <= 0:
            return user.hearts

        regenerated = min(intervals, max_hearts - user.hearts)
        user.hearts += regenerated

        if user.hearts >= max_hearts:
            user.last_heart_lost_at = None
        else:
            user.last_heart_lost_at = anchor + regenerated * self.regen_interval

        logger.info(f"Regenerated {regenerated} heart(s) for user {user.id}")
        return user.hearts

    def regen_at(self, user: User) -> datetime | None:
        """When the next heart comes back, or None at full hearts."""
        if user.hearts >= self._max_hearts(user) or user.last_heart_lost_at is None:
            return None
        return user.last_heart_lost_at + self.regen_interval

    def status(self, user: User, now: datetime | None = None) -> dict:
        """Current hearts and countdown, after applying regeneration."""
        now = now or datetime.utcnow()
        self.tick(user, now)

        regen_at = self.regen_at(user)
        next_heart_in = None
        if regen_at is not None:
            next_heart_in = max(0, int((regen_at - now).total_seconds()))

        return {
            "hearts": user.hearts,
            "max_hearts": self._max_hearts(user),
            "regen_at": regen_at.isoformat() if regen_at else None,
            "next_heart_in": next_heart_in,
        }

    def consume_heart(self, user_id: int, now: datetime | None = None) -> dict:
        """Spend one heart.

        Returns ``{"success": False, "error": "no_hearts"}`` at zero hearts
        and ``error="user_not_found"`` for an unknown user.
        """
        now = now or datetime.utcnow()

        try:
            user = User.query.filter_by(id=user_id).with_for_update().first()
            if not user:
                return {"success": False, "error": "user_not_found"}

            self.tick(user, now)
            if user.hearts <= 0:
                db.session.commit()
                return {
                    "success": False,
                    "error": "no_hearts",
                    **self.status(user, now),
                }

            user.hearts -= 1
            user.last_heart_lost_at = now
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception(f"Failed to consume heart for user {user_id}")
            raise

        return {
            "success": True,
            "hearts_remaining": user.hearts,
            **self.status(user, now),
        }

    def refill(self, user_id: int) -> User | None:
        """Restore all hearts. Only exposed in debug builds."""
        user = db.session.get(User, user_id)
        if not user:
            return None
        user.hearts = self._max_hearts(user)
        user.last_heart_lost_at = None
        db.session.commit()
        logger.info(f"Hearts refilled for user {user_id}")
        return user

    def regenerate_all(self, now: datetime | None = None) -> int:
        """Tick every user below max hearts. Returns users updated."""
        now = now or datetime.utcnow()
        users = User.query.filter(User.hearts < User.max_hearts).all()
        updated = 0
        for user in users:
            before = user.hearts
            if self.tick(user, now) != before:
                updated += 1
        db.session.commit()
        return updated
