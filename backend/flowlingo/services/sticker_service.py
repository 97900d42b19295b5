"""Sticker collection ledger: records loot box results against users."""

import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from flowlingo import db
from flowlingo.models.sticker import UserSticker
from flowlingo.models.user import User
from flowlingo.services.loot_box import (generate_loot_box_contents,
                                         rarity_rank, roll_level_up_rewards)
from flowlingo.services.sticker_catalog import (DEFAULT_MASCOT_ID,
                                                STICKER_CATALOG, RewardItem,
                                                get_sticker, mascot_emoji)

logger = logging.getLogger(__name__)


class StickerService:
    """Service for granting and listing user stickers."""

    def __init__(self, catalog=STICKER_CATALOG):
        self.catalog = catalog

    def _lock_user(self, user_id: int) -> User | None:
        return User.query.filter_by(id=user_id).with_for_update().first()

    def _find_entry(self, user_id: int, sticker_id: str) -> UserSticker | None:
        return (
            UserSticker.query.filter_by(user_id=user_id, sticker_id=sticker_id)
            .with_for_update()
            .first()
        )

    def _insert_entry(self, user_id: int, sticker_id: str, now) -> UserSticker | None:
        """Insert a first copy inside a savepoint.

        Returns None if another transaction inserted the row first.
        """
        entry = UserSticker(
            user_id=user_id,
            sticker_id=sticker_id,
            acquired_count=1,
            is_new=True,
            first_acquired_at=now,
            last_acquired_at=now,
        )
        try:
            with db.session.begin_nested():
                db.session.add(entry)
        except IntegrityError:
            logger.warning(
                f"Sticker {sticker_id} for user {user_id} was inserted concurrently"
            )
            return None
        return entry

    def award_stickers(
        self, user_id: int, items: list[RewardItem], commit: bool = True
    ) -> list[dict]:
        """Record stickers for a user.

        Owned stickers get their ``acquired_count`` incremented; new ones are
        inserted. The user row is locked so awards for one user serialize.
        With ``commit=False`` the caller owns the transaction.
        """
        now = datetime.utcnow()
        awarded = []

        try:
            self._lock_user(user_id)

            for item in items:
                entry = self._find_entry(user_id, item.id)
                inserted = None if entry else self._insert_entry(user_id, item.id, now)
                if inserted:
                    entry = inserted
                else:
                    entry = entry or self._find_entry(user_id, item.id)
                    entry.acquired_count += 1
                    entry.is_new = True
                    entry.last_acquired_at = now

                awarded.append(
                    {
                        **item.to_dict(),
                        "count": entry.acquired_count,
                        "is_duplicate": entry.acquired_count > 1,
                    }
                )

            if commit:
                db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception(f"Failed to award stickers to user {user_id}")
            raise

        for sticker in awarded:
            logger.info(
                f"Awarded sticker to user {user_id}: "
                f"{sticker['name']} ({sticker['rarity']}) x{sticker['count']}"
            )

        return awarded

    def open_loot_box(self, user_id: int, event_kind: str, rng=None) -> list[dict]:
        """Roll a loot box for an event and record its contents."""
        contents = generate_loot_box_contents(event_kind, self.catalog, rng)
        return self.award_stickers(user_id, contents)

    def grant_level_up_boxes(
        self, user_id: int, old_level: int, new_level: int, rng=None
    ) -> list[dict]:
        """Roll one box per level crossed. Does not commit."""
        if new_level <= old_level:
            return []
        contents = roll_level_up_rewards(old_level, new_level, self.catalog, rng)
        logger.info(
            f"User {user_id} reached level {new_level}: "
            f"opening level-up box with {len(contents)} sticker(s)"
        )
        return self.award_stickers(user_id, contents, commit=False)

    def get_owned(self, user_id: int) -> dict[str, UserSticker]:
        """Owned stickers keyed by sticker id."""
        return {
            entry.sticker_id: entry
            for entry in UserSticker.query.filter_by(user_id=user_id).all()
        }

    def get_catalog_with_status(self, user_id: int) -> list[dict]:
        """Every catalog item with the user's collected flag and count."""
        owned = self.get_owned(user_id)
        result = []
        for item in self.catalog:
            entry = owned.get(item.id)
            result.append(
                {
                    **item.to_dict(),
                    "collected": entry is not None,
                    "count": entry.acquired_count if entry else 0,
                    "is_new": bool(entry and entry.is_new),
                }
            )
        return result

    def get_collection(self, user_id: int) -> list[dict]:
        """Owned stickers, rarest first, plus the default dolphin mascot."""
        owned = self.get_owned(user_id)
        collection = []
        for sticker_id, entry in owned.items():
            item = get_sticker(sticker_id, self.catalog)
            if not item:
                continue
            collection.append({**item.to_dict(), **entry.to_dict()})

        collection.sort(
            key=lambda s: (-rarity_rank(get_sticker(s["id"], self.catalog).rarity), s["id"])
        )
        collection.append(
            {
                "id": DEFAULT_MASCOT_ID,
                "sticker_id": DEFAULT_MASCOT_ID,
                "name": "Friendly Dolphin",
                "emoji": mascot_emoji(DEFAULT_MASCOT_ID),
                "acquired_count": 1,
                "is_new": False,
            }
        )
        return collection

    def mark_seen(self, user_id: int) -> int:
        """Clear the NEW badge on every sticker. Returns rows updated."""
        updated = UserSticker.query.filter_by(user_id=user_id, is_new=True).update(
            {UserSticker.is_new: False}
        )
        db.session.commit()
        return updated

    def change_mascot(self, user_id: int, sticker_id: str) -> dict:
        """Equip an owned sticker (or the default dolphin) as the mascot."""
        user = db.session.get(User, user_id)
        if not user:
            return {"success": False, "error": "user_not_found"}

        if sticker_id != DEFAULT_MASCOT_ID:
            if not get_sticker(sticker_id, self.catalog):
                return {"success": False, "error": "unknown_sticker"}
            owned = UserSticker.query.filter_by(
                user_id=user_id, sticker_id=sticker_id
            ).first()
            if not owned:
                return {"success": False, "error": "not_owned"}

        user.mascot_sticker_id = sticker_id
        db.session.commit()

        return {
            "success": True,
            "mascot": sticker_id,
            "emoji": mascot_emoji(sticker_id),
        }

    def get_reward_profile(self, user_id: int) -> dict | None:
        """Summary of progress and collection for the rewards page."""
        user = db.session.get(User, user_id)
        if not user:
            return None

        owned = self.get_owned(user_id)
        return {
            "id": user.id,
            "username": user.username,
            "level": user.level,
            "xp": user.xp,
            "xp_to_next_level": user.xp_to_next_level,
            "unique_stickers": len(owned),
            "total_stickers": sum(e.acquired_count for e in owned.values()),
            "catalog_size": len(self.catalog),
            "new_stickers": sum(1 for e in owned.values() if e.is_new),
            "current_mascot": user.mascot_sticker_id,
            "current_mascot_emoji": mascot_emoji(user.mascot_sticker_id),
            "streak_days": user.streak_days,
            "words_learned": user.words_learned,
            "lessons_completed": user.lessons_completed,
        }
