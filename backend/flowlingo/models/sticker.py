"""Sticker collection model."""

from datetime import datetime

from flowlingo import db


class UserSticker(db.Model):
    """A sticker owned by a user.

    One row per (user, sticker); drawing the same sticker again increments
    ``acquired_count`` instead of inserting a duplicate.
    """

    __tablename__ = "user_stickers"
    __table_args__ = (
        db.UniqueConstraint("user_id", "sticker_id", name="uq_user_sticker"),
        db.CheckConstraint("acquired_count >= 1", name="ck_acquired_count_positive"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id"), nullable=False, index=True
    )
    sticker_id = db.Column(db.String(50), nullable=False)
    acquired_count = db.Column(db.Integer, default=1, nullable=False)
    is_new = db.Column(db.Boolean, default=True, nullable=False)
    first_acquired_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    last_acquired_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self) -> dict:
        return {
            "sticker_id": self.sticker_id,
            "acquired_count": self.acquired_count,
            "is_new": self.is_new,
            "first_acquired_at": self.first_acquired_at.isoformat(),
            "last_acquired_at": self.last_acquired_at.isoformat(),
        }

    def __repr__(self) -> str:
        return f"<UserSticker user={self.user_id} {self.sticker_id} x{self.acquired_count}>"
