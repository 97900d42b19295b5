"""User model."""

from datetime import datetime

from werkzeug.security import check_password_hash, generate_password_hash

from flowlingo import db


class User(db.Model):
    """Learner account with progression, hearts and mascot state."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    username = db.Column(db.String(255), nullable=False)
    password_hash = db.Column(db.String(255), nullable=True)

    # Google sign-in
    google_id = db.Column(db.String(255), unique=True, nullable=True, index=True)
    profile_picture = db.Column(db.String(512), nullable=True)
    auth_method = db.Column(db.String(20), default="email", nullable=False)
    email_verified = db.Column(db.Boolean, default=False, nullable=False)

    def set_password(self, password: str) -> None:
        """Set password hash."""
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        """Check password against hash."""
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    # Progression
    level = db.Column(db.Integer, default=1, nullable=False)
    xp = db.Column(db.Integer, default=0, nullable=False)
    xp_to_next_level = db.Column(db.Integer, default=100, nullable=False)
    assessment_completed = db.Column(db.Boolean, default=False, nullable=False)
    initial_level = db.Column(db.Integer, nullable=True)
    words_learned = db.Column(db.Integer, default=0, nullable=False)
    lessons_completed = db.Column(db.Integer, default=0, nullable=False)

    # Streaks
    streak_days = db.Column(db.Integer, default=0, nullable=False)
    longest_streak = db.Column(db.Integer, default=0, nullable=False)
    last_active_date = db.Column(db.Date, nullable=True)

    # Hearts
    hearts = db.Column(db.Integer, default=5, nullable=False)
    max_hearts = db.Column(db.Integer, default=5, nullable=False)
    last_heart_lost_at = db.Column(db.DateTime, nullable=True)

    # Mascot (sticker id; the dolphin is owned by everyone)
    mascot_sticker_id = db.Column(db.String(50), default="dolphin", nullable=False)

    # Timestamps
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Relationships
    stickers = db.relationship(
        "UserSticker", backref="user", lazy="dynamic", cascade="all, delete-orphan"
    )
    vocabulary_words = db.relationship(
        "VocabularyWord", backref="user", lazy="dynamic", cascade="all, delete-orphan"
    )
    xp_transactions = db.relationship(
        "XpTransaction", backref="user", lazy="dynamic", cascade="all, delete-orphan"
    )

    @property
    def xp_progress_percent(self) -> int:
        """Progress percentage towards the next level threshold."""
        if self.xp_to_next_level <= 0:
            return 100
        return min(100, int(self.xp / self.xp_to_next_level * 100))

    def to_public_dict(self) -> dict:
        """Identity fields returned by the auth endpoints."""
        return {
            "id": self.id,
            "email": self.email,
            "username": self.username,
            "profile_picture": self.profile_picture,
        }

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            **self.to_public_dict(),
            "auth_method": self.auth_method,
            "level": self.level,
            "xp": self.xp,
            "xp_to_next_level": self.xp_to_next_level,
            "xp_progress_percent": self.xp_progress_percent,
            "assessment_completed": self.assessment_completed,
            "initial_level": self.initial_level,
            "words_learned": self.words_learned,
            "lessons_completed": self.lessons_completed,
            "streak_days": self.streak_days,
            "longest_streak": self.longest_streak,
            "hearts": self.hearts,
            "max_hearts": self.max_hearts,
            "mascot_sticker_id": self.mascot_sticker_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self) -> str:
        return f"<User {self.id}: {self.email}>"
