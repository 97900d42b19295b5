"""XP ledger, assessment and practice models."""

from datetime import datetime

from flowlingo import db


class XpTransaction(db.Model):
    """Single XP award applied to a user.

    ``idempotency_key`` is optional; when present it is unique per user so a
    replayed request can be detected and answered with the stored outcome.
    """

    __tablename__ = "xp_transactions"
    __table_args__ = (
        db.UniqueConstraint(
            "user_id", "idempotency_key", name="uq_xp_transaction_idempotency"
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id"), nullable=False, index=True
    )
    amount = db.Column(db.Integer, nullable=False)
    source = db.Column(db.String(50), nullable=False)
    source_id = db.Column(db.String(100), nullable=True)
    description = db.Column(db.String(255), nullable=True)
    idempotency_key = db.Column(db.String(100), nullable=True)

    # Outcome snapshot, returned again on replays
    old_level = db.Column(db.Integer, nullable=False)
    new_level = db.Column(db.Integer, nullable=False)
    xp_after = db.Column(db.Integer, nullable=False)
    xp_to_next_level_after = db.Column(db.Integer, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "amount": self.amount,
            "source": self.source,
            "source_id": self.source_id,
            "description": self.description,
            "old_level": self.old_level,
            "new_level": self.new_level,
            "created_at": self.created_at.isoformat(),
        }


class AssessmentResult(db.Model):
    """Placement assessment outcome."""

    __tablename__ = "assessment_results"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id"), nullable=False, index=True
    )
    score = db.Column(db.Integer, nullable=False)
    total_questions = db.Column(db.Integer, nullable=False)
    placement_level = db.Column(db.Integer, nullable=False)
    final_level = db.Column(db.Integer, nullable=False)
    strengths = db.Column(db.JSON, nullable=True)
    weaknesses = db.Column(db.JSON, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    @property
    def percentage(self) -> int:
        if not self.total_questions:
            return 0
        return round(self.score / self.total_questions * 100)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "score": self.score,
            "total_questions": self.total_questions,
            "percentage": self.percentage,
            "placement_level": self.placement_level,
            "level": self.final_level,
            "level_maintained": self.final_level > self.placement_level,
            "strengths": self.strengths or [],
            "weaknesses": self.weaknesses or [],
            "created_at": self.created_at.isoformat(),
        }


class PracticeSession(db.Model):
    """Completed practice run at a given level."""

    __tablename__ = "practice_sessions"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id"), nullable=False, index=True
    )
    level = db.Column(db.Integer, nullable=False)
    questions_answered = db.Column(db.Integer, default=0, nullable=False)
    correct_answers = db.Column(db.Integer, default=0, nullable=False)
    wrong_answers = db.Column(db.Integer, default=0, nullable=False)
    accuracy = db.Column(db.Float, default=0.0, nullable=False)
    xp_earned = db.Column(db.Integer, default=0, nullable=False)
    time_spent_seconds = db.Column(db.Integer, default=0, nullable=False)
    completed_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "level": self.level,
            "questions_answered": self.questions_answered,
            "correct_answers": self.correct_answers,
            "wrong_answers": self.wrong_answers,
            "accuracy": self.accuracy,
            "xp_earned": self.xp_earned,
            "time_spent_seconds": self.time_spent_seconds,
            "completed_at": self.completed_at.isoformat(),
        }


class LevelProgress(db.Model):
    """Per-level practice state: the run in progress plus the best result.

    The in-progress counters are reset whenever a session at the level is
    saved; ``best_accuracy`` and ``completed`` only ever improve.
    """

    __tablename__ = "practice_progress"
    __table_args__ = (
        db.UniqueConstraint("user_id", "level", name="uq_practice_progress_level"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id"), nullable=False, index=True
    )
    level = db.Column(db.Integer, nullable=False)

    current_question = db.Column(db.Integer, default=1, nullable=False)
    correct_answers = db.Column(db.Integer, default=0, nullable=False)
    incorrect_answers = db.Column(db.Integer, default=0, nullable=False)
    answered_questions = db.Column(db.JSON, nullable=True)

    sessions_completed = db.Column(db.Integer, default=0, nullable=False)
    best_accuracy = db.Column(db.Float, default=0.0, nullable=False)
    completed = db.Column(db.Boolean, default=False, nullable=False)

    updated_at = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    def reset_run(self) -> None:
        self.current_question = 1
        self.correct_answers = 0
        self.incorrect_answers = 0
        self.answered_questions = []

    def to_dict(self) -> dict:
        return {
            "level": self.level,
            "current_question": self.current_question,
            "correct_answers": self.correct_answers,
            "incorrect_answers": self.incorrect_answers,
            "answered_questions": self.answered_questions or [],
            "sessions_completed": self.sessions_completed,
            "best_accuracy": self.best_accuracy,
            "completed": self.completed,
        }
