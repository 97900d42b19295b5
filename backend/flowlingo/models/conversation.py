"""AI practice content models."""

from datetime import datetime

from flowlingo import db


class Conversation(db.Model):
    """Tutor conversation with its full message history."""

    __tablename__ = "conversations"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id"), nullable=False, index=True
    )
    topic = db.Column(db.String(255), nullable=False, default="Free Conversation")
    difficulty = db.Column(db.String(20), nullable=False, default="beginner")
    messages = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "topic": self.topic,
            "difficulty": self.difficulty,
            "messages": self.messages or [],
            "created_at": self.created_at.isoformat(),
        }


class GeneratedText(db.Model):
    """Reading text generated for a topic and difficulty."""

    __tablename__ = "generated_texts"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id"), nullable=False, index=True
    )
    topic = db.Column(db.String(255), nullable=False)
    difficulty = db.Column(db.String(20), nullable=False)
    content = db.Column(db.Text, nullable=False)
    segments = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "topic": self.topic,
            "difficulty": self.difficulty,
            "content": self.content,
            "segments": self.segments or [],
            "created_at": self.created_at.isoformat(),
        }
