"""Uploaded reading document model."""

from datetime import datetime

from flowlingo import db


class Document(db.Model):
    """Chinese reading material uploaded by a user, segmented for tapping."""

    __tablename__ = "documents"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id"), nullable=False, index=True
    )
    filename = db.Column(db.String(255), nullable=False)
    content = db.Column(db.Text, nullable=False)
    segments = db.Column(db.JSON, nullable=True)
    page_count = db.Column(db.Integer, default=1, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self, include_content: bool = True) -> dict:
        data = {
            "id": self.id,
            "filename": self.filename,
            "page_count": self.page_count,
            "characters": len(self.content),
            "created_at": self.created_at.isoformat(),
        }
        if include_content:
            data["content"] = self.content
            data["segments"] = self.segments or []
        return data
