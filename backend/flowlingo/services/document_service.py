"""Uploaded reading documents."""

import logging

from sqlalchemy.exc import SQLAlchemyError

from flowlingo import db
from flowlingo.models.document import Document
from flowlingo.services.ai_tutor import segment_chinese_text

logger = logging.getLogger(__name__)


class DocumentService:
    """Service for a user's reading documents."""

    def list_documents(self, user_id: int) -> list[Document]:
        return (
            Document.query.filter_by(user_id=user_id)
            .order_by(Document.created_at.desc(), Document.id.desc())
            .all()
        )

    def get_document(self, user_id: int, document_id: int) -> Document | None:
        return Document.query.filter_by(id=document_id, user_id=user_id).first()

    def create_document(
        self, user_id: int, filename: str, content: str, page_count: int = 1
    ) -> Document:
        """Store extracted text and its tap-to-translate segments."""
        document = Document(
            user_id=user_id,
            filename=filename,
            content=content,
            segments=segment_chinese_text(content),
            page_count=page_count,
        )
        try:
            db.session.add(document)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception(f"Failed to store document {filename} for user {user_id}")
            raise

        logger.info(
            f"Stored document {document.id} for user {user_id} "
            f"({len(content)} characters, {len(document.segments)} segments)"
        )
        return document

    def delete_document(self, document: Document) -> None:
        db.session.delete(document)
        db.session.commit()
