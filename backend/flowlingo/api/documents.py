"""Reading document endpoints."""

from flask_jwt_extended import jwt_required

from flowlingo.api import api_bp
from flowlingo.schemas import DocumentCreateRequest, parse_body
from flowlingo.services.document_service import DocumentService
from flowlingo.utils import not_found, success_response
from flowlingo.utils.auth import current_user_id


@api_bp.route("/documents", methods=["GET"])
@jwt_required()
def list_documents():
    """The user's documents, newest first, without their text."""
    documents = DocumentService().list_documents(current_user_id())
    return success_response(
        {"documents": [d.to_dict(include_content=False) for d in documents]}
    )


@api_bp.route("/documents", methods=["POST"])
@jwt_required()
def create_document():
    """
    Store text extracted from an uploaded file.

    Request body:
    {
        "filename": "lesson-3.pdf",
        "content": "今天天气很好。",
        "page_count": 1
    }
    """
    body, error = parse_body(DocumentCreateRequest)
    if error:
        return error

    document = DocumentService().create_document(
        current_user_id(),
        filename=body.filename,
        content=body.content,
        page_count=body.page_count,
    )
    return success_response(document.to_dict(), status_code=201)


@api_bp.route("/documents/<int:document_id>", methods=["GET"])
@jwt_required()
def get_document(document_id: int):
    document = DocumentService().get_document(current_user_id(), document_id)
    if not document:
        return not_found("Document not found")
    return success_response(document.to_dict())


@api_bp.route("/documents/<int:document_id>", methods=["DELETE"])
@jwt_required()
def delete_document(document_id: int):
    service = DocumentService()
    document = service.get_document(current_user_id(), document_id)
    if not document:
        return not_found("Document not found")

    service.delete_document(document)
    return success_response(message="Document deleted")
