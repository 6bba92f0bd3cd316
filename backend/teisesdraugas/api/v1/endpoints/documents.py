"""
Evidence document endpoints
"""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.orm import Session

from teisesdraugas.api.deps import get_current_user, get_document_service
from teisesdraugas.db.database import get_db
from teisesdraugas.db.models import Case, Document, DocumentType, User
from teisesdraugas.db.schemas import DocumentResponse, DocumentUpdate
from teisesdraugas.services import case_service
from teisesdraugas.services.document_service import DocumentService
from teisesdraugas.utils.exceptions import DocumentNotFoundError

router = APIRouter()


@router.post(
    "/cases/{case_id}/documents",
    response_model=DocumentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_document(
    case_id: UUID,
    file: UploadFile = File(...),
    document_type: DocumentType = Form(DocumentType.OTHER),
    description: Optional[str] = Form(None),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    document_service: DocumentService = Depends(get_document_service),
):
    case = case_service.get_owned_case(db, case_id, current_user)

    # Reject on the declared size before buffering the body
    if file.size is not None:
        document_service.validate_upload(file.size, file.content_type)

    data = await file.read()
    return document_service.upload(
        db,
        case,
        current_user,
        filename=file.filename or "document",
        content_type=file.content_type,
        data=data,
        document_type=document_type,
        description=description,
    )


@router.get("/cases/{case_id}/documents", response_model=List[DocumentResponse])
def list_documents(
    case_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    document_service: DocumentService = Depends(get_document_service),
):
    case = case_service.get_owned_case(db, case_id, current_user)
    return document_service.list_documents(db, case)


@router.patch("/documents/{document_id}", response_model=DocumentResponse)
def update_document(
    document_id: UUID,
    data: DocumentUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    document_service: DocumentService = Depends(get_document_service),
):
    """
    Only the document type and description are editable
    """
    document = (
        db.query(Document)
        .join(Case, Document.case_id == Case.id)
        .filter(Document.id == document_id, Case.user_id == current_user.id)
        .first()
    )
    if not document:
        raise DocumentNotFoundError(str(document_id))
    return document_service.update_metadata(db, document, data.document_type, data.description)
