# teisesdraugas/services/document_service.py
"""
Evidence uploads: validation, storage, and the document record.
"""
from typing import Optional

from sqlalchemy.orm import Session

from teisesdraugas.core.config import Settings
from teisesdraugas.core.logger import logger
from teisesdraugas.db.models import Case, Document, DocumentType, TimelineEventType, User
from teisesdraugas.services.storage_service import build_storage_key
from teisesdraugas.services.timeline_service import add_timeline_event
from teisesdraugas.utils.exceptions import UploadRejectedError


class DocumentService:

    def __init__(self, config: Settings, storage):
        self.storage = storage
        self.max_upload_size = config.MAX_UPLOAD_SIZE
        self.allowed_mime_types = set(config.ALLOWED_MIME_TYPES)

    def validate_upload(self, size: int, content_type: Optional[str]) -> None:
        """Reject before anything is written to storage."""
        if size <= 0:
            raise UploadRejectedError("File is empty")
        if size > self.max_upload_size:
            limit_mb = self.max_upload_size // (1024 * 1024)
            raise UploadRejectedError(f"File size must be under {limit_mb}MB")
        if content_type not in self.allowed_mime_types:
            raise UploadRejectedError("File type not allowed")

    def upload(
        self,
        db: Session,
        case: Case,
        user: User,
        filename: str,
        content_type: str,
        data: bytes,
        document_type: DocumentType = DocumentType.OTHER,
        description: Optional[str] = None,
    ) -> Document:
        self.validate_upload(len(data), content_type)

        key = build_storage_key(case.id, filename)
        self.storage.save(key, data, content_type)

        try:
            document = Document(
                case_id=case.id,
                user_id=user.id,
                file_name=filename,
                file_type=content_type,
                file_size=len(data),
                file_path=key,
                document_type=document_type,
                description=description,
            )
            db.add(document)
            db.flush()

            add_timeline_event(
                db,
                case.id,
                TimelineEventType.DOCUMENT_UPLOADED,
                title="Dokumentas įkeltas",
                description=f"Įkeltas dokumentas: {filename}",
                icon="file-up",
                color="blue",
                document_id=document.id,
            )
            db.commit()
        except Exception:
            db.rollback()
            self.storage.delete(key)
            raise

        db.refresh(document)
        logger.info(f"Document {document.id} ({document_type.value}) added to case {case.id}")
        return document

    def update_metadata(
        self,
        db: Session,
        document: Document,
        document_type: Optional[DocumentType] = None,
        description: Optional[str] = None,
    ) -> Document:
        # Stored bytes, name, size and path never change after upload
        if document_type is not None:
            document.document_type = document_type
        if description is not None:
            document.description = description
        db.commit()
        db.refresh(document)
        return document

    def list_documents(self, db: Session, case: Case):
        return (
            db.query(Document)
            .filter(Document.case_id == case.id)
            .order_by(Document.uploaded_at.desc())
            .all()
        )
