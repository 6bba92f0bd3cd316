"""
Custom exception classes
"""
from fastapi import HTTPException


class CaseNotFoundError(HTTPException):
    """Raised when case doesn't exist"""
    def __init__(self, case_id=None):
        super().__init__(
            status_code=404,
            detail="Case not found"
        )
        self.case_id = case_id


class DocumentNotFoundError(HTTPException):
    """Raised when document doesn't exist"""
    def __init__(self, document_id: str):
        super().__init__(
            status_code=404,
            detail=f"Document {document_id} not found"
        )


class DemandLetterNotFoundError(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=404,
            detail="Demand letter not found"
        )


class CourtFilingNotFoundError(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=404,
            detail="Court filing not found"
        )


class ReviewNotFoundError(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=404,
            detail="Review not found"
        )


class UnauthorizedError(HTTPException):
    """Raised when user doesn't own resource"""
    def __init__(self):
        super().__init__(
            status_code=403,
            detail="Not authorized to access this case"
        )


class LawyerRoleRequiredError(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=403,
            detail="Only lawyers can review documents"
        )


class CaseNotDeletableError(HTTPException):
    """Raised when deleting a case that is still in progress"""
    def __init__(self):
        super().__init__(
            status_code=400,
            detail="Cannot delete case in progress. Close the case first."
        )


class InvalidStatusTransitionError(HTTPException):
    def __init__(self, current: str, requested: str):
        super().__init__(
            status_code=409,
            detail=f"Cannot change case status from {current} to {requested}"
        )


class ReviewAlreadyCompletedError(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=409,
            detail="Review is already completed"
        )


class NoReviewContentError(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=400,
            detail="No document content to review"
        )


class FilingNotEditableError(HTTPException):
    def __init__(self, status: str):
        super().__init__(
            status_code=409,
            detail=f"Filing in status {status} cannot be marked ready to sign"
        )


class UploadRejectedError(HTTPException):
    """Raised when an upload fails size or type validation"""
    def __init__(self, reason: str):
        super().__init__(
            status_code=400,
            detail=reason
        )


class UploadFailedError(HTTPException):
    """Raised when writing to storage fails"""
    def __init__(self, reason: str = "Unknown error"):
        super().__init__(
            status_code=500,
            detail=f"Upload failed: {reason}"
        )


class AIServiceError(HTTPException):
    """Raised when a model-generated document could not be produced"""
    def __init__(self, reason: str = "AI service unavailable"):
        super().__init__(
            status_code=502,
            detail=f"AI service error: {reason}"
        )
