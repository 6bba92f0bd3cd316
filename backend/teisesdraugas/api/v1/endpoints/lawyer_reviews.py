"""
Lawyer review endpoints
"""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from teisesdraugas.api.deps import get_current_user, get_lawyer_review_service, require_lawyer
from teisesdraugas.db.database import get_db
from teisesdraugas.db.models import User
from teisesdraugas.db.schemas import LawyerReviewComplete, LawyerReviewCreate, LawyerReviewResponse
from teisesdraugas.services import case_service
from teisesdraugas.services.lawyer_review_service import LawyerReviewService

router = APIRouter()


@router.post(
    "/cases/{case_id}/lawyer-reviews",
    response_model=LawyerReviewResponse,
    status_code=status.HTTP_201_CREATED,
)
def request_review(
    case_id: UUID,
    data: LawyerReviewCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    review_service: LawyerReviewService = Depends(get_lawyer_review_service),
):
    """
    Order a paid review. Without explicit content the latest letter or
    filing of the case is copied into the review.
    """
    case = case_service.get_owned_case(db, case_id, current_user)
    return review_service.request_review(db, case, current_user, data.review_type, data.document_content)


@router.get("/cases/{case_id}/lawyer-reviews", response_model=List[LawyerReviewResponse])
def list_case_reviews(
    case_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    review_service: LawyerReviewService = Depends(get_lawyer_review_service),
):
    case = case_service.get_owned_case(db, case_id, current_user)
    return review_service.list_for_case(db, case)


@router.get("/lawyer-reviews/pending", response_model=List[LawyerReviewResponse])
def list_pending_reviews(
    lawyer: User = Depends(require_lawyer),
    db: Session = Depends(get_db),
    review_service: LawyerReviewService = Depends(get_lawyer_review_service),
):
    return review_service.list_pending(db)


@router.post("/lawyer-reviews/{review_id}/claim", response_model=LawyerReviewResponse)
def claim_review(
    review_id: UUID,
    lawyer: User = Depends(require_lawyer),
    db: Session = Depends(get_db),
    review_service: LawyerReviewService = Depends(get_lawyer_review_service),
):
    review = review_service.get_review(db, review_id)
    return review_service.claim(db, review, lawyer)


@router.post("/lawyer-reviews/{review_id}/complete", response_model=LawyerReviewResponse)
def complete_review(
    review_id: UUID,
    data: LawyerReviewComplete,
    lawyer: User = Depends(require_lawyer),
    db: Session = Depends(get_db),
    review_service: LawyerReviewService = Depends(get_lawyer_review_service),
):
    review = review_service.get_review(db, review_id)
    return review_service.complete(db, review, lawyer, data.approved, data.comments, data.corrections)
