# teisesdraugas/services/lawyer_review_service.py
"""
Paid lawyer reviews of generated documents.

The reviewed text is copied into the review when it is requested, so the
lawyer sees exactly what the user submitted even if a newer letter or filing
is generated afterwards.
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from teisesdraugas.core.config import Settings
from teisesdraugas.core.logger import logger
from teisesdraugas.db.models import (
    Case,
    CourtFiling,
    DemandLetter,
    LawyerReview,
    NotificationType,
    ReviewStatus,
    ReviewType,
    TimelineEventType,
    User,
    UserRole,
)
from teisesdraugas.services.timeline_service import add_timeline_event, notify_user
from teisesdraugas.utils.exceptions import (
    LawyerRoleRequiredError,
    NoReviewContentError,
    ReviewAlreadyCompletedError,
    ReviewNotFoundError,
)

REVIEWER_ROLES = frozenset({UserRole.LAWYER, UserRole.ADMIN})


def is_reviewer(user: User) -> bool:
    return user.role in REVIEWER_ROLES


class LawyerReviewService:

    def __init__(self, config: Settings):
        self.fee = config.LAWYER_REVIEW_FEE

    def _latest_content(self, db: Session, case: Case, review_type: ReviewType) -> Optional[str]:
        if review_type == ReviewType.DEMAND_LETTER:
            letter = (
                db.query(DemandLetter)
                .filter(DemandLetter.case_id == case.id)
                .order_by(DemandLetter.created_at.desc())
                .first()
            )
            return letter.content if letter else None
        if review_type == ReviewType.COURT_FILING:
            filing = (
                db.query(CourtFiling)
                .filter(CourtFiling.case_id == case.id)
                .order_by(CourtFiling.created_at.desc())
                .first()
            )
            return filing.content if filing else None
        return None

    def request_review(
        self,
        db: Session,
        case: Case,
        user: User,
        review_type: ReviewType,
        document_content: Optional[str] = None,
    ) -> LawyerReview:
        content = document_content or self._latest_content(db, case, review_type)
        if not content:
            raise NoReviewContentError()

        review = LawyerReview(
            case_id=case.id,
            user_id=user.id,
            review_type=review_type,
            document_content=content,
            fee=self.fee,
            status=ReviewStatus.PENDING,
        )
        db.add(review)

        add_timeline_event(
            db,
            case.id,
            TimelineEventType.LAWYER_REVIEW_REQUESTED,
            title="Užsakyta advokato peržiūra",
            description=f"Užsakyta {review_type.value} peržiūra. Kaina: {self.fee:.0f} EUR",
            icon="user-check",
            color="amber",
        )
        notify_user(
            db,
            user.id,
            title="Advokato peržiūra užsakyta",
            message="Jūsų dokumentas bus peržiūrėtas per 24 valandas.",
            case_id=case.id,
        )
        db.commit()
        db.refresh(review)

        logger.info(f"Lawyer review {review.id} ({review_type.value}) requested for case {case.id}")
        return review

    def list_for_case(self, db: Session, case: Case) -> List[LawyerReview]:
        return (
            db.query(LawyerReview)
            .filter(LawyerReview.case_id == case.id)
            .order_by(LawyerReview.requested_at.desc())
            .all()
        )

    def list_pending(self, db: Session) -> List[LawyerReview]:
        return (
            db.query(LawyerReview)
            .filter(LawyerReview.status == ReviewStatus.PENDING)
            .order_by(LawyerReview.requested_at.asc())
            .all()
        )

    def get_review(self, db: Session, review_id: UUID) -> LawyerReview:
        review = db.query(LawyerReview).filter(LawyerReview.id == review_id).first()
        if not review:
            raise ReviewNotFoundError()
        return review

    def claim(self, db: Session, review: LawyerReview, lawyer: User) -> LawyerReview:
        if not is_reviewer(lawyer):
            raise LawyerRoleRequiredError()
        if review.status == ReviewStatus.COMPLETED:
            raise ReviewAlreadyCompletedError()
        review.lawyer_id = lawyer.id
        db.commit()
        db.refresh(review)
        return review

    def complete(
        self,
        db: Session,
        review: LawyerReview,
        lawyer: User,
        approved: bool,
        comments: Optional[str] = None,
        corrections: Optional[str] = None,
    ) -> LawyerReview:
        if not is_reviewer(lawyer):
            raise LawyerRoleRequiredError()
        if review.status == ReviewStatus.COMPLETED:
            raise ReviewAlreadyCompletedError()

        review.lawyer_id = lawyer.id
        review.status = ReviewStatus.COMPLETED
        review.approved = approved
        review.comments = comments
        review.corrections = corrections
        review.completed_at = datetime.utcnow()

        add_timeline_event(
            db,
            review.case_id,
            TimelineEventType.LAWYER_REVIEW_COMPLETE,
            title="Advokatas patvirtino dokumentą" if approved else "Advokatas siūlo pataisymus",
            description=comments or "Peržiūra baigta",
            icon="check-circle" if approved else "edit",
            color="green" if approved else "amber",
        )
        notify_user(
            db,
            review.user_id,
            title="Advokato peržiūra baigta",
            message=(
                "Jūsų dokumentas buvo patvirtintas advokato."
                if approved
                else "Advokatas pateikė siūlomų pataisymų."
            ),
            case_id=review.case_id,
            notification_type=NotificationType.REVIEW_COMPLETE,
        )
        db.commit()
        db.refresh(review)

        logger.info(f"Lawyer review {review.id} completed by {lawyer.id}: approved={approved}")
        return review
