"""
Demand letter endpoints
"""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from teisesdraugas.api.deps import get_current_user, get_demand_letter_service
from teisesdraugas.db.database import get_db
from teisesdraugas.db.models import DemandLetter, User
from teisesdraugas.db.schemas import (
    DeliveryResponse,
    DemandLetterCreate,
    DemandLetterResponse,
    PrintableLetterResponse,
)
from teisesdraugas.services import case_service
from teisesdraugas.services.demand_letter_service import DemandLetterService, get_letter_for_user
from teisesdraugas.utils.exceptions import AIServiceError, DemandLetterNotFoundError

router = APIRouter()


@router.post(
    "/cases/{case_id}/demand-letters",
    response_model=DemandLetterResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_demand_letter(
    case_id: UUID,
    data: DemandLetterCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    letter_service: DemandLetterService = Depends(get_demand_letter_service),
):
    """
    Generate a new DRAFT demand letter. Earlier letters are kept.
    """
    case = case_service.get_owned_case(db, case_id, current_user)
    result = letter_service.generate(db, case, current_user.id, data.tone, data.response_deadline_days)
    if not result.ok:
        raise AIServiceError(result.error.message)
    return letter_service.save_letter(db, case, result.value, data.tone, data.response_deadline_days)


@router.get("/cases/{case_id}/demand-letters", response_model=List[DemandLetterResponse])
def list_demand_letters(
    case_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    case = case_service.get_owned_case(db, case_id, current_user)
    return (
        db.query(DemandLetter)
        .filter(DemandLetter.case_id == case.id)
        .order_by(DemandLetter.created_at.desc())
        .all()
    )


@router.get("/demand-letters/{letter_id}/print", response_model=PrintableLetterResponse)
def print_demand_letter(
    letter_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    letter_service: DemandLetterService = Depends(get_demand_letter_service),
):
    letter = get_letter_for_user(db, letter_id, current_user)
    if not letter:
        raise DemandLetterNotFoundError()
    return PrintableLetterResponse(
        demand_letter_id=letter.id,
        text=letter_service.format_for_print(letter, letter.case, current_user),
    )


@router.post("/demand-letters/{letter_id}/send", response_model=DeliveryResponse)
def send_demand_letter(
    letter_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    letter_service: DemandLetterService = Depends(get_demand_letter_service),
):
    """
    Deliver through E. pristatymas. A delivery failure is reported in the
    body and leaves the letter and case unchanged.
    """
    letter = get_letter_for_user(db, letter_id, current_user)
    if not letter:
        raise DemandLetterNotFoundError()
    result = letter_service.send(db, letter, letter.case)
    return DeliveryResponse(success=result.success, delivery_ref=result.reference, error=result.error)
