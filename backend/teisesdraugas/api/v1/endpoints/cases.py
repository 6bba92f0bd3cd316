"""
Case management endpoints
"""
import math
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from teisesdraugas.api.deps import get_current_user, get_storage
from teisesdraugas.db.database import get_db
from teisesdraugas.db.models import CaseStatus, TimelineEvent, User
from teisesdraugas.db.schemas import (
    CaseCreate,
    CaseDetailResponse,
    CaseListResponse,
    CaseResponse,
    CaseUpdate,
    Pagination,
    TimelineEventResponse,
)
from teisesdraugas.services import case_service

router = APIRouter()


@router.post("/cases", response_model=CaseResponse, status_code=status.HTTP_201_CREATED)
def create_case(
    data: CaseCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return case_service.create_case(db, current_user, data)


@router.get("/cases", response_model=CaseListResponse)
def list_cases(
    status_filter: Optional[CaseStatus] = Query(None, alias="status", description="Filter by status"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Cases of the authenticated user, newest first
    """
    cases, total = case_service.list_cases(db, current_user, status_filter, page, limit)
    return CaseListResponse(
        cases=[CaseResponse.model_validate(case) for case in cases],
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            pages=math.ceil(total / limit) if total else 0,
        ),
    )


@router.get("/cases/{case_id}", response_model=CaseDetailResponse)
def get_case(
    case_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return case_service.get_owned_case(db, case_id, current_user)


@router.patch("/cases/{case_id}", response_model=CaseResponse)
def update_case(
    case_id: UUID,
    data: CaseUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    case = case_service.get_owned_case(db, case_id, current_user)
    return case_service.update_case(db, case, data)


@router.delete("/cases/{case_id}")
def delete_case(
    case_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage=Depends(get_storage),
):
    """
    Only INTAKE or CLOSED cases can be deleted
    """
    case = case_service.get_owned_case(db, case_id, current_user)
    case_service.delete_case(db, case, storage)
    return {"success": True}


@router.get("/cases/{case_id}/timeline", response_model=List[TimelineEventResponse])
def get_timeline(
    case_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    case = case_service.get_owned_case(db, case_id, current_user)
    return (
        db.query(TimelineEvent)
        .filter(TimelineEvent.case_id == case.id)
        .order_by(TimelineEvent.event_date.desc())
        .all()
    )
