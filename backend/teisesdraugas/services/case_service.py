# teisesdraugas/services/case_service.py
"""
Case records and the case status state machine.

Allowed status moves:
  * forward along STATUS_ORDER (steps may be skipped)
  * NEGOTIATION back to AWAITING_RESPONSE
  * any status to CLOSED; CLOSED is terminal
"""
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from teisesdraugas.core.logger import logger
from teisesdraugas.db.models import (
    Case,
    CaseStatus,
    CaseStep,
    TimelineEventType,
    User,
)
from teisesdraugas.db.schemas import CaseCreate, CaseUpdate
from teisesdraugas.services.timeline_service import add_timeline_event, notify_user
from teisesdraugas.utils.exceptions import (
    CaseNotDeletableError,
    CaseNotFoundError,
    InvalidStatusTransitionError,
    UnauthorizedError,
)
from teisesdraugas.utils.helpers import generate_case_number

STATUS_ORDER: List[CaseStatus] = list(CaseStatus)

DELETABLE_STATUSES = frozenset({CaseStatus.INTAKE, CaseStatus.CLOSED})

_LOOPBACKS = frozenset({(CaseStatus.NEGOTIATION, CaseStatus.AWAITING_RESPONSE)})

_STATUS_EVENTS = {
    CaseStatus.RESOLVED: (TimelineEventType.CASE_RESOLVED, "Byla išspręsta", "check-circle", "green"),
    CaseStatus.CLOSED: (TimelineEventType.CASE_CLOSED, "Byla uždaryta", "archive", "gray"),
}


# ============================================================================
# Status machine
# ============================================================================

def can_transition(current: CaseStatus, target: CaseStatus) -> bool:
    if current == target:
        return True
    if current == CaseStatus.CLOSED:
        return False
    if target == CaseStatus.CLOSED:
        return True
    if (current, target) in _LOOPBACKS:
        return True
    return STATUS_ORDER.index(target) > STATUS_ORDER.index(current)


def transition_status(case: Case, target: CaseStatus) -> bool:
    """
    Explicit status change requested by a user. Raises on a disallowed move.
    Returns True when the status actually changed.
    """
    if not can_transition(case.status, target):
        raise InvalidStatusTransitionError(case.status.value, target.value)
    changed = case.status != target
    case.status = target
    return changed


def advance_status(case: Case, target: CaseStatus) -> bool:
    """
    Status change driven by a pipeline step. A case that is already past
    ``target`` (or closed) keeps its status.
    """
    if case.status == target or not can_transition(case.status, target):
        return False
    case.status = target
    return True


def is_deletable(case: Case) -> bool:
    return case.status in DELETABLE_STATUSES


# ============================================================================
# Lookups
# ============================================================================

def get_owned_case(db: Session, case_id: UUID, user: User) -> Case:
    """Load a case and verify the caller owns it. Checked on every request."""
    case = db.query(Case).filter(Case.id == case_id).first()
    if not case:
        raise CaseNotFoundError(case_id)
    if case.user_id != user.id:
        raise UnauthorizedError()
    return case


def list_cases(
    db: Session,
    user: User,
    status: Optional[CaseStatus] = None,
    page: int = 1,
    limit: int = 10,
) -> Tuple[List[Case], int]:
    query = db.query(Case).filter(Case.user_id == user.id)
    if status:
        query = query.filter(Case.status == status)

    total = query.count()
    cases = (
        query.order_by(Case.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return cases, total


# ============================================================================
# Mutations
# ============================================================================

def create_case(db: Session, user: User, data: CaseCreate) -> Case:
    case = Case(
        user_id=user.id,
        case_number=generate_case_number(),
        status=CaseStatus.INTAKE,
        current_step=CaseStep.ANALYSIS,
        **data.model_dump(),
    )
    db.add(case)
    db.flush()

    add_timeline_event(
        db,
        case.id,
        TimelineEventType.CASE_CREATED,
        title="Byla sukurta",
        description=f'Byla "{case.title}" buvo sukurta',
        icon="file-plus",
        color="blue",
    )
    notify_user(
        db,
        user.id,
        title="Nauja byla sukurta",
        message=(
            f'Jūsų byla "{case.title}" buvo sėkmingai sukurta. '
            "Galite įkelti įrodymus ir pradėti analizę."
        ),
        case_id=case.id,
    )
    db.commit()
    db.refresh(case)

    logger.info(f"Case {case.case_number} created by user {user.id}")
    return case


def update_case(db: Session, case: Case, data: CaseUpdate) -> Case:
    changes = data.model_dump(exclude_unset=True)
    new_status = changes.pop("status", None)

    for field, value in changes.items():
        setattr(case, field, value)

    if new_status is not None:
        previous = case.status
        if transition_status(case, new_status):
            event_type, title, icon, color = _STATUS_EVENTS.get(
                new_status,
                (TimelineEventType.STATUS_CHANGED, "Bylos būsena pakeista", "refresh-cw", "blue"),
            )
            add_timeline_event(
                db,
                case.id,
                event_type,
                title=title,
                description=f"{previous.value} → {new_status.value}",
                icon=icon,
                color=color,
            )
            logger.info(f"Case {case.id} status {previous.value} -> {new_status.value}")

    db.commit()
    db.refresh(case)
    return case


def delete_case(db: Session, case: Case, storage=None) -> None:
    if not is_deletable(case):
        raise CaseNotDeletableError()

    stored_paths = [doc.file_path for doc in case.documents]
    case_id = case.id

    db.delete(case)
    db.commit()

    if storage is not None:
        for path in stored_paths:
            storage.delete(path)

    logger.info(f"Case {case_id} deleted ({len(stored_paths)} documents removed)")
