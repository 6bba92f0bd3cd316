from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from teisesdraugas.api.deps import get_current_user
from teisesdraugas.db.database import get_db
from teisesdraugas.db.models import Notification, User
from teisesdraugas.db.schemas import NotificationResponse

router = APIRouter()


@router.get("/notifications", response_model=List[NotificationResponse])
def list_notifications(
    limit: int = Query(50, ge=1, le=200),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return (
        db.query(Notification)
        .filter(Notification.user_id == current_user.id)
        .order_by(Notification.created_at.desc())
        .limit(limit)
        .all()
    )
