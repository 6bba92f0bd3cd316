"""
Timeline events and user notifications.

Both are written in the caller's session; the caller commits.
"""
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from teisesdraugas.db.models import (
    Notification,
    NotificationType,
    TimelineEvent,
    TimelineEventType,
)


def add_timeline_event(
    db: Session,
    case_id: UUID,
    event_type: TimelineEventType,
    title: str,
    description: Optional[str] = None,
    icon: Optional[str] = None,
    color: Optional[str] = None,
    document_id: Optional[UUID] = None,
) -> TimelineEvent:
    event = TimelineEvent(
        case_id=case_id,
        event_type=event_type,
        title=title,
        description=description,
        icon=icon,
        color=color,
        document_id=document_id,
    )
    db.add(event)
    return event


def notify_user(
    db: Session,
    user_id: UUID,
    title: str,
    message: str,
    case_id: Optional[UUID] = None,
    notification_type: NotificationType = NotificationType.CASE_UPDATE,
) -> Notification:
    notification = Notification(
        user_id=user_id,
        case_id=case_id,
        type=notification_type,
        title=title,
        message=message,
        action_url=f"/dashboard/cases/{case_id}" if case_id else None,
    )
    db.add(notification)
    return notification


def win_probability_color(win_probability: float) -> str:
    """Timeline color band for an analysis result"""
    if win_probability > 0.6:
        return "green"
    if win_probability > 0.4:
        return "amber"
    return "red"
