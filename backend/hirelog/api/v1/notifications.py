"""
Notification API endpoints for the current user.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from hirelog.api.v1.auth import get_current_user
from hirelog.db.session import get_db
from hirelog.models import User
from hirelog.schemas import CandidateRead, NotificationRead
from hirelog.services import notifications as notification_service

router = APIRouter()


class NotificationTarget(BaseModel):
    """Where a notification click leads: the candidate and the note to highlight."""

    candidate: CandidateRead
    highlighted_note_id: int


@router.get("", response_model=list[NotificationRead])
async def list_notifications(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Newest first."""
    return notification_service.list_notifications(db, current_user.uid)


@router.post("/{notification_id}/read", response_model=NotificationRead)
async def mark_notification_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return notification_service.mark_read(db, current_user.uid, notification_id)


@router.post("/{notification_id}/open", response_model=NotificationTarget)
async def open_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Mark read and resolve the candidate; 404 if it is gone or not assigned."""
    candidate, note_id = notification_service.resolve_notification(
        db, current_user, notification_id
    )
    return NotificationTarget(
        candidate=CandidateRead.model_validate(candidate),
        highlighted_note_id=note_id,
    )
