"""
Per-user mention notifications.
"""

import logging
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hirelog.core.config import settings
from hirelog.core.errors import NotFound, StoreError
from hirelog.models import Candidate, Notification, User
from hirelog.schemas import NotificationRead
from hirelog.services.candidates import list_candidates
from hirelog.services.live import Subscription, live_hub, notifications_key

logger = logging.getLogger("notifications")


def build_preview(text: str, limit: Optional[int] = None) -> str:
    """Cut ``text`` to ``limit`` characters, ending with an ellipsis."""
    if limit is None:
        limit = settings.NOTE_PREVIEW_LENGTH
    if len(text) <= limit:
        return text
    return f"{text[: limit - 3]}..."


def enqueue_notification(
    db: Session,
    recipient_uid: str,
    candidate_id: int,
    candidate_name: str,
    note_id: int,
    message_preview: str,
    commit: bool = True,
) -> Notification:
    """
    Add an unread notification for ``recipient_uid``.

    With ``commit=False`` the row is only added to the session so the caller
    can commit it together with the note that triggered it.
    """
    notification = Notification(
        recipient_uid=recipient_uid,
        candidate_id=candidate_id,
        candidate_name=candidate_name,
        note_id=note_id,
        message_preview=message_preview,
        is_read=False,
    )
    db.add(notification)
    if not commit:
        return notification

    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error creating notification for {recipient_uid}: {e}")
        raise StoreError("Failed to create notification") from e

    live_hub.publish(db, notifications_key(recipient_uid))
    return notification


def load_notifications(db: Session, recipient_uid: str) -> list[NotificationRead]:
    """Newest first."""
    notifications = (
        db.query(Notification)
        .filter(Notification.recipient_uid == recipient_uid)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .all()
    )
    return [NotificationRead.model_validate(n) for n in notifications]


def list_notifications(db: Session, recipient_uid: str) -> list[NotificationRead]:
    try:
        return load_notifications(db, recipient_uid)
    except SQLAlchemyError as e:
        logger.error(f"Error fetching notifications for {recipient_uid}: {e}")
        raise StoreError("Failed to fetch notifications") from e


def subscribe_notifications(
    db: Session,
    recipient_uid: str,
    callback: Callable[[list[NotificationRead]], None],
) -> Subscription:
    return live_hub.subscribe(
        db,
        notifications_key(recipient_uid),
        lambda session: load_notifications(session, recipient_uid),
        callback,
    )


def mark_read(db: Session, recipient_uid: str, notification_id: int) -> Notification:
    """Flip ``is_read`` to true. Marking a read notification again changes nothing."""
    notification = (
        db.query(Notification)
        .filter(
            Notification.id == notification_id,
            Notification.recipient_uid == recipient_uid,
        )
        .first()
    )
    if notification is None:
        raise NotFound("Notification not found")
    if notification.is_read:
        return notification

    notification.is_read = True
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error marking notification {notification_id} as read: {e}")
        raise StoreError("Failed to mark notification as read") from e

    db.refresh(notification)
    live_hub.publish(db, notifications_key(recipient_uid))
    return notification


def resolve_notification(
    db: Session,
    recipient: User,
    notification_id: int,
) -> tuple[Candidate, int]:
    """
    Click-through: mark the notification read and find its candidate.

    The candidate must be among those the recipient can list; a deleted or
    unassigned candidate is a resolution failure.
    """
    notification = mark_read(db, recipient.uid, notification_id)
    for candidate in list_candidates(db, recipient.uid):
        if candidate.id == notification.candidate_id:
            return candidate, notification.note_id
    raise NotFound("Associated candidate not found.")
