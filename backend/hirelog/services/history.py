"""
Audit trail for candidates.

Appends are best-effort: a failed write is logged and swallowed so the
operation that triggered it still succeeds.
"""

import logging
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hirelog.core.access import load_viewable_candidate
from hirelog.models import HistoryEvent, User
from hirelog.schemas import HistoryEventRead
from hirelog.services.directory import UNNAMED_USER
from hirelog.services.live import Subscription, history_key, live_hub

logger = logging.getLogger("history")

STATUS_UPDATED = "Status Updated"
NOTE_EDITED = "Note Edited"
NOTE_DELETED = "Note Deleted"
ACCESS_GRANTED = "Access Granted"


def append_history(
    db: Session,
    candidate_id: int,
    actor: User,
    action: str,
    details: str,
) -> Optional[HistoryEvent]:
    """Record an event for ``candidate_id``. Returns None if the write failed."""
    event = HistoryEvent(
        candidate_id=candidate_id,
        author_id=actor.uid,
        author_name=actor.name or UNNAMED_USER,
        action=action,
        details=details,
    )
    try:
        db.add(event)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error logging history event '{action}' for candidate {candidate_id}")
        return None

    live_hub.publish(db, history_key(candidate_id))
    return event


def load_history(db: Session, candidate_id: int) -> list[HistoryEventRead]:
    """Newest first."""
    events = (
        db.query(HistoryEvent)
        .filter(HistoryEvent.candidate_id == candidate_id)
        .order_by(HistoryEvent.timestamp.desc(), HistoryEvent.id.desc())
        .all()
    )
    return [HistoryEventRead.model_validate(event) for event in events]


def list_history(db: Session, actor: User, candidate_id: int) -> list[HistoryEventRead]:
    load_viewable_candidate(db, actor, candidate_id)
    return load_history(db, candidate_id)


def subscribe_history(
    db: Session,
    actor: User,
    candidate_id: int,
    callback: Callable[[list[HistoryEventRead]], None],
) -> Subscription:
    load_viewable_candidate(db, actor, candidate_id)
    return live_hub.subscribe(
        db,
        history_key(candidate_id),
        lambda session: load_history(session, candidate_id),
        callback,
    )
