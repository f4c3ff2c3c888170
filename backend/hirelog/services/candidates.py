"""
Candidate repository.

Every mutation here is paired with a history event. The two writes are
independent: if the audit append fails the mutation stays committed.
"""

import logging
from typing import Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hirelog.core.access import ensure_can_delete, load_viewable_candidate
from hirelog.core.config import settings
from hirelog.core.errors import NotFound, StoreError, ValidationFailed
from hirelog.models import (
    CANDIDATE_STATUSES,
    Candidate,
    CandidateAssignment,
    HistoryEvent,
    Note,
    User,
)
from hirelog.schemas import CandidateCreate
from hirelog.services.history import ACCESS_GRANTED, STATUS_UPDATED, append_history
from hirelog.services.sanitize import sanitize_text

logger = logging.getLogger("candidates")


def _unique(uids: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(uid for uid in uids if uid))


def _known_uids(db: Session, uids: list[str]) -> dict[str, User]:
    if not uids:
        return {}
    users = db.query(User).filter(User.uid.in_(uids)).all()
    return {user.uid: user for user in users}


def add_candidate(db: Session, actor: User, data: CandidateCreate) -> Candidate:
    """
    Create a candidate owned by ``actor``.

    The creator is always added to the access list. Name and email are
    required; nothing is written when either is missing.
    """
    name = sanitize_text(data.name)
    email = sanitize_text(data.email)
    if not name or not email:
        raise ValidationFailed("Name and email are required.")

    assigned = _unique([*data.assigned_users, actor.uid])
    known = _known_uids(db, assigned)
    unknown = [uid for uid in assigned if uid not in known and uid != actor.uid]
    if unknown:
        raise ValidationFailed(f"Unknown users: {', '.join(unknown)}")

    candidate = Candidate(
        name=name,
        email=email,
        phone=sanitize_text(data.phone),
        location=sanitize_text(data.location),
        experience=sanitize_text(data.experience),
        role=sanitize_text(data.role),
        status=data.status,
        created_by=actor.uid,
        assignments=[CandidateAssignment(user_uid=uid) for uid in assigned],
    )

    try:
        db.add(candidate)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error adding candidate: {e}")
        raise StoreError("Failed to add candidate") from e

    db.refresh(candidate)
    logger.info(f"User {actor.uid} created candidate {candidate.id}")

    append_history(
        db,
        candidate.id,
        actor,
        STATUS_UPDATED,
        f"Candidate profile for {candidate.name} was created",
    )
    return candidate


def list_candidates(db: Session, user_id: str) -> list[Candidate]:
    """All candidates whose access list contains ``user_id``."""
    try:
        return (
            db.query(Candidate)
            .join(CandidateAssignment)
            .filter(CandidateAssignment.user_uid == user_id)
            .all()
        )
    except SQLAlchemyError as e:
        logger.error(f"Error fetching candidates for {user_id}: {e}")
        raise StoreError("Failed to fetch candidates") from e


def get_candidate(db: Session, actor: User, candidate_id: int) -> Candidate:
    return load_viewable_candidate(db, actor, candidate_id)


def update_candidate_status(
    db: Session,
    actor: User,
    candidate_id: int,
    new_status: str,
) -> Candidate:
    """
    Overwrite the candidate's status and record the transition.

    The previous status is the value loaded before the update; it is not
    re-read after the write.
    """
    if new_status not in CANDIDATE_STATUSES:
        raise ValidationFailed(f"Invalid status. Must be one of: {list(CANDIDATE_STATUSES)}")

    candidate = load_viewable_candidate(db, actor, candidate_id)
    old_status = candidate.status
    if old_status == new_status:
        return candidate

    candidate.status = new_status
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error updating status of candidate {candidate_id}: {e}")
        raise StoreError("Failed to update candidate status") from e

    db.refresh(candidate)
    logger.info(f"Updated candidate {candidate_id} status to: {new_status}")

    append_history(
        db,
        candidate.id,
        actor,
        STATUS_UPDATED,
        f"Status changed from {old_status} to {new_status}",
    )
    return candidate


def grant_access(
    db: Session,
    actor: User,
    candidate_id: int,
    user_uids: list[str],
) -> Candidate:
    """Add users to the candidate's access list."""
    candidate = load_viewable_candidate(db, actor, candidate_id)

    requested = _unique(user_uids)
    known = _known_uids(db, requested)
    unknown = [uid for uid in requested if uid not in known]
    if unknown:
        raise ValidationFailed(f"Unknown users: {', '.join(unknown)}")

    current = set(candidate.assigned_users)
    added = [uid for uid in requested if uid not in current]
    if not added:
        return candidate

    for uid in added:
        candidate.assignments.append(CandidateAssignment(user_uid=uid))
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error granting access to candidate {candidate_id}: {e}")
        raise StoreError("Failed to add users") from e

    db.refresh(candidate)
    logger.info(f"User {actor.uid} granted access to candidate {candidate_id} for {added}")

    names = ", ".join(known[uid].name for uid in added)
    append_history(db, candidate.id, actor, ACCESS_GRANTED, f"Gave access to {names}")
    return candidate


def delete_candidate(db: Session, actor: User, candidate_id: int) -> None:
    """
    Hard-delete a candidate. Creator only.

    Notes and history stay behind unless ``PURGE_CANDIDATE_CHILDREN`` is set.
    """
    candidate = db.get(Candidate, candidate_id)
    if candidate is None:
        raise NotFound("Candidate not found")
    ensure_can_delete(actor, candidate)

    try:
        if settings.PURGE_CANDIDATE_CHILDREN:
            db.query(Note).filter(Note.candidate_id == candidate_id).delete(
                synchronize_session=False
            )
            db.query(HistoryEvent).filter(HistoryEvent.candidate_id == candidate_id).delete(
                synchronize_session=False
            )
        db.delete(candidate)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error deleting candidate {candidate_id}: {e}")
        raise StoreError("Failed to remove candidate") from e

    logger.info(f"User {actor.uid} removed candidate {candidate_id}")
