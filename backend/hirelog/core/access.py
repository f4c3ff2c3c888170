"""
Access-control checks for candidates and notes.

The services call the ``ensure_*`` helpers before touching the database, so
a denial never leaves a side effect behind.
"""

from sqlalchemy.orm import Session

from hirelog.core.errors import AccessDenied, NotFound
from hirelog.models import Candidate, Note, User


def can_view(user: User, candidate: Candidate) -> bool:
    return user.uid in candidate.assigned_users


def can_delete(user: User, candidate: Candidate) -> bool:
    return user.uid == candidate.created_by


def can_edit_note(user: User, note: Note) -> bool:
    return user.uid == note.author_id


def ensure_can_view(user: User, candidate: Candidate) -> None:
    if not can_view(user, candidate):
        raise AccessDenied(
            "You are not assigned to this candidate and cannot view their details."
        )


def ensure_can_delete(user: User, candidate: Candidate) -> None:
    if not can_delete(user, candidate):
        raise AccessDenied("Only the creator of this candidate can remove it.")


def ensure_can_edit_note(user: User, note: Note) -> None:
    if not can_edit_note(user, note):
        raise AccessDenied("Only the author of this note can change it.")


def load_viewable_candidate(db: Session, user: User, candidate_id: int) -> Candidate:
    """Fetch a candidate the user is assigned to."""
    candidate = db.get(Candidate, candidate_id)
    if candidate is None:
        raise NotFound("Candidate not found")
    ensure_can_view(user, candidate)
    return candidate
