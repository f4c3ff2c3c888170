"""
Note thread API endpoints, nested under a candidate.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from hirelog.api.v1.auth import get_current_user
from hirelog.db.session import get_db
from hirelog.models import User
from hirelog.schemas import NoteRead
from hirelog.services import notes as note_service

router = APIRouter()


class NoteRequest(BaseModel):
    text: str


class NotePage(BaseModel):
    notes: list[NoteRead]
    next_cursor: Optional[int] = None


@router.get("/{candidate_id}/notes", response_model=NotePage)
async def list_notes(
    candidate_id: int,
    page_size: Optional[int] = Query(default=None, ge=1, le=100),
    after: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Notes of a candidate.

    Without ``page_size`` the whole thread is returned oldest first. With it,
    pages run newest first and ``after`` takes the previous ``next_cursor``.
    """
    if page_size is None:
        return NotePage(notes=note_service.list_notes(db, current_user, candidate_id))

    notes, cursor = note_service.list_notes_page(
        db, current_user, candidate_id, page_size, after
    )
    return NotePage(notes=notes, next_cursor=cursor)


@router.post("/{candidate_id}/notes", response_model=NoteRead, status_code=status.HTTP_201_CREATED)
async def post_note(
    candidate_id: int,
    request: NoteRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Post a note; mentioned users other than the author are notified."""
    return note_service.post_note(db, current_user, candidate_id, request.text)


@router.put("/{candidate_id}/notes/{note_id}", response_model=NoteRead)
async def edit_note(
    candidate_id: int,
    note_id: int,
    request: NoteRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return note_service.edit_note(db, current_user, candidate_id, note_id, request.text)


@router.delete("/{candidate_id}/notes/{note_id}")
async def delete_note(
    candidate_id: int,
    note_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    note_service.delete_note(db, current_user, candidate_id, note_id)
    return {"message": "Note deleted", "note_id": note_id}
