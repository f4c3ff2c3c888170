"""
Candidate API endpoints.

Pipeline list, candidate detail, status changes, access grants, removal
and the audit history of each candidate.
"""

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from hirelog.api.v1.auth import get_current_user
from hirelog.db.session import get_db
from hirelog.models import User
from hirelog.schemas import CandidateCreate, CandidateRead, CandidateStatus, HistoryEventRead
from hirelog.services import candidates as candidate_service
from hirelog.services.history import list_history

router = APIRouter()


# ============== Pydantic Schemas ==============


class StatusUpdateRequest(BaseModel):
    """Schema for updating candidate status."""

    status: CandidateStatus


class AccessGrantRequest(BaseModel):
    """Users to add to the candidate's access list."""

    user_uids: list[str]


# ============== API Endpoints ==============


@router.post("", response_model=CandidateRead, status_code=status.HTTP_201_CREATED)
async def create_candidate(
    request: CandidateCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Create a candidate.

    The caller becomes the creator and is always on the access list.
    """
    return candidate_service.add_candidate(db, current_user, request)


@router.get("", response_model=list[CandidateRead])
async def list_candidates(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List the candidates the caller is assigned to."""
    return candidate_service.list_candidates(db, current_user.uid)


@router.get("/{candidate_id}", response_model=CandidateRead)
async def get_candidate(
    candidate_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return candidate_service.get_candidate(db, current_user, candidate_id)


@router.put("/{candidate_id}/status", response_model=CandidateRead)
async def update_candidate_status(
    candidate_id: int,
    request: StatusUpdateRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Update a candidate's status.

    Valid statuses: 'pending', 'active', 'interviewed', 'hired', 'rejected'
    """
    return candidate_service.update_candidate_status(
        db, current_user, candidate_id, request.status
    )


@router.post("/{candidate_id}/access", response_model=CandidateRead)
async def grant_access(
    candidate_id: int,
    request: AccessGrantRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return candidate_service.grant_access(db, current_user, candidate_id, request.user_uids)


@router.delete("/{candidate_id}")
async def delete_candidate(
    candidate_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Remove a candidate (creator only)."""
    candidate_service.delete_candidate(db, current_user, candidate_id)
    return {"message": "Candidate removed", "candidate_id": candidate_id}


@router.get("/{candidate_id}/history", response_model=list[HistoryEventRead])
async def get_candidate_history(
    candidate_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Audit trail, newest first."""
    return list_history(db, current_user, candidate_id)
