"""
Read models shared by the services, the HTTP routers and live snapshots.

Live views deliver lists of these models, never ORM objects, so snapshots
stay valid after the session that loaded them is closed.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

CandidateStatus = Literal["pending", "active", "interviewed", "hired", "rejected"]


class UserRead(BaseModel):
    uid: str
    name: str
    email: str
    avatar_url: Optional[str] = None

    class Config:
        from_attributes = True


class CandidateCreate(BaseModel):
    """Input for a new candidate. Only name and email are required."""

    name: str = ""
    email: str = ""
    phone: Optional[str] = None
    location: Optional[str] = None
    experience: Optional[str] = None
    role: Optional[str] = None
    status: CandidateStatus = "pending"
    assigned_users: list[str] = Field(default_factory=list)


class CandidateRead(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    location: Optional[str] = None
    experience: Optional[str] = None
    role: Optional[str] = None
    status: CandidateStatus
    assigned_users: list[str]
    created_by: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class NoteRead(BaseModel):
    id: int
    candidate_id: int
    text: str
    author_id: str
    author_name: str
    created_at: Optional[datetime] = None
    mentions: list[str] = Field(default_factory=list)

    class Config:
        from_attributes = True


class HistoryEventRead(BaseModel):
    id: int
    candidate_id: int
    timestamp: Optional[datetime] = None
    author_id: str
    author_name: str
    action: str
    details: str

    class Config:
        from_attributes = True


class NotificationRead(BaseModel):
    id: int
    candidate_id: int
    candidate_name: str
    note_id: int
    message_preview: str
    is_read: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
