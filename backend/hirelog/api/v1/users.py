"""
User directory API endpoints.

Lists users for access grants and powers @mention autocomplete.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from hirelog.api.v1.auth import get_current_user
from hirelog.db.session import get_db
from hirelog.models import User
from hirelog.schemas import UserRead
from hirelog.services import directory
from hirelog.services.notes import mention_query, suggest_mentions

router = APIRouter()


class MentionSuggestions(BaseModel):
    """Autocomplete state for the text before the cursor."""

    active: bool
    query: Optional[str] = None
    users: list[UserRead] = []


class AvatarUpdate(BaseModel):
    avatar_url: str


@router.get("", response_model=list[UserRead])
async def list_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return directory.get_users(db)


@router.get("/mentions", response_model=MentionSuggestions)
async def mention_suggestions(
    text: str = "",
    cursor: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Suggest users for a partial ``@name`` ending at ``cursor``.

    ``active`` is false when the cursor is not inside a mention.
    """
    query = mention_query(text, cursor)
    if query is None:
        return MentionSuggestions(active=False)

    users = suggest_mentions(directory.get_users(db), query)
    return MentionSuggestions(
        active=True,
        query=query,
        users=[UserRead.model_validate(user) for user in users],
    )


@router.put("/me/avatar", response_model=UserRead)
async def update_avatar(
    request: AvatarUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return directory.update_user_avatar(db, current_user.uid, request.avatar_url)
