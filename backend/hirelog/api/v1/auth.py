"""
Authentication API endpoints.

Handles registration, login by username or email, logout and the current
user's directory record.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from pydantic import BaseModel, field_validator
import re
from sqlalchemy.orm import Session

from hirelog.db.session import get_db
from hirelog.models import Identity, User
from hirelog.schemas import UserRead
from hirelog.services import directory
from hirelog.services.identity import identity_from_token, issue_token
from hirelog.services.session import HOME_VIEW, LOGIN_VIEW, authenticate, register_account, sign_out

router = APIRouter()

# OAuth2 scheme for token authentication
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")


# ============== Pydantic Schemas ==============


class UserRegister(BaseModel):
    """Schema for user registration."""

    name: str
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Validate email format."""
        email_pattern = r"^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$"
        if not re.match(email_pattern, v):
            raise ValueError("Invalid email format")
        return v.lower()

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v


class Token(BaseModel):
    """Schema for JWT token response."""

    access_token: str
    token_type: str = "bearer"
    redirect: Optional[str] = HOME_VIEW


class AuthenticatedUser(UserRead):
    """Registration response: the directory record plus a token."""

    access_token: str
    token_type: str = "bearer"
    redirect: str = HOME_VIEW


# ============== Dependencies ==============


async def get_current_identity(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> Identity:
    """Resolve the bearer token to its identity or fail with 401."""
    identity = identity_from_token(db, token)
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return identity


async def get_current_user(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> User:
    """
    Dependency returning the caller's directory record.

    Creates the record when an authenticated identity has none yet.
    """
    return directory.ensure_directory_record(db, identity)


# ============== API Endpoints ==============


@router.post("/register", response_model=AuthenticatedUser, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserRegister, db: Session = Depends(get_db)):
    """
    Register a new user.

    Creates the identity, sets its display name and creates the directory
    record used for @mentions and username login.
    """
    identity, user = register_account(db, user_data.name, user_data.email, user_data.password)
    return AuthenticatedUser(
        uid=user.uid,
        name=user.name,
        email=user.email,
        avatar_url=user.avatar_url,
        access_token=issue_token(identity),
    )


@router.post("/login", response_model=Token)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    """
    Login and get JWT access token.

    Uses OAuth2 password flow. ``username`` may be the account's name or
    its email.
    """
    identity = authenticate(db, form_data.username, form_data.password)

    # Heal accounts whose registration stopped before the directory record
    directory.ensure_directory_record(db, identity)

    return Token(access_token=issue_token(identity))


@router.post("/logout")
async def logout(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Revoke every token issued to the caller."""
    sign_out(db, identity)
    return {"message": "Logged out", "redirect": LOGIN_VIEW}


@router.get("/me", response_model=UserRead)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get the current authenticated user's directory record."""
    return current_user
