"""
Security utilities for the identity provider.

Provides password hashing (bcrypt) and JWT token management. Tokens carry
the identity uid as subject and the identity's token version, so bumping the
version revokes every token issued before it.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from jwt.exceptions import InvalidTokenError
from passlib.context import CryptContext

from hirelog.core.config import settings

# Password hashing context using bcrypt
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a bcrypt hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password)


def create_access_token(
    uid: str,
    token_version: int,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a JWT access token for an identity.

    Args:
        uid: The identity uid, stored as the ``sub`` claim
        token_version: The identity's current token version (``ver`` claim)
        expires_delta: Optional custom expiration time

    Returns:
        The encoded JWT token string
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    payload = {
        "sub": uid,
        "ver": token_version,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    """
    Decode and validate a JWT access token.

    Returns:
        The decoded token payload, or None if invalid or expired
    """
    try:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
        )
    except InvalidTokenError:
        return None


def get_token_claims(token: str) -> Optional[tuple[str, int]]:
    """Extract ``(uid, token_version)`` from a token, or None if invalid."""
    payload = decode_access_token(token)
    if payload is None:
        return None

    uid = payload.get("sub")
    version = payload.get("ver")
    if not isinstance(uid, str) or not isinstance(version, int):
        return None
    return uid, version
