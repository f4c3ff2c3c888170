"""
User directory: application-level profiles mirrored from identities.
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from hirelog.core.errors import NotFound, StoreError
from hirelog.models import Identity, User

logger = logging.getLogger("directory")

UNNAMED_USER = "Unnamed User"


def add_user(
    db: Session,
    uid: str,
    name: str,
    email: str,
    avatar_url: Optional[str] = None,
) -> User:
    """
    Create or overwrite the directory record for ``uid``.

    Two writers racing on the same uid both end up with the stored row.
    """
    user = db.get(User, uid)
    if user is None:
        user = User(uid=uid)
        db.add(user)
    user.name = name
    user.email = email
    if avatar_url is not None:
        user.avatar_url = avatar_url

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        existing = db.get(User, uid)
        if existing is None:
            raise StoreError("Failed to add user to directory")
        return existing
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error adding user {uid} to directory: {e}")
        raise StoreError("Failed to add user to directory") from e

    db.refresh(user)
    return user


def get_user(db: Session, uid: str) -> Optional[User]:
    return db.get(User, uid)


def get_users(db: Session) -> list[User]:
    return db.query(User).order_by(User.name).all()


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    """Exact, case-sensitive lookup by display name."""
    return db.query(User).filter(User.name == username).order_by(User.uid).first()


def update_user_avatar(db: Session, uid: str, avatar_url: str) -> User:
    user = get_user(db, uid)
    if user is None:
        raise NotFound("User not found")

    user.avatar_url = avatar_url
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error updating avatar for {uid}: {e}")
        raise StoreError("Failed to update user avatar") from e
    db.refresh(user)
    return user


def resolve_login_email(db: Session, identifier: str) -> str:
    """
    Turn a login identifier into the email used for credential checks.

    Identifiers containing ``@`` are already emails; anything else is a
    username looked up in the directory.
    """
    if "@" in identifier:
        return identifier

    user = get_user_by_username(db, identifier)
    if user is None or not user.email:
        raise NotFound("User not found. Please check your username or email.")
    return user.email


def ensure_directory_record(db: Session, identity: Identity) -> User:
    """Return the directory record for ``identity``, creating it if missing."""
    user = get_user(db, identity.uid)
    if user is not None:
        return user

    logger.info(f"Directory record for {identity.uid} not found, creating one")
    return add_user(
        db,
        uid=identity.uid,
        name=identity.display_name or UNNAMED_USER,
        email=identity.email or "",
    )
