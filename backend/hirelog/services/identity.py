"""
Identity provider: credential records, password checks and bearer tokens.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hirelog.core.errors import StoreError, ValidationFailed
from hirelog.core.security import (
    create_access_token,
    get_password_hash,
    get_token_claims,
    verify_password,
)
from hirelog.models import Identity

logger = logging.getLogger("identity")


def get_identity_by_email(db: Session, email: str) -> Optional[Identity]:
    return db.query(Identity).filter(Identity.email == email.lower()).first()


def create_identity(db: Session, email: str, password: str) -> Identity:
    """Create a new credential record with a fresh uid."""
    if get_identity_by_email(db, email):
        raise ValidationFailed("Email already registered")

    identity = Identity(
        uid=uuid.uuid4().hex,
        email=email.lower(),
        hashed_password=get_password_hash(password),
    )
    db.add(identity)
    _commit(db, "Failed to create account")
    db.refresh(identity)
    return identity


def set_display_name(db: Session, identity: Identity, name: str) -> Identity:
    identity.display_name = name
    _commit(db, "Failed to update profile")
    return identity


def verify_credentials(db: Session, email: str, password: str) -> Optional[Identity]:
    identity = get_identity_by_email(db, email)
    if identity is None:
        return None
    if not verify_password(password, identity.hashed_password):
        return None
    return identity


def issue_token(identity: Identity) -> str:
    return create_access_token(identity.uid, identity.token_version)


def identity_from_token(db: Session, token: str) -> Optional[Identity]:
    """Resolve a bearer token; revoked, expired or malformed tokens give None."""
    claims = get_token_claims(token)
    if claims is None:
        return None

    uid, version = claims
    identity = db.get(Identity, uid)
    if identity is None or identity.token_version != version:
        return None
    return identity


def revoke_tokens(db: Session, identity: Identity) -> None:
    """Invalidate every token issued to ``identity`` so far."""
    identity.token_version = (identity.token_version or 0) + 1
    _commit(db, "Failed to log out")


def _commit(db: Session, message: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"{message}: {e}")
        raise StoreError(message) from e
