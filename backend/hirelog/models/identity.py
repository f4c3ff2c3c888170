from sqlalchemy import Column, DateTime, Integer, String

from hirelog.db.base import Base, utcnow


class Identity(Base):
    """
    Credential record owned by the identity provider.

    Kept apart from the ``users`` directory: an identity can exist without a
    directory record until the self-healing step creates one.
    """

    __tablename__ = "identities"

    uid = Column(String(32), primary_key=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    display_name = Column(String, nullable=True)
    token_version = Column(Integer, default=1, nullable=False)  # bumped on sign-out
    created_at = Column(DateTime, default=utcnow)
