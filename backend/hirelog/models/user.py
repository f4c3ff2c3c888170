from sqlalchemy import Column, String

from hirelog.db.base import Base


class User(Base):
    """Directory record mirrored from the identity provider."""

    __tablename__ = "users"

    uid = Column(String(32), primary_key=True)
    name = Column(String, index=True, nullable=False)  # login alias and @mention token
    email = Column(String, index=True, nullable=False)
    avatar_url = Column(String, nullable=True)
