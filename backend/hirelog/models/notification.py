from sqlalchemy import Boolean, Column, DateTime, Integer, String

from hirelog.db.base import Base, utcnow


class Notification(Base):
    """Mention alert owned by a single recipient."""

    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True)
    recipient_uid = Column(String(32), index=True, nullable=False)
    candidate_id = Column(Integer, nullable=False)
    candidate_name = Column(String, nullable=False)
    note_id = Column(Integer, nullable=False)
    message_preview = Column(String, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow, index=True)
