from sqlalchemy import Column, DateTime, Integer, String

from hirelog.db.base import Base, utcnow


class HistoryEvent(Base):
    """
    Append-only audit trail entry for a candidate.

    Powers the History tab next to the notes thread.
    """

    __tablename__ = "history_events"

    id = Column(Integer, primary_key=True)
    candidate_id = Column(Integer, index=True, nullable=False)
    timestamp = Column(DateTime, default=utcnow, index=True)
    author_id = Column(String(32), nullable=False)
    author_name = Column(String, nullable=False)
    action = Column(String, nullable=False)  # "Status Updated", "Note Edited", "Note Deleted", "Access Granted"
    details = Column(String, nullable=False)  # "Status changed from pending to active"
