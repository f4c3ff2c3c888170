from sqlalchemy import JSON, Column, DateTime, Integer, String, Text

from hirelog.db.base import Base, utcnow


class Note(Base):
    """
    Free-text note in a candidate's thread.

    ``candidate_id`` is not a foreign key. Notes outlive a deleted
    candidate unless PURGE_CANDIDATE_CHILDREN is set.
    """

    __tablename__ = "notes"

    id = Column(Integer, primary_key=True)
    candidate_id = Column(Integer, index=True, nullable=False)
    text = Column(Text, nullable=False)
    author_id = Column(String(32), nullable=False)
    author_name = Column(String, nullable=False)
    created_at = Column(DateTime, default=utcnow, index=True)

    # Uids of mentioned users, computed once when the note is posted
    mentions = Column(JSON, default=list)
