from typing import get_args

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from hirelog.db.base import Base, utcnow
from hirelog.schemas import CandidateStatus


CANDIDATE_STATUSES = get_args(CandidateStatus)


class Candidate(Base):
    """Candidate record; ``assigned_users`` is its access-control list."""

    __tablename__ = "candidates"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    location = Column(String, nullable=True)
    experience = Column(String, nullable=True)
    role = Column(String, nullable=True)
    status = Column(String, default="pending", nullable=False)
    created_by = Column(String(32), nullable=False)
    created_at = Column(DateTime, default=utcnow)

    # The access list lives and dies with the candidate
    assignments = relationship(
        "CandidateAssignment",
        back_populates="candidate",
        cascade="all, delete-orphan",
        order_by="CandidateAssignment.id",
    )

    @property
    def assigned_users(self) -> list[str]:
        return [assignment.user_uid for assignment in self.assignments]


class CandidateAssignment(Base):
    """Membership of one user uid in a candidate's access list."""

    __tablename__ = "candidate_assignments"
    __table_args__ = (UniqueConstraint("candidate_id", "user_uid"),)

    id = Column(Integer, primary_key=True)
    candidate_id = Column(Integer, ForeignKey("candidates.id", ondelete="CASCADE"), index=True)
    user_uid = Column(String(32), index=True, nullable=False)

    candidate = relationship("Candidate", back_populates="assignments")
