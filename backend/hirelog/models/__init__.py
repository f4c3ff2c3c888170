from hirelog.models.identity import Identity
from hirelog.models.user import User
from hirelog.models.candidate import Candidate, CandidateAssignment, CANDIDATE_STATUSES
from hirelog.models.note import Note
from hirelog.models.history import HistoryEvent
from hirelog.models.notification import Notification

__all__ = [
    "Identity",
    "User",
    "Candidate",
    "CandidateAssignment",
    "CANDIDATE_STATUSES",
    "Note",
    "HistoryEvent",
    "Notification",
]
