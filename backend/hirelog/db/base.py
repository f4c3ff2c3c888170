from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    """Server timestamp used for every created/updated column."""
    return datetime.now(timezone.utc)
