from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from hirelog.core.config import settings

connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    # Live-view publishes can run on a different thread than the subscriber
    connect_args["check_same_thread"] = False

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
