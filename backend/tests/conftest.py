import pytest
from fastapi.testclient import TestClient
from passlib.context import CryptContext
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from hirelog.core import security
from hirelog.db.base import Base
from hirelog.db.session import get_db
from hirelog.main import app
from hirelog.schemas import CandidateCreate
from hirelog.services.candidates import add_candidate
from hirelog.services.live import live_hub
from hirelog.services.session import register_account


@pytest.fixture(autouse=True)
def fast_hashing(monkeypatch):
    """Minimum bcrypt cost keeps registration fast in tests."""
    monkeypatch.setattr(
        security,
        "pwd_context",
        CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=4),
    )


@pytest.fixture(autouse=True)
def reset_live_hub():
    yield
    live_hub.clear()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db):
    def _make(name, email=None, password="secret123"):
        _, user = register_account(db, name, email or f"{name.lower()}@example.com", password)
        return user

    return _make


@pytest.fixture
def make_candidate(db):
    def _make(creator, name="Jordan", email="jordan@example.com", **fields):
        return add_candidate(db, creator, CandidateCreate(name=name, email=email, **fields))

    return _make


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
