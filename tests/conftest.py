import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from smartkollect.database import Base, get_db, AccountDB, AgentDB
from smartkollect.repository import AllocationRepository

AGENT_ID = "agent-0001"
OTHER_AGENT_ID = "agent-0002"


@pytest.fixture
def engine():
    # One shared in-memory database per test
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
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def repository(db_session):
    return AllocationRepository(db_session)


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def agents(db_session):
    rows = [
        AgentDB(id=AGENT_ID, full_name="Thandi Mokoena", role="agent"),
        AgentDB(id=OTHER_AGENT_ID, full_name="Pieter van Wyk", role="agent"),
    ]
    db_session.add_all(rows)
    db_session.commit()
    return rows


@pytest.fixture
def make_accounts(db_session):
    """Insert accounts given as {id: acc_number} (plus optional extra columns)."""
    def _make(numbers, **columns):
        rows = [AccountDB(id=account_id, acc_number=acc_number, **columns)
                for account_id, acc_number in numbers.items()]
        db_session.add_all(rows)
        db_session.commit()
        return rows
    return _make
