"""
Pytest fixtures for testing
"""
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from budgetbot.infrastructure.db.session import Base
import budgetbot.infrastructure.db.models  # noqa: F401  (registers tables)


@pytest.fixture
def db_engine():
    """In-memory SQLite shared by every thread (TestClient runs sync routes in a pool)"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine) -> Session:
    """Create database session for tests"""
    SessionLocal = sessionmaker(bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def sample_account_id():
    """Sample account ID for tests"""
    return 1


@pytest.fixture
def tz():
    return ZoneInfo("Asia/Kolkata")


@pytest.fixture
def client(db_session):
    """TestClient whose routes use the test session"""
    from budgetbot.main import app
    from budgetbot.api.deps import get_db

    app.dependency_overrides[get_db] = lambda: db_session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def authenticated_client(client):
    """Client with a logged-in session"""
    response = client.post(
        "/api/v1/auth/signup",
        json={"name": "Asha", "email": "asha@example.com", "password": "secret123"},
    )
    assert response.status_code == 201
    return client
