"""Pytest fixtures for the help-desk tests.

Uses a throwaway SQLite database and FastAPI TestClient. Overrides the
`get_db` dependency so tests are isolated from any real DB file.
"""

import os
import uuid
from datetime import datetime, timezone
from decimal import Decimal

TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///./test_helpdesk.db")
# Point the app's own engine at the test database before anything imports it
os.environ["DATABASE_URL"] = TEST_DATABASE_URL

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

import helpdesk.database as database
import helpdesk.tickets as tickets_module
from helpdesk.auth import get_password_hash
from helpdesk.main import app
from helpdesk.models import Base, ServiceModel, TechnicianAvailabilityModel, UserModel

# Create test engine and session factory
engine = database.make_engine(TEST_DATABASE_URL)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)

CURRENT_SLOT = "10:00"


@pytest.fixture(autouse=True)
def setup_database():
    """Create tables before each test and drop them after to ensure isolation."""
    Base.metadata.create_all(bind=engine)
    try:
        yield
    finally:
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def fixed_slot(monkeypatch):
    """Pin the ticket module's notion of "now" to the 10:00 slot."""
    monkeypatch.setattr(tickets_module, "current_slot", lambda now=None: CURRENT_SLOT)
    return CURRENT_SLOT


@pytest.fixture()
def db_session():
    """Provide a SQLAlchemy session for direct DB access in tests."""
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def make_session():
    """Open extra sessions, e.g. to act as a second concurrent request."""
    sessions = []

    def _make_session():
        session = TestingSessionLocal()
        sessions.append(session)
        return session

    yield _make_session
    for session in sessions:
        session.close()


# Override get_db dependency in the app
def _override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[database.get_db] = _override_get_db

# Many logins happen across tests; keep the global rate limiter out of the way.
app.state.limiter.enabled = False


@pytest.fixture()
def client():
    """FastAPI test client using the app with overridden dependencies."""
    with TestClient(app) as c:
        yield c


# Helper: create a user directly in DB for tests
@pytest.fixture()
def create_user(db_session):
    def _create_user(role: str = "admin", email: str | None = None, password: str = "secret123", name: str | None = None, slots=()):
        email = email or f"{role}_{uuid.uuid4().hex[:8]}@example.com"
        user = UserModel(
            id=str(uuid.uuid4()),
            name=name or f"{role.title()} User",
            email=email,
            password_hash=get_password_hash(password),
            role=role,
            created_at=datetime.now(timezone.utc),
        )
        user.availabilities = [TechnicianAvailabilityModel(user_id=user.id, time=s) for s in slots]
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _create_user


@pytest.fixture()
def auth_headers(client, create_user):
    """Return a helper that creates a user, logs in and returns (headers, user)."""
    def _auth_headers(role: str = "admin", email: str | None = None, password: str = "secret123", **kwargs):
        user = create_user(role=role, email=email, password=password, **kwargs)
        resp = client.post("/users/login", json={"email": user.email, "password": password})
        assert resp.status_code == 200
        token = resp.json()["token"]
        return {"Authorization": f"Bearer {token}"}, user

    return _auth_headers


@pytest.fixture()
def create_service(db_session):
    def _create_service(title: str = "Service", price: str = "100.00", active: bool = True):
        service = ServiceModel(id=str(uuid.uuid4()), title=title, price=Decimal(price), active=active)
        db_session.add(service)
        db_session.commit()
        db_session.refresh(service)
        return service

    return _create_service
