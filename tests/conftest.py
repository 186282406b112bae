"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Record stores (in-memory, and SQL over in-memory SQLite)
- FastAPI test client wired to the in-memory store
- A notification trigger that records calls instead of queueing Celery tasks
- JWT auth headers per actor
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base
from app.core.deps import get_store
from app.core.security import create_access_token
from app.core.store import InMemoryRecordStore, SqlRecordStore
from app.models.record import StoredRecord  # noqa: F401  (registers the table)
from app.models.user import Actor, UserRole
from app.services import jobs as job_service
from app.services import lifecycle
from app.services.notifications import NotificationTrigger, get_notification_trigger
from main import app


SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


CANDIDATE = Actor(id="cand-1", role=UserRole.CANDIDATE)
OTHER_CANDIDATE = Actor(id="cand-2", role=UserRole.CANDIDATE)
RECRUITER = Actor(id="rec-1", role=UserRole.RECRUITER)
OTHER_RECRUITER = Actor(id="rec-2", role=UserRole.RECRUITER)
ADMIN = Actor(id="admin-1", role=UserRole.ADMIN)


class RecordingNotificationTrigger(NotificationTrigger):
    """Keeps every status change and new message it is told about"""

    def __init__(self):
        self.calls = []
        self.messages = []

    def status_changed(self, application, old_status, new_status, changed_by):
        self.calls.append((application["id"], old_status, new_status, changed_by))

    def message_received(self, application, message, recipient_id):
        self.messages.append((application["id"], message["id"], recipient_id))


@pytest.fixture
def db_session():
    """
    Fresh SQLite database per test; tables dropped afterwards.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture(params=["memory", "sql"])
def any_store(request):
    """Runs the test once per record store backend."""
    if request.param == "memory":
        yield InMemoryRecordStore()
        return

    db_session = request.getfixturevalue("db_session")
    yield SqlRecordStore(db_session)


@pytest.fixture
def notifier():
    return RecordingNotificationTrigger()


@pytest.fixture
def client(store, notifier):
    """
    FastAPI test client using the in-memory store and the recording notifier.
    """
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_notification_trigger] = lambda: notifier

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def auth_headers(actor: Actor) -> dict:
    token = create_access_token({"sub": actor.id, "role": actor.role.value})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def sample_job_data():
    """Sample job data for testing"""
    return {
        "title": "Backend Python Developer",
        "company": "Acme",
        "location": "Lyon",
        "type": "FULL_TIME",
        "description": "FastAPI, PostgreSQL and Celery on a small product team.",
        "salary": "45-55k",
        "requirements": ["Python", "SQL"],
        "remote": True,
    }


@pytest.fixture
def sample_application_data():
    return {
        "title": "Backend Python Developer",
        "company": "Acme",
        "location": "Lyon",
        "contractType": "CDI",
        "notes": "Referred by a former colleague",
    }


@pytest.fixture
def job(store, sample_job_data):
    """A job owned by RECRUITER"""
    return job_service.create_job(store, sample_job_data, RECRUITER)


@pytest.fixture
def application(store, job, sample_application_data):
    """A TO_APPLY application by CANDIDATE on RECRUITER's job"""
    return lifecycle.create_application(store, {**sample_application_data, "jobId": job.id}, CANDIDATE)
