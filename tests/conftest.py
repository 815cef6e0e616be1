"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown (in-memory SQLite)
- FastAPI test client
- Users of each role and their auth headers
- Job payloads and stored jobs
"""

import os
import tempfile

# Settings are read at import time; point them at throwaway resources first
os.environ.setdefault("SQLALCHEMY_DATABASE_URI", "sqlite://")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="job-board-uploads-"))

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core import storage as storage_module
from app.core.database import Base, get_db
from app.core.security import get_password_hash
from app.models.job import ExperienceLevel, Job, JobCategory, JobStatus, JobType
from app.models.user import User, UserRole
from app.services.auth import issue_token
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE clauses unless asked
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

DEFAULT_PASSWORD = "secret123"


@pytest.fixture
def db_session():
    """
    Create a fresh database session for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    """Send local uploads to a per-test directory."""
    monkeypatch.setattr(storage_module.storage, "base_dir", str(tmp_path))
    return tmp_path


@pytest.fixture
def client(db_session):
    """
    FastAPI test client with overridden database dependency.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def create_user(db_session):
    """Factory that stores a user directly in the database."""
    counter = {"n": 0}

    def _create_user(role=UserRole.JOBSEEKER, email=None, name="Test User", is_active=True, **fields):
        counter["n"] += 1
        user = User(
            name=name,
            email=email or f"{role.value}{counter['n']}@example.com",
            hashed_password=get_password_hash(DEFAULT_PASSWORD),
            role=role,
            is_active=is_active,
            **fields,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _create_user


def auth_header(user):
    return {"Authorization": f"Bearer {issue_token(user)}"}


@pytest.fixture
def jobseeker(create_user):
    return create_user(UserRole.JOBSEEKER, name="Jane Seeker")


@pytest.fixture
def employer(create_user):
    return create_user(UserRole.EMPLOYER, name="Erin Employer", company_name="Acme Corp")


@pytest.fixture
def admin(create_user):
    return create_user(UserRole.ADMIN, name="Ada Admin")


@pytest.fixture
def jobseeker_headers(jobseeker):
    return auth_header(jobseeker)


@pytest.fixture
def employer_headers(employer):
    return auth_header(employer)


@pytest.fixture
def admin_headers(admin):
    return auth_header(admin)


@pytest.fixture
def sample_job_data():
    """Sample job payload as sent by the frontend (camelCase)"""
    return {
        "title": "Senior Python Developer",
        "description": "We are looking for a Senior Python Developer with FastAPI experience.",
        "requirements": "5+ years of Python, PostgreSQL, Docker",
        "company": "Acme Corp",
        "location": "San Francisco, CA",
        "jobType": "full-time",
        "category": "Technology",
        "experienceLevel": "senior-level",
        "salary": {"min": 120000, "max": 160000, "currency": "USD"},
        "skills": ["python", "fastapi"],
        "benefits": ["health"],
        "tags": ["backend"],
        "applicationDeadline": (datetime.now(timezone.utc) + timedelta(days=30)).isoformat(),
        "isRemote": True,
    }


@pytest.fixture
def create_job(db_session):
    """Factory that stores a job directly in the database."""

    def _create_job(owner, **overrides):
        values = {
            "title": "Backend Engineer",
            "description": "Build APIs",
            "requirements": "Python",
            "company": owner.company_name or "Acme Corp",
            "location": "Remote",
            "job_type": JobType.FULL_TIME,
            "category": JobCategory.TECHNOLOGY,
            "experience_level": ExperienceLevel.MID,
            "salary_min": 80000,
            "salary_max": 100000,
            "salary_currency": "USD",
            "skills": ["python"],
            "benefits": [],
            "tags": [],
            "application_deadline": datetime.now(timezone.utc) + timedelta(days=30),
            "is_remote": False,
            "status": JobStatus.ACTIVE,
        }
        values.update(overrides)
        job = Job(posted_by_id=owner.id, **values)
        db_session.add(job)
        db_session.commit()
        db_session.refresh(job)
        return job

    return _create_job


@pytest.fixture
def resume_file():
    """Multipart tuple for a small PDF resume."""
    return ("resume.pdf", b"%PDF-1.4 test resume", "application/pdf")


@pytest.fixture
def headers_for():
    """Auth headers for an arbitrary user."""
    return auth_header
