"""Pytest configuration shared across the suite."""

from __future__ import annotations

import os

# Must be set before anything imports config/database.
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("AWS_S3_BUCKET", "jobsetu-test")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from database import Base, SessionLocal, engine  # noqa: E402
from models import Admin, Candidate, Client, Job, Recruiter  # noqa: E402
from routers import deps  # noqa: E402
from utils.passwords import hash_password  # noqa: E402


class RecordingDispatcher:
    """Stands in for NotificationDispatcher; records every send_* call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple, dict]] = []

    def __getattr__(self, name):
        if not name.startswith("send_"):
            raise AttributeError(name)

        def record(*args, **kwargs):
            self.calls.append((name, args, kwargs))

        return record

    def named(self, name):
        return [c for c in self.calls if c[0] == name]


class FakeStorage:
    def __init__(self) -> None:
        self.uploads: list[dict] = []

    def upload(self, *, folder, owner_id, kind, filename, data, content_type):
        key = f"{folder}/{owner_id}/{kind}/{filename}"
        self.uploads.append({"key": key, "data": data, "content_type": content_type})
        return key

    def public_url(self, key):
        return f"https://jobsetu-test.s3.amazonaws.com/{key}"

    def presigned_url(self, key):
        return f"https://signed.example/{key}" if key else None


@pytest.fixture
def db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def api(db, dispatcher, storage):
    from main import app

    app.dependency_overrides.clear()
    app.dependency_overrides.update(
        {
            deps.get_dispatcher: lambda: dispatcher,
            deps.get_storage: lambda: storage,
        }
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def issuer():
    return deps.get_token_issuer()


@pytest.fixture
def make_client(db):
    def _make(email="hr@acme.com", password="Acme@12345", status="active", **extra):
        client = Client(
            email=email,
            password_hash=hash_password(password),
            organization_name=extra.pop("organization_name", "Acme"),
            primary_first_name="Arjun",
            primary_last_name="Mehta",
            gstin="29ABCDE1234F1Z5",
            pan_card="ABCDE1234F",
            category="IT",
            status=status,
            **extra,
        )
        db.add(client)
        db.commit()
        db.refresh(client)
        return client

    return _make


@pytest.fixture
def make_job(db):
    def _make(client, title="Backend Engineer", status="active", **extra):
        job = Job(
            client_id=client.id,
            organization_name=client.organization_name,
            job_title=title,
            status=status,
            **extra,
        )
        db.add(job)
        db.commit()
        db.refresh(job)
        return job

    return _make


@pytest.fixture
def make_candidate(db):
    def _make(email="cand@example.com", **extra):
        candidate = Candidate(email=email, **extra)
        db.add(candidate)
        db.commit()
        db.refresh(candidate)
        return candidate

    return _make


@pytest.fixture
def make_admin(db):
    def _make(username="root@jobsetu.com", password="Admin@12345", role="superadmin"):
        admin = Admin(username=username, password_hash=hash_password(password), role=role)
        db.add(admin)
        db.commit()
        db.refresh(admin)
        return admin

    return _make


@pytest.fixture
def make_recruiter(db):
    def _make(email="rec@jobsetu.com", password="Recruit@123", is_deleted=False):
        recruiter = Recruiter(
            first_name="Riya",
            last_name="Sharma",
            email=email,
            password_hash=hash_password(password),
            is_deleted=is_deleted,
        )
        db.add(recruiter)
        db.commit()
        db.refresh(recruiter)
        return recruiter

    return _make
