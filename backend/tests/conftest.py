"""
Shared fixtures

Every test gets its own SQLite file under tmp_path, so tests never share
rows. Service tests use ``database``/``session`` directly; API tests use
``client``, which runs the app lifespan (table creation) inside TestClient.
"""

import sqlite3
import uuid

import pytest
from fastapi.testclient import TestClient

from jobboard.config import Settings
from jobboard.database import Database
from jobboard.enums import ExperienceLevel, JobType, Role
from jobboard.main import create_app
from jobboard.models import Profile
from jobboard.schemas import JobCreate
from jobboard.services.identity import Actor
from jobboard.services.jobs import JobService
from jobboard.services.notifications import NotificationSink


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "test.db"


@pytest.fixture
def settings(db_path):
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{db_path}",
        jwt_secret="test-secret",
        bcrypt_rounds=4,
        redis_url="",
        enable_metrics=False,
        log_level="WARNING",
    )


@pytest.fixture
async def database(settings):
    db = Database.from_settings(settings)
    await db.init()
    yield db
    await db.dispose()


@pytest.fixture
async def session(database):
    async with database.session_factory() as session:
        yield session


@pytest.fixture
def notifications(database):
    return NotificationSink(session_factory=database.session_factory)


@pytest.fixture
def make_actor(session):
    """Create a profile row and return the matching Actor."""

    async def _make(role: Role = Role.JOB_SEEKER, full_name: str = "Test User", **fields) -> Actor:
        user_id = str(uuid.uuid4())
        email = fields.pop("email", f"{user_id[:8]}@example.com")
        session.add(
            Profile(id=user_id, email=email, full_name=full_name, role=Role(role).value, **fields)
        )
        await session.commit()
        return Actor(id=user_id, email=email, role=Role(role))

    return _make


@pytest.fixture
def job_data():
    def _data(**overrides) -> JobCreate:
        data = {
            "title": "Backend Engineer",
            "description": "Build and run Python APIs",
            "company_name": "Acme Inc",
            "location": "Remote",
            "job_type": JobType.FULL_TIME,
            "experience_level": ExperienceLevel.MID,
            "salary_min": 90000,
            "salary_max": 120000,
            "required_skills": ["Python", "PostgreSQL"],
        }
        data.update(overrides)
        return JobCreate(**data)

    return _data


@pytest.fixture
def make_job(session, job_data):
    async def _make(owner: Actor, **overrides):
        return await JobService(session).create(owner, job_data(**overrides))

    return _make


# =============================================================================
# API fixtures
# =============================================================================


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def signup(client):
    """Register through the API; returns (user_id, headers)."""

    def _signup(role: str = "job_seeker", email: str = None, password: str = "secret123"):
        email = email or f"{uuid.uuid4().hex[:8]}@example.com"
        response = client.post(
            "/api/auth/signup",
            json={"email": email, "password": password, "fullName": "Test User", "role": role},
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return body["user"]["id"], auth_header(body["session"]["access_token"])

    return _signup


@pytest.fixture
def make_admin(signup, db_path):
    """Sign up a recruiter and promote it directly in the database."""

    def _make_admin():
        user_id, headers = signup(role="recruiter")
        conn = sqlite3.connect(db_path)
        try:
            conn.execute("UPDATE profiles SET role = 'admin' WHERE id = ?", (user_id,))
            conn.commit()
        finally:
            conn.close()
        return user_id, headers

    return _make_admin
