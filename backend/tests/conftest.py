"""
Notes API — Test Configuration (conftest.py)
=============================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test that touches the store gets its own SQLite file under
       tmp_path, created from the ORM metadata. The FastAPI app is built
       fresh per test and pointed at that file through dependency_overrides.

Fixture Hierarchy (all function-scoped):
    db_engine ─┬── db_session ── note_service
               └── app ── test_client
    smtp_settings: Settings with a fake relay for mailer tests
"""

import os
from datetime import datetime, timedelta, timezone

# Must run before any notes_api import reads the environment
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from notes_api.config import Settings
from notes_api.database import Base, build_engine, get_db_session
from notes_api.main import create_app
from notes_api.models.note import Note  # noqa: F401  (registers the table)
from notes_api.repositories.note import NoteRepository
from notes_api.services.note_service import NoteService


class StepClock:
    """Deterministic clock: every call returns the previous value plus `step`."""

    def __init__(self, start: datetime = None, step: timedelta = timedelta(seconds=1)):
        self.now = start or datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        value = self.now
        self.now = self.now + self.step
        return value


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """Engine on a throwaway SQLite file with the notes table created."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'notes.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def note_service(db_session, clock):
    """NoteService over a real repository with a controllable clock."""
    return NoteService(NoteRepository(db_session), clock=clock)


@pytest.fixture
def app(session_factory):
    """
    A fresh FastAPI app whose session dependency points at the test database.

    Tests that need to inject failures add further entries to
    `app.dependency_overrides` (e.g. for get_note_repository).
    """
    application = create_app()

    async def override_db_session():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db_session] = override_db_session
    yield application
    application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient routed straight into the ASGI app (no server).

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/api/healthchecker")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def smtp_settings():
    """Settings for a fake STARTTLS relay with credentials."""
    return Settings(
        smtp_host="smtp.example.com",
        smtp_port=587,
        smtp_user="mailer",
        smtp_pass="s3cret",
        smtp_from="noreply@example.com",
        smtp_from_name="Notes API",
    )
