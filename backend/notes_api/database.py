"""
Notes API — Database Session Management
========================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
Why:   Centralizes all database connection logic in one place.
How:   Builds an async engine with connection pooling on first use and
       provides a session-per-request dependency that rolls back on error.
Who:   Used by the repository layer via FastAPI's dependency injection.
When:  Engine is created lazily on first request; sessions per request.

Transaction Strategy:
    Write operations commit inside NoteService so that a failing COMMIT is
    reported as a PersistenceError like any other store failure. The session
    dependency only guarantees cleanup: anything left uncommitted when a
    handler raises is rolled back, so there are never partial writes.

Connection Pooling Strategy (PostgreSQL):
    pool_size=20:      Persistent connections for normal load
    max_overflow=10:   Temporary connections for traffic spikes (total max = 30)
    pool_pre_ping:     Validates connections before use (catches stale connections)
    pool_recycle=3600: Recycles connections every hour
SQLite (tests, local runs) keeps SQLAlchemy's default pool.
"""

from datetime import datetime, timezone
from functools import lru_cache
from typing import AsyncGenerator, Optional

from sqlalchemy import DateTime
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator

from notes_api.config import settings


# ── Engine Configuration ──────────────────────────────────────────────────
def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Create an async engine for the given URL.

    Pool arguments are only valid for the queue pool used by network
    databases; SQLite URLs get the dialect defaults.
    """
    if database_url.startswith("sqlite"):
        return create_async_engine(database_url, echo=echo)
    return create_async_engine(
        database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
        pool_recycle=3600,
        echo=echo,
    )


@lru_cache(maxsize=1)
def get_engine() -> AsyncEngine:
    """Process-wide engine built from settings on first use."""
    return build_engine(settings.database_url, echo=settings.log_level == "DEBUG")


@lru_cache(maxsize=1)
def get_session_factory() -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: ORM attributes stay readable after COMMIT,
    # which is when the service serializes the note for the response
    return async_sessionmaker(get_engine(), class_=AsyncSession, expire_on_commit=False)


# ── Column Types ──────────────────────────────────────────────────────────
class UTCDateTime(TypeDecorator):
    """
    Timezone-aware UTC timestamp column.

    PostgreSQL returns aware datetimes for TIMESTAMP WITH TIME ZONE, SQLite
    returns naive ones. Values are normalized to UTC on the way in and
    tagged as UTC on the way out, so comparisons and JSON output behave the
    same on both backends.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            raise ValueError("UTCDateTime requires a timezone-aware datetime")
        return value.astimezone(timezone.utc)

    def process_result_value(self, value: Optional[datetime], dialect) -> Optional[datetime]:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object, which Alembic reads for migrations.
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the factory
        2. Yields it to the repository (which the service drives)
        3. On error: rolls back whatever was not committed
        4. Always: closes the session (returns connection to pool)

    Tests replace this dependency through `app.dependency_overrides`
    to point the app at a throwaway SQLite database.
    """
    async with get_session_factory()() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine() -> None:
    """
    Gracefully closes all connections in the pool.

    Called during application shutdown. Skips engine creation entirely if
    no request ever touched the database.
    """
    if get_engine.cache_info().currsize:
        await get_engine().dispose()
