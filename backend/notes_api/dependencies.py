"""
Notes API — Request-Scoped Dependencies
========================================

What:  FastAPI dependency chain that hands each request its own service.
How:   get_db_session → get_note_repository → get_note_service.

Nothing here is a process-wide singleton: every request gets a fresh
session, repository and service. Tests override get_db_session (or any
later link) through `app.dependency_overrides`.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from notes_api.database import get_db_session
from notes_api.repositories.note import NoteRepository
from notes_api.services.note_service import NoteService


def get_note_repository(session: AsyncSession = Depends(get_db_session)) -> NoteRepository:
    return NoteRepository(session)


def get_note_service(repository: NoteRepository = Depends(get_note_repository)) -> NoteService:
    return NoteService(repository)
