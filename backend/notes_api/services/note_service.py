"""
Notes API — Note Service (Resource Handler)
============================================

What:  Business logic for the note lifecycle: create, get, list, update, delete.
Why:   Encapsulates the lifecycle rules in one place, independent of HTTP.
How:   Validates payloads, drives the NoteRepository, and translates missing
       rows and store failures into NotFoundError / PersistenceError.
Who:   Built per request by the get_note_service dependency; called by the
       notes router.

Lifecycle Rules:
    - Validation runs before any repository call, so a bad payload never
      produces a partial write.
    - A new note gets a fresh id and one timestamp used for both createdAt
      and updatedAt.
    - A patch touches only the fields present in the request and refreshes
      updatedAt. The refresh never moves backwards, so updatedAt ≥ createdAt
      holds even if the wall clock is adjusted.
    - Deleting a missing note is NotFoundError, not a silent success.

Error Handling Strategy:
    SQLAlchemy and socket errors are wrapped in PersistenceError with the
    original error type in `context` (logged, never returned to clients).
    Validation and not-found errors propagate unchanged.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Iterator, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from notes_api.config import settings
from notes_api.exceptions import NotFoundError, PersistenceError
from notes_api.models.note import Note, new_note_id
from notes_api.repositories.note import NoteRepository
from notes_api.schemas.note import NoteResponse
from notes_api.validation import validate_create, validate_patch

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@contextmanager
def store_errors(action: str, **context: Any) -> Iterator[None]:
    """Re-raise driver failures inside the block as PersistenceError."""
    try:
        yield
    except (SQLAlchemyError, OSError, OverflowError) as e:
        logger.error("Database error while trying to %s: %s", action, e, exc_info=True)
        raise PersistenceError(
            message=f"Could not {action}. Please try again later.",
            context={**context, "error_type": type(e).__name__},
        ) from e


@dataclass
class NoteListPage:
    """A page of notes plus the total row count, for the X-Total-Count header."""

    notes: List[NoteResponse]
    total_count: int
    page: int
    limit: int


class NoteService:
    """
    Note lifecycle operations over an injected repository.

    Args:
        repository: Persistence client bound to the current request's session.
        clock: Source of "now"; tests pass a fake to control timestamps.
        default_page_size / max_page_size: Pagination bounds, from settings
            unless given.
    """

    def __init__(
        self,
        repository: NoteRepository,
        clock: Callable[[], datetime] = utc_now,
        default_page_size: Optional[int] = None,
        max_page_size: Optional[int] = None,
    ):
        self.repository = repository
        self.clock = clock
        self.default_page_size = default_page_size or settings.notes_default_page_size
        self.max_page_size = max_page_size or settings.notes_max_page_size

    async def create_note(self, payload: Any) -> NoteResponse:
        """
        Validate and insert a new note.

        Raises:
            ValidationError: title missing/blank or a field of the wrong type (→ 400)
            PersistenceError: insert failed (→ 500)
        """
        data = validate_create(payload)
        now = self.clock()
        note = Note(
            id=new_note_id(),
            title=data.title,
            content=data.content,
            category=data.category,
            published=data.published,
            created_at=now,
            updated_at=now,
        )
        with store_errors("create the note"):
            note = await self.repository.insert(note)
        logger.info("Note created: %s", note.id)
        return NoteResponse.model_validate(note)

    async def get_note(self, note_id: str) -> NoteResponse:
        """
        Fetch one note.

        Raises:
            NotFoundError: no note has this id (→ 404)
            PersistenceError: query failed (→ 500)
        """
        with store_errors("retrieve the note", note_id=note_id):
            note = await self.repository.find(note_id)
        if note is None:
            raise NotFoundError(resource="note", resource_id=note_id)
        return NoteResponse.model_validate(note)

    async def list_notes(self, page: Optional[int] = None, limit: Optional[int] = None) -> NoteListPage:
        """
        Return one page of notes ordered by createdAt ascending, then id.

        Out-of-range arguments are clamped rather than rejected: page to at
        least 1, limit to 1..max_page_size. Listing only fails when the store
        does.
        """
        page = max(1 if page is None else page, 1)
        if limit is None:
            limit = self.default_page_size
        limit = min(max(limit, 1), self.max_page_size)
        offset = (page - 1) * limit

        with store_errors("retrieve notes", page=page, limit=limit):
            total_count = await self.repository.count()
            # A page past the last row is empty; skipping the query also keeps
            # huge offsets away from the driver's 64-bit integer binding
            if offset >= total_count:
                notes = []
            else:
                notes = await self.repository.page(offset=offset, limit=limit)

        return NoteListPage(
            notes=[NoteResponse.model_validate(n) for n in notes],
            total_count=total_count,
            page=page,
            limit=limit,
        )

    async def update_note(self, note_id: str, payload: Any) -> NoteResponse:
        """
        Apply a partial update.

        Only fields present in `payload` change; updatedAt is refreshed even
        for an empty patch.

        Raises:
            ValidationError: blank title, null for a non-nullable field,
                or a field of the wrong type (→ 400), checked before lookup
            NotFoundError: no note has this id (→ 404)
            PersistenceError: query or commit failed (→ 500)
        """
        changes = validate_patch(payload).changes()

        with store_errors("update the note", note_id=note_id):
            note = await self.repository.find(note_id)
            if note is None:
                raise NotFoundError(resource="note", resource_id=note_id)

            for field, value in changes.items():
                setattr(note, field, value)
            note.updated_at = max(self.clock(), note.updated_at)

            note = await self.repository.save(note)

        logger.info("Note updated: %s (%s)", note_id, ", ".join(sorted(changes)) or "touch")
        return NoteResponse.model_validate(note)

    async def delete_note(self, note_id: str) -> None:
        """
        Hard-delete a note.

        Raises:
            NotFoundError: no note has this id, including a second delete (→ 404)
            PersistenceError: delete failed (→ 500)
        """
        with store_errors("delete the note", note_id=note_id):
            deleted = await self.repository.delete(note_id)
        if not deleted:
            raise NotFoundError(resource="note", resource_id=note_id)
        logger.info("Note deleted: %s", note_id)
