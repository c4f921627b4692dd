"""
Notes API — Note SQLAlchemy Model
==================================

What:  ORM model representing the `notes` table.
Why:   Maps Python objects to database rows for type-safe database operations.
How:   Inherits from SQLAlchemy's DeclarativeBase; Alembic reads this for migrations.
Who:   Used by NoteRepository for CRUD operations and by Alembic for schema management.

Table Design Rationale:
    - id: Opaque 32-char hex string (UUID4) generated in Python. It is never
      reassigned and, being random, never reused after a delete.
    - title / content: TEXT, no artificial length limit
    - category: Nullable; absent means "uncategorised"
    - published: Boolean flag, false unless the client says otherwise
    - created_at / updated_at: UTC, timezone-aware (see UTCDateTime)

    Composite index on (created_at, id):
        Serves the list order (oldest first, ties broken by id) so paging
        is an index range scan instead of a sort.
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from notes_api.database import Base, UTCDateTime


def new_note_id() -> str:
    """Fresh opaque identifier for a note."""
    return uuid.uuid4().hex


class Note(Base):
    """
    A user note.

    Lifecycle:
        1. Created by POST /api/notes (created_at == updated_at)
        2. Patched by PATCH /api/notes/{id} (updated_at refreshed)
        3. Hard-deleted by DELETE /api/notes/{id} (no tombstone)
    """

    __tablename__ = "notes"

    id: Mapped[str] = mapped_column(
        String(32),
        primary_key=True,
        default=new_note_id,
        comment="Opaque identifier assigned at creation",
    )

    title: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Note title, never blank",
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        server_default=text("''"),
        comment="Note body, may be empty",
    )

    category: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        default=None,
        comment="Optional free-form category",
    )

    published: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
        comment="Publication flag",
    )

    # Both timestamps are set by NoteService, not by server defaults, so the
    # values returned from a create are exactly the values stored.
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        comment="When this note was created (UTC)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        comment="When this note was last modified (UTC)",
    )

    __table_args__ = (
        Index("idx_notes_created_at_id", "created_at", "id"),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title='{self.title}', created_at='{self.created_at}')>"
