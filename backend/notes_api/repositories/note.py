"""
Notes API — Note Repository (Persistence Client)
=================================================

What:  CRUD operations on the `notes` table keyed by note id.
Why:   Keeps SQLAlchemy out of the service layer; the service only sees
       "insert / find / save / delete / page / count".
How:   Wraps one AsyncSession (one per request). Each write method commits,
       so one service call is one transaction.

The repository reports absence with None / False and lets driver errors
propagate; NoteService translates both into the API's exception types.
"""

from typing import List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from notes_api.models.note import Note


class NoteRepository:
    """Persistence client for notes, bound to a single session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def insert(self, note: Note) -> Note:
        self.session.add(note)
        await self.session.commit()
        return note

    async def find(self, note_id: str) -> Optional[Note]:
        result = await self.session.execute(select(Note).where(Note.id == note_id))
        return result.scalar_one_or_none()

    async def save(self, note: Note) -> Note:
        """Commit pending attribute changes on a note loaded by find()."""
        await self.session.commit()
        return note

    async def delete(self, note_id: str) -> bool:
        """Hard-delete by id. Returns False when no row matched."""
        result = await self.session.execute(delete(Note).where(Note.id == note_id))
        await self.session.commit()
        return result.rowcount > 0

    async def page(self, offset: int, limit: int) -> List[Note]:
        """
        One page of notes, oldest first.

        Ties on created_at are broken by id so the order is total and
        pages never overlap or skip rows between identical timestamps.
        """
        result = await self.session.execute(
            select(Note)
            .order_by(Note.created_at.asc(), Note.id.asc())
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.session.execute(select(func.count(Note.id)))
        return result.scalar() or 0
