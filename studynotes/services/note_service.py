"""
StudyNotes — Note Service (Persistence Gateway)
================================================

What:  Create/read/update/delete/search operations over notes.
How:   Async SQLAlchemy queries against the `notes` table; results are
       returned as NoteResponse schemas so routes never touch ORM objects.
Who:   Called by route handlers; calls the database layer.

Operations:
    list_notes()          → all notes, most recently updated first
    get_note(id)          → one note, or NotFoundError
    create_note(data)     → assigns id and timestamps
    update_note(id, data) → merges provided fields, refreshes updated_at
    delete_note(id)       → removes the row, or NotFoundError
    search_notes(query)   → case-insensitive substring match on title or block content

Concurrency:
    No optimistic locking. Two concurrent updates to the same note both
    succeed and the later commit wins.

NoteService is stateless; it receives the session for each call. Writes are
flushed here and committed by get_db_session once the request succeeds.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from studynotes.exceptions import DatabaseError, NotFoundError
from studynotes.models.note import Note
from studynotes.schemas.note import NoteCreate, NoteResponse, NoteUpdate

logger = logging.getLogger(__name__)


def _matches(note: Note, needle: str) -> bool:
    """Case-insensitive substring test against the title and every block's content."""
    if needle in (note.title or "").casefold():
        return True
    for block in note.blocks or []:
        content = block.get("content") if isinstance(block, dict) else None
        if isinstance(content, str) and needle in content.casefold():
            return True
    return False


class NoteService:
    """
    Business logic layer for note persistence.

    Error Handling Strategy:
        NotFoundError propagates as-is. Any other failure is logged with its
        original type and wrapped in DatabaseError, which the API turns into
        a generic 500 response.
    """

    async def _load(self, db: AsyncSession, note_id: int) -> Note:
        result = await db.execute(select(Note).where(Note.id == note_id))
        note = result.scalar_one_or_none()
        if note is None:
            raise NotFoundError(resource="note", resource_id=str(note_id))
        return note

    async def _ordered(self, db: AsyncSession) -> List[Note]:
        result = await db.execute(
            select(Note).order_by(desc(Note.updated_at), desc(Note.id))
        )
        return list(result.scalars().all())

    async def list_notes(self, db: AsyncSession) -> List[NoteResponse]:
        """
        List every note, most recently updated first.

        Query plan:
            SELECT * FROM notes ORDER BY updated_at DESC, id DESC
            → idx_notes_updated_at serves the primary sort key

        Raises:
            DatabaseError: Query execution failed (→ 500)
        """
        try:
            notes = await self._ordered(db)
            return [NoteResponse.model_validate(note) for note in notes]
        except Exception as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve notes. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def get_note(self, db: AsyncSession, note_id: int) -> NoteResponse:
        """
        Retrieve a single note by ID.

        Raises:
            NotFoundError: Note with given ID does not exist (→ 404)
            DatabaseError: Query execution failed (→ 500)
        """
        try:
            note = await self._load(db, note_id)
            return NoteResponse.model_validate(note)
        except NotFoundError:
            raise
        except Exception as e:
            logger.error("Database error fetching note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the note. Please try again.",
                context={"note_id": note_id},
            )

    async def create_note(self, db: AsyncSession, data: NoteCreate) -> NoteResponse:
        """
        Insert a new note with its initial block list.

        The id is assigned by the database on flush; both timestamps are set
        to the same instant.

        Raises:
            DatabaseError: Insert failed (→ 500)
        """
        try:
            now = datetime.now(timezone.utc)
            note = Note(
                title=data.title,
                blocks=[block.to_wire() for block in data.blocks],
                created_at=now,
                updated_at=now,
            )
            db.add(note)
            await db.flush()
            logger.info("Note %s created with %d blocks", note.id, len(data.blocks))
            return NoteResponse.model_validate(note)
        except Exception as e:
            logger.error("Database error creating note: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the note. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def update_note(
        self, db: AsyncSession, note_id: int, data: NoteUpdate
    ) -> NoteResponse:
        """
        Apply a partial update: title and/or a full replacement block list.

        Fields absent from the request body are left untouched. updated_at is
        refreshed even when the body is empty.

        Raises:
            NotFoundError: Note with given ID does not exist (→ 404)
            DatabaseError: Update failed (→ 500)
        """
        try:
            note = await self._load(db, note_id)
            changes: Dict[str, Any] = {}
            if data.title is not None:
                changes["title"] = data.title
            if data.blocks is not None:
                changes["blocks"] = [block.to_wire() for block in data.blocks]

            for field, value in changes.items():
                setattr(note, field, value)
            note.updated_at = datetime.now(timezone.utc)

            await db.flush()
            logger.info("Note %s updated (%s)", note_id, ", ".join(sorted(changes)) or "touch")
            return NoteResponse.model_validate(note)
        except NotFoundError:
            raise
        except Exception as e:
            logger.error("Database error updating note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the note. Please try again.",
                context={"note_id": note_id},
            )

    async def delete_note(self, db: AsyncSession, note_id: int) -> None:
        """
        Delete a note by ID.

        Raises:
            NotFoundError: Note with given ID does not exist (→ 404)
            DatabaseError: Delete failed (→ 500)
        """
        try:
            note = await self._load(db, note_id)
            await db.delete(note)
            await db.flush()
            logger.info("Note %s deleted", note_id)
        except NotFoundError:
            raise
        except Exception as e:
            logger.error("Database error deleting note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the note. Please try again.",
                context={"note_id": note_id},
            )

    async def search_notes(self, db: AsyncSession, query: str) -> List[NoteResponse]:
        """
        Notes whose title or any block content contains `query`, ignoring case.

        Matching runs in Python over the ordered note list: block content lives
        inside the JSON column, and SQL LIKE on serialized JSON would also
        match ids, types and escaped characters.

        Raises:
            DatabaseError: Query execution failed (→ 500)
        """
        needle = query.casefold()
        try:
            notes = await self._ordered(db)
            return [
                NoteResponse.model_validate(note)
                for note in notes
                if _matches(note, needle)
            ]
        except Exception as e:
            logger.error("Database error searching notes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not search notes. Please try again.",
                context={"error_type": type(e).__name__},
            )


note_service = NoteService()
