"""
StudyNotes — Sidebar Note List
===============================

What:  View model of the note list: all notes newest-first, or the results of
       a search, plus the summary line each entry shows.
How:   Loads from the API client, then keeps itself current through explicit
       apply_created / apply_updated / apply_deleted calls made by whoever
       performed the mutation (the editor session after a save, this view
       after a create or delete). Nothing is refetched implicitly.
Who:   The editor shell; EditorSession pushes saved notes into it.
"""

import logging
from datetime import datetime
from typing import Callable, List, NamedTuple, Optional

from studynotes.editor.client import NotesClient
from studynotes.editor.display import block_preview, count_blocks, format_time_ago, generate_block_id
from studynotes.exceptions import StudyNotesError
from studynotes.schemas.block import Block
from studynotes.schemas.note import NoteResponse

logger = logging.getLogger(__name__)

# (title, description) of a transient user-facing notification
Notifier = Callable[[str, str], None]

NEW_NOTE_TITLE = "Untitled Note"


def log_notification(title: str, description: str) -> None:
    logger.info("%s: %s", title, description)


def matches_query(note: NoteResponse, query: str) -> bool:
    """Same rule as the search endpoint: casefolded title or any block's content."""
    needle = query.casefold()
    if needle in note.title.casefold():
        return True
    return any(needle in block.content.casefold() for block in note.blocks)


class NoteSummary(NamedTuple):
    id: int
    title: str
    preview: str
    block_count: int
    updated: str


def summarize(note: NoteResponse, now: Optional[datetime] = None) -> NoteSummary:
    return NoteSummary(
        id=note.id,
        title=note.title,
        preview=block_preview(note.blocks),
        block_count=count_blocks(note.blocks),
        updated=format_time_ago(note.updated_at, now),
    )


class NoteListView:
    """
    Attributes:
        notes:        Notes in display order
        query:        Active search text ("" lists every note)
        selected_id:  The note open in the editor, if any
    """

    def __init__(self, client: NotesClient, notify: Optional[Notifier] = None) -> None:
        self.client = client
        self.notify = notify or log_notification
        self.notes: List[NoteResponse] = []
        self.query = ""
        self.selected_id: Optional[int] = None

    @property
    def empty_message(self) -> str:
        return "No notes found" if self.query else "No notes yet"

    # ── Loading ───────────────────────────────────────────────────────────

    async def refresh(self) -> List[NoteResponse]:
        """Reload from the API; on failure the current list is kept."""
        try:
            if self.query:
                self.notes = await self.client.search_notes(self.query)
            else:
                self.notes = await self.client.list_notes()
        except StudyNotesError as e:
            logger.error("Failed to load notes: %s", e.message)
            self.notify("Error", "Failed to load notes.")
        return self.notes

    async def search(self, query: str) -> List[NoteResponse]:
        self.query = query
        return await self.refresh()

    # ── Explicit updates ──────────────────────────────────────────────────

    def _index_of(self, note_id: int) -> int:
        for index, note in enumerate(self.notes):
            if note.id == note_id:
                return index
        return -1

    def _shows(self, note: NoteResponse) -> bool:
        return not self.query or matches_query(note, self.query)

    def apply_created(self, note: NoteResponse) -> None:
        if self._shows(note):
            self.notes.insert(0, note)

    def apply_updated(self, note: NoteResponse) -> None:
        """
        Replace the stored copy and move it to the top (newest-updated first).

        While a search is active the note is kept only if it still matches,
        so the list stays what the search endpoint would return.
        """
        index = self._index_of(note.id)
        if index >= 0:
            del self.notes[index]
        if self._shows(note):
            self.notes.insert(0, note)

    def apply_deleted(self, note_id: int) -> None:
        index = self._index_of(note_id)
        if index >= 0:
            del self.notes[index]
        if self.selected_id == note_id:
            self.selected_id = None

    # ── Mutations ─────────────────────────────────────────────────────────

    async def create_note(self) -> Optional[NoteResponse]:
        """Create an "Untitled Note" holding one empty paragraph and select it."""
        first = Block(id=generate_block_id(), type="paragraph", content="")
        try:
            note = await self.client.create_note(NEW_NOTE_TITLE, [first])
        except StudyNotesError as e:
            logger.error("Failed to create note: %s", e.message)
            self.notify("Error", "Failed to create new note.")
            return None

        self.apply_created(note)
        self.selected_id = note.id
        self.notify("Note created", "New note has been created successfully.")
        return note

    async def delete_note(self, note_id: int) -> bool:
        try:
            await self.client.delete_note(note_id)
        except StudyNotesError as e:
            logger.error("Failed to delete note %s: %s", note_id, e.message)
            self.notify("Error", "Failed to delete note.")
            return False
        self.apply_deleted(note_id)
        return True

    def summaries(self, now: Optional[datetime] = None) -> List[NoteSummary]:
        return [summarize(note, now) for note in self.notes]
