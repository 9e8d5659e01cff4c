"""
StudyNotes — Editor Session
============================

What:  One open editor: the EditorState of the selected note, its autosave
       scheduler and the API client that loads and saves it.
How:   Every state change is reported to the AutosaveScheduler; when the
       quiet period passes, save() PATCHes the title and the whole block
       list. Successful saves are pushed into the sidebar view model.
Who:   The editor shell creates one session per editor pane.

Lifecycle:
    session = EditorSession(client, sidebar)
    await session.open(note_id)
    ... edits through session.state / handle_key ...
    await session.close()        # pending autosave is cancelled, never fired

Save failures are logged and reported through `notify`; the state stays
dirty so the next autosave cycle tries again. save() never raises.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from studynotes.editor.autosave import AutosaveScheduler
from studynotes.editor.client import NotesClient
from studynotes.editor.media import read_media_file
from studynotes.editor.sidebar import NoteListView, Notifier, log_notification
from studynotes.editor.state import EditorState
from studynotes.exceptions import StudyNotesError, ValidationError
from studynotes.schemas.block import Block
from studynotes.schemas.note import NoteResponse

logger = logging.getLogger(__name__)


class EditorSession:

    def __init__(
        self,
        client: NotesClient,
        sidebar: Optional[NoteListView] = None,
        notify: Optional[Notifier] = None,
        delay_ms: Optional[int] = None,
    ) -> None:
        self.client = client
        self.sidebar = sidebar
        self.notify = notify or log_notification
        self.state = EditorState()
        self.autosave = AutosaveScheduler(self.save, delay_ms)
        self._unsubscribe = self.state.subscribe(self._on_change)
        self._saving = False

    def _on_change(self, state: EditorState) -> None:
        self.autosave.notify(state.watched_values())

    @property
    def is_saving(self) -> bool:
        return self._saving

    async def open(self, note_id: int) -> Optional[NoteResponse]:
        """Load a note into the editor. Returns None (and notifies) on failure."""
        try:
            note = await self.client.get_note(note_id)
        except StudyNotesError as e:
            logger.error("Failed to load note %s: %s", note_id, e.message)
            self.notify("Error", "Failed to load note")
            return None

        self.state.load(note)
        if self.sidebar is not None:
            self.sidebar.selected_id = note.id
        return note

    async def save(self) -> Optional[NoteResponse]:
        """
        Persist the current title and blocks.

        Skipped when no note is open, a save is already running, nothing
        meaningful has been written, or nothing changed since the last load
        or save. Returns the saved note, or None when skipped or failed.
        """
        state = self.state
        if state.note_id is None:
            return None
        if self._saving:
            logger.debug("Save of note %s skipped: previous save in flight", state.note_id)
            return None
        if not state.has_meaningful_content() or not state.is_dirty:
            return None

        snapshot = state.watched_values()
        note_id, title, blocks = snapshot
        self._saving = True
        try:
            note = await self.client.update_note(note_id, title=title, blocks=blocks)
        except Exception as e:
            logger.error("Failed to save note %s: %s", note_id, str(e))
            self.notify("Error", "Failed to save note")
            return None
        finally:
            self._saving = False

        # Edits made while the request was in flight still need saving
        if state.watched_values() == snapshot:
            state.mark_clean()
        elif state.is_dirty and not self.autosave.pending:
            # Their own timer fired during this save and was skipped
            self.autosave.reschedule()
        if self.sidebar is not None:
            self.sidebar.apply_updated(note)
        logger.debug("Note %s saved (%d blocks)", note_id, len(blocks))
        return note

    async def upload_media(
        self,
        block_id: str,
        path: Union[str, Path],
        mime_type: Optional[str] = None,
    ) -> Optional[Block]:
        """
        Embed a local file in media block `block_id` and open a paragraph
        after it. Returns that paragraph, or None when the file was rejected.
        """
        block = self.state.get_block(block_id)
        if block is None:
            return None
        try:
            content, metadata = await read_media_file(path, block.type, mime_type)
        except ValidationError as e:
            self.notify("Upload failed", e.message)
            return None
        return self.state.attach_media(block_id, content, metadata)

    async def close(self) -> None:
        """Tear down: cancel any pending autosave and wait for a running one."""
        self.autosave.close()
        self._unsubscribe()
        await self.autosave.wait_idle()
