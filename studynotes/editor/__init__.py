"""
StudyNotes — Editor Layer
==========================

What:  Everything the note editor does outside of rendering: the block
       document and its structural edits, keyboard transitions, the command
       menu catalogue, debounced autosave, the notes API client, the sidebar
       list and media file reading.

Module Inventory:
    - state:     EditorState, the block document of the open note
    - keyboard:  KeyEvent and handle_key (Enter, Backspace, "/", Escape)
    - commands:  COMMAND_MENU and filter_commands
    - autosave:  AutosaveScheduler (debounced save)
    - client:    NotesClient over the REST API (httpx)
    - session:   EditorSession, binding state + autosave + client
    - sidebar:   NoteListView and NoteSummary
    - media:     read_media_file for image/video/audio blocks
    - display:   render-time helpers (numbering, previews, relative times)
"""

from studynotes.editor.autosave import AutosaveScheduler
from studynotes.editor.client import NotesClient
from studynotes.editor.commands import COMMAND_MENU, filter_commands
from studynotes.editor.keyboard import KeyEvent, handle_key
from studynotes.editor.media import read_media_file
from studynotes.editor.session import EditorSession
from studynotes.editor.sidebar import NoteListView, NoteSummary
from studynotes.editor.state import EditorState

__all__ = [
    "AutosaveScheduler",
    "COMMAND_MENU",
    "EditorSession",
    "EditorState",
    "KeyEvent",
    "NoteListView",
    "NoteSummary",
    "NotesClient",
    "filter_commands",
    "handle_key",
    "read_media_file",
]
