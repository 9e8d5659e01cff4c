"""
StudyNotes — Keyboard Transitions
==================================

Maps a key press in a focused block onto EditorState operations.

    Key         Condition                                   Effect
    ─────────── ─────────────────────────────────────────── ─────────────────────────────
    /           caret at line start or after a space,       open the command menu on
                menu closed                                 this block
    Enter       list block, blank content                   convert to paragraph
    Enter       list block, content                         new block of the same type
    Enter       any other block                             new paragraph after it
    Backspace   content is exactly ""                       delete, focus the predecessor
    Escape      menu open                                   close the menu

Shift+Enter is left to the view (a line break inside the block).
"""

import logging
from typing import NamedTuple, Optional, Tuple

from studynotes.editor.state import EditorState
from studynotes.schemas.block import LIST_BLOCK_TYPES

logger = logging.getLogger(__name__)


class KeyEvent(NamedTuple):
    """
    A key press as the view reports it.

    Attributes:
        key:                 Key name ("Enter", "Backspace", "Escape", "/", ...)
        shift:               Whether Shift was held
        text_before_cursor:  Block text between line start and the caret
        position:            Where to anchor a popup opened by this key
    """

    key: str
    shift: bool = False
    text_before_cursor: str = ""
    position: Optional[Tuple[float, float]] = None


def handle_key(state: EditorState, block_id: str, event: KeyEvent) -> bool:
    """
    Apply the transition for `event` in block `block_id`.

    Returns True when the key was consumed and the view should suppress its
    default behaviour. Keys aimed at a block that is not in the document are
    ignored.
    """
    block = state.get_block(block_id)
    if block is None:
        return False

    if event.key == "/" and not state.menu.is_open:
        text = event.text_before_cursor
        if text == "" or text.endswith(" "):
            state.open_menu(block_id, event.position)
            return True
        return False

    if event.key == "Enter" and not event.shift:
        if block.type in LIST_BLOCK_TYPES:
            if block.content.strip() == "":
                state.convert_block(block_id, "paragraph")
            else:
                state.insert_block(block.type, block_id)
        else:
            state.insert_block("paragraph", block_id)
        return True

    if event.key == "Backspace":
        if block.content != "":
            return False
        index = state.index_of(block_id)
        predecessor = state.blocks[index - 1] if index > 0 else None
        state.delete_block(block_id)
        if predecessor is not None:
            state.focus_block_id = predecessor.id
        logger.debug("Deleted empty block %s", block_id)
        return True

    if event.key == "Escape" and state.menu.is_open:
        state.close_menu()
        return True

    return False
