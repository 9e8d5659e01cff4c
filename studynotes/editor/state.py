"""
StudyNotes — Editor State Machine
==================================

What:  The in-memory document of the one note open in the editor: its title,
       its ordered blocks, and the presentation state that structural edits
       drive (focus target, command menu).
How:   Every effective change replaces the block tuple with a new one
       (blocks are immutable pydantic models), marks the state dirty and
       notifies subscribers. Operations aimed at a block id that is not
       present change nothing and notify nobody.
Who:   Driven by keyboard handling (keyboard.py), the command menu, media
       uploads and the editor session; observed by the autosave scheduler.

Single-threaded: all calls happen on the event loop that owns the editor,
in the order their triggering events were dispatched.
"""

from typing import Any, Callable, List, Optional, Tuple

from studynotes.editor.display import generate_block_id
from studynotes.schemas.block import Block, BlockType, CheckboxMetadata, MediaMetadata
from studynotes.schemas.note import NoteResponse

Listener = Callable[["EditorState"], None]

_UPDATABLE_FIELDS = frozenset({"content", "metadata", "type"})


class CommandMenu:
    """
    Open/closed state of the "/" command menu.

    Attributes:
        is_open:   Whether the menu is showing
        block_id:  The block the menu was opened from (the originating block)
        position:  Anchor coordinates supplied by the view, if any
    """

    def __init__(self) -> None:
        self.is_open = False
        self.block_id: Optional[str] = None
        self.position: Optional[Tuple[float, float]] = None

    def open(self, block_id: str, position: Optional[Tuple[float, float]] = None) -> None:
        self.is_open = True
        self.block_id = block_id
        self.position = position

    def close(self) -> None:
        self.is_open = False

    def __repr__(self) -> str:
        return f"<CommandMenu(is_open={self.is_open}, block_id={self.block_id!r})>"


class EditorState:
    """
    Ordered block sequence and title for exactly one open note.

    Structural operations:
        insert_block, convert_block, update_block, delete_block,
        move_block_up, move_block_down, move_block

    Block-specific operations:
        toggle_checked (checkbox lists), attach_media / remove_media /
        cancel_media (image, video, audio)

    Focus requests are recorded in `focus_block_id`; moving the caret there
    is the view's job.
    """

    def __init__(self) -> None:
        self.note_id: Optional[int] = None
        self.title: str = ""
        self._blocks: Tuple[Block, ...] = ()
        self.focus_block_id: Optional[str] = None
        self.menu = CommandMenu()
        self._dirty = False
        self._listeners: List[Listener] = []

    # ── Queries ───────────────────────────────────────────────────────────

    @property
    def blocks(self) -> Tuple[Block, ...]:
        return self._blocks

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    def get_block(self, block_id: str) -> Optional[Block]:
        index = self.index_of(block_id)
        return self._blocks[index] if index >= 0 else None

    def index_of(self, block_id: str) -> int:
        for index, block in enumerate(self._blocks):
            if block.id == block_id:
                return index
        return -1

    def has_meaningful_content(self) -> bool:
        """True when the title or any block holds non-whitespace text."""
        return bool(self.title.strip()) or any(b.content.strip() for b in self._blocks)

    def watched_values(self) -> Tuple[Optional[int], str, Tuple[Block, ...]]:
        """The values autosave watches; each edit produces a new blocks tuple."""
        return (self.note_id, self.title, self._blocks)

    # ── Observation ───────────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def _replace_blocks(self, blocks: Tuple[Block, ...]) -> None:
        self._blocks = blocks
        self._dirty = True
        self._emit()

    def _fresh_id(self) -> str:
        taken = {block.id for block in self._blocks}
        block_id = generate_block_id()
        while block_id in taken:
            block_id = generate_block_id()
        return block_id

    # ── Lifecycle ─────────────────────────────────────────────────────────

    def load(self, note: NoteResponse) -> None:
        """Replace title and blocks with a persisted note; the result is clean."""
        self.note_id = note.id
        self.title = note.title or ""
        self._blocks = tuple(note.blocks)
        self.focus_block_id = None
        self.menu.close()
        self._dirty = False
        self._emit()

    def clear(self) -> None:
        """Back to the no-note-open state."""
        self.note_id = None
        self.title = ""
        self._blocks = ()
        self.focus_block_id = None
        self.menu.close()
        self._dirty = False
        self._emit()

    def mark_clean(self) -> None:
        self._dirty = False

    # ── Title ─────────────────────────────────────────────────────────────

    def set_title(self, text: str) -> None:
        self.title = text
        self._dirty = True
        self._emit()

    # ── Block operations ──────────────────────────────────────────────────

    def update_block(self, block_id: str, **changes: Any) -> Optional[Block]:
        """
        Merge `content`, `metadata` and/or `type` into a block.

        Metadata may be given as a model or as a plain mapping; untouched
        fields keep their existing objects. Returns the updated block, or
        None when no block has this id.
        """
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise TypeError(f"update_block() got unexpected fields: {', '.join(sorted(unknown))}")

        index = self.index_of(block_id)
        if index < 0:
            return None

        current = self._blocks[index]
        updated = Block.model_validate({
            "id": current.id,
            "type": current.type,
            "content": current.content,
            "metadata": current.metadata,
            **changes,
        })
        self._replace_blocks(self._blocks[:index] + (updated,) + self._blocks[index + 1:])
        return updated

    def insert_block(self, block_type: BlockType, after_block_id: Optional[str] = None) -> Block:
        """
        Create an empty block of `block_type` with a fresh id.

        It goes immediately after `after_block_id` when that block exists,
        otherwise at the end. The new block becomes the focus target and the
        command menu closes.
        """
        block = Block(id=self._fresh_id(), type=block_type, content="")

        index = self.index_of(after_block_id) if after_block_id is not None else -1
        if index >= 0:
            blocks = self._blocks[:index + 1] + (block,) + self._blocks[index + 1:]
        else:
            blocks = self._blocks + (block,)

        self.menu.close()
        self.focus_block_id = block.id
        self._replace_blocks(blocks)
        return block

    def convert_block(self, block_id: str, new_type: BlockType) -> Optional[Block]:
        """Change only the type; id, content and the metadata object are kept."""
        index = self.index_of(block_id)
        if index < 0:
            return None

        converted = self._blocks[index].model_copy(update={"type": new_type})
        self.menu.close()
        self.focus_block_id = block_id
        self._replace_blocks(self._blocks[:index] + (converted,) + self._blocks[index + 1:])
        return converted

    def delete_block(self, block_id: str) -> Optional[Block]:
        """Remove a block; returns it, or None when no block has this id."""
        index = self.index_of(block_id)
        if index < 0:
            return None

        removed = self._blocks[index]
        if self.focus_block_id == block_id:
            self.focus_block_id = None
        self._replace_blocks(self._blocks[:index] + self._blocks[index + 1:])
        return removed

    def move_block_up(self, block_id: str) -> bool:
        """Swap with the predecessor. False (and no change) for the first block."""
        index = self.index_of(block_id)
        if index <= 0:
            return False
        return self._swap(index - 1, index)

    def move_block_down(self, block_id: str) -> bool:
        """Swap with the successor. False (and no change) for the last block."""
        index = self.index_of(block_id)
        if index < 0 or index >= len(self._blocks) - 1:
            return False
        return self._swap(index, index + 1)

    def _swap(self, first: int, second: int) -> bool:
        blocks = list(self._blocks)
        blocks[first], blocks[second] = blocks[second], blocks[first]
        self._replace_blocks(tuple(blocks))
        return True

    def move_block(self, block_id: str, new_index: int) -> bool:
        """
        Move a block to `new_index` (clamped to the sequence), shifting the
        blocks in between. This is the drop result of a drag reorder.
        """
        index = self.index_of(block_id)
        if index < 0:
            return False
        target = max(0, min(new_index, len(self._blocks) - 1))
        if target == index:
            return False

        blocks = list(self._blocks)
        block = blocks.pop(index)
        blocks.insert(target, block)
        self._replace_blocks(tuple(blocks))
        return True

    # ── Checkbox and media blocks ─────────────────────────────────────────

    def toggle_checked(self, block_id: str) -> Optional[Block]:
        block = self.get_block(block_id)
        if block is None:
            return None
        checked = isinstance(block.metadata, CheckboxMetadata) and block.metadata.checked
        return self.update_block(block_id, metadata=CheckboxMetadata(checked=not checked))

    def attach_media(
        self, block_id: str, content: str, metadata: MediaMetadata
    ) -> Optional[Block]:
        """
        Store an uploaded payload in a media block, then open an empty
        paragraph after it for the user to keep typing. Returns the paragraph.
        """
        if self.update_block(block_id, content=content, metadata=metadata) is None:
            return None
        return self.insert_block("paragraph", block_id)

    def remove_media(self, block_id: str) -> Optional[Block]:
        return self.update_block(block_id, content="", metadata=MediaMetadata())

    def cancel_media(self, block_id: str) -> Optional[Block]:
        """Abandon an empty media placeholder by turning it into a paragraph."""
        return self.update_block(block_id, type="paragraph", content="")

    # ── Command menu ──────────────────────────────────────────────────────

    def open_menu(self, block_id: str, position: Optional[Tuple[float, float]] = None) -> None:
        self.menu.open(block_id, position)

    def close_menu(self) -> None:
        self.menu.close()

    def select_command(self, block_type: BlockType) -> Optional[Block]:
        """
        Apply a command-menu choice to the originating block: an empty block
        is converted in place, a block with content gets a new block of the
        chosen type after it. Returns the converted or inserted block.
        """
        origin = self.get_block(self.menu.block_id) if self.menu.block_id else None
        self.menu.close()
        if origin is None:
            return None
        if origin.content.strip() == "":
            return self.convert_block(origin.id, block_type)
        return self.insert_block(block_type, origin.id)

    def __repr__(self) -> str:
        return (
            f"<EditorState(note_id={self.note_id}, blocks={len(self._blocks)}, "
            f"dirty={self._dirty})>"
        )
