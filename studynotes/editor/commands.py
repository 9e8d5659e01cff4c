"""
StudyNotes — Command Menu Catalogue
====================================

The block types offered by the "/" command menu, grouped the way the menu
shows them.
"""

from typing import List, NamedTuple, Tuple


class CommandItem(NamedTuple):
    type: str
    icon: str
    title: str
    description: str
    shortcut: str


class CommandCategory(NamedTuple):
    name: str
    items: Tuple[CommandItem, ...]


COMMAND_MENU: Tuple[CommandCategory, ...] = (
    CommandCategory("Basic Blocks", (
        CommandItem("heading-1", "H1", "Heading 1", "Top-level heading", "⌘⌥1"),
        CommandItem("heading-2", "H2", "Heading 2", "Key section heading", "⌘⌥2"),
        CommandItem("heading-3", "H3", "Heading 3", "Subsection heading", "⌘⌥3"),
        CommandItem("paragraph", "¶", "Paragraph", "The body of your document", "⌘⌥0"),
    )),
    CommandCategory("Lists", (
        CommandItem("bullet-list", "•", "Bullet List", "List with unordered items", "⌘⇧8"),
        CommandItem("numbered-list", "1.", "Numbered List", "List with ordered items", "⌘⇧7"),
        CommandItem("checkbox-list", "☑", "Check List", "List with checkboxes", "⌘⇧9"),
    )),
    CommandCategory("Advanced", (
        CommandItem("code", "</>", "Code Block", "Code block with syntax highlighting", "⌘⌥C"),
    )),
    CommandCategory("Media", (
        CommandItem("image", "🖼️", "Image", "Upload an image file", "⌘⌥I"),
        CommandItem("video", "🎥", "Video", "Upload a video file", "⌘⌥V"),
        CommandItem("audio", "🎵", "Audio", "Upload an audio file", "⌘⌥A"),
    )),
)


def all_commands() -> List[CommandItem]:
    return [item for category in COMMAND_MENU for item in category.items]


def command_for(block_type: str) -> CommandItem:
    """Menu entry for a block type; KeyError if the type is not offered."""
    for item in all_commands():
        if item.type == block_type:
            return item
    raise KeyError(block_type)


def filter_commands(query: str) -> List[CommandItem]:
    """Items whose title, description or type contains `query` (case-insensitive)."""
    needle = query.strip().casefold()
    if not needle:
        return all_commands()
    return [
        item for item in all_commands()
        if needle in item.title.casefold()
        or needle in item.description.casefold()
        or needle in item.type
    ]
