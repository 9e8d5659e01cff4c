"""
StudyNotes — Render-Time Helpers
=================================

Values the editor and sidebar compute on the fly and never store:
numbered-list numbering, note previews, block counts, relative timestamps,
file sizes, and fresh block ids.

Numbering rule:
    A numbered-list item's number is its position within the run of
    consecutive numbered-list blocks it belongs to. Any other block type,
    including bullet and checkbox lists, ends the run; the next numbered-list
    block starts again at 1.
"""

import math
import secrets
import time
from datetime import datetime, timezone
from typing import Dict, Optional, Sequence

from studynotes.schemas.block import Block

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"

EMPTY_PREVIEW = "Empty note"
PREVIEW_LIMIT = 100


def generate_block_id() -> str:
    """`block-<epoch millis>-<9 random base36 chars>`, e.g. block-1705312800000-k3j9x0a1b."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"block-{int(time.time() * 1000)}-{suffix}"


def list_numbers(blocks: Sequence[Block]) -> Dict[str, int]:
    """Maps each numbered-list block id to its display number."""
    numbers: Dict[str, int] = {}
    run = 0
    for block in blocks:
        if block.type == "numbered-list":
            run += 1
            numbers[block.id] = run
        else:
            run = 0
    return numbers


def block_preview(blocks: Sequence[Block]) -> str:
    """
    Sidebar preview text: the first non-blank block that is not a top-level
    heading, trimmed and cut to 100 characters ("..." included).
    """
    for block in blocks:
        content = block.content.strip()
        if content and block.type != "heading-1":
            if len(content) > PREVIEW_LIMIT:
                return f"{content[:PREVIEW_LIMIT - 3]}..."
            return content
    return EMPTY_PREVIEW


def count_blocks(blocks: Optional[Sequence[Block]]) -> int:
    return len(blocks) if blocks else 0


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive timestamps; they are stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def format_time_ago(when: datetime, now: Optional[datetime] = None) -> str:
    """
    Compact relative time: "42s ago", "5m ago", "3h ago", "2d ago", "1w ago",
    then the calendar date (M/D/YYYY) from four weeks on.
    """
    when = _as_utc(when)
    now = _as_utc(now) if now is not None else datetime.now(timezone.utc)
    seconds = max(0, math.floor((now - when).total_seconds()))

    if seconds < 60:
        return f"{seconds}s ago"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    days = hours // 24
    if days < 7:
        return f"{days}d ago"
    weeks = days // 7
    if weeks < 4:
        return f"{weeks}w ago"
    return f"{when.month}/{when.day}/{when.year}"


def format_file_size(size: int) -> str:
    """Human-readable size with up to two decimals: 0 Bytes, 512 Bytes, 1.5 KB, 2 MB."""
    if size <= 0:
        return "0 Bytes"
    units = ("Bytes", "KB", "MB", "GB")
    index = 0
    while index < len(units) - 1 and size >= 1024 ** (index + 1):
        index += 1
    value = ("%.2f" % (size / 1024 ** index)).rstrip("0").rstrip(".")
    return f"{value} {units[index]}"
