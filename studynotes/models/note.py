"""
StudyNotes — Note SQLAlchemy Model
===================================

What:  ORM model representing the `notes` table.
How:   Inherits from the declarative Base; Alembic reads this for migrations.
Who:   Used by NoteService for CRUD operations and by Alembic for schema management.

Table Design:
    - Integer primary key assigned by the database (serial / autoincrement)
    - title: required text
    - blocks: JSON array of block objects (JSONB on PostgreSQL), default []
    - created_at / updated_at: timezone-aware timestamps, default now

    Index on updated_at DESC serves the note list, which is ordered
    most-recently-edited first.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List

from sqlalchemy import JSON, DateTime, Index, Integer, Text, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from studynotes.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Note(Base):
    """
    A titled, ordered collection of blocks persisted as one row.

    Lifecycle:
        1. Created with an initial block list
        2. Updated by whole-field replacement of title and/or blocks;
           updated_at is refreshed on every update
        3. Deleted by id
    """

    __tablename__ = "notes"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Note identifier assigned on insert",
    )

    title: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Note title",
    )

    # Stored exactly as serialized by Block.to_wire(); read back through
    # NoteResponse validation
    blocks: Mapped[List[Dict[str, Any]]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=list,
        server_default=text("'[]'"),
        comment="Ordered array of block objects",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this note was created (UTC)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this note was last modified (UTC)",
    )

    __table_args__ = (
        Index("idx_notes_updated_at", updated_at.desc()),
    )

    def __repr__(self) -> str:
        return (
            f"<Note(id={self.id}, title='{self.title}', "
            f"blocks={len(self.blocks or [])}, updated_at='{self.updated_at}')>"
        )
