"""
StudyNotes — Pydantic Request/Response Schemas
===============================================

What:  Pydantic models defining the API contract between editor and backend.
How:   FastAPI uses these models to validate request bodies, serialize
       responses, and generate OpenAPI documentation. The editor's API client
       parses responses back into NoteResponse.

Wire names are camelCase (createdAt, updatedAt); Python attributes are
snake_case. Validation accepts both spellings.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from studynotes.schemas.block import Block


def _ensure_unique_ids(blocks: List[Block]) -> List[Block]:
    seen = set()
    duplicates = set()
    for block in blocks:
        if block.id in seen:
            duplicates.add(block.id)
        seen.add(block.id)
    if duplicates:
        raise ValueError(f"Duplicate block ids: {', '.join(sorted(duplicates))}")
    return blocks


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """
    Body of POST /api/notes.

    Example:
        {"title": "Untitled Note",
         "blocks": [{"id": "block-1", "type": "paragraph", "content": ""}]}
    """
    title: str = Field(default="Untitled", description="Note title")
    blocks: List[Block] = Field(default_factory=list, description="Ordered block list")

    @field_validator("blocks")
    @classmethod
    def validate_unique_ids(cls, v: List[Block]) -> List[Block]:
        return _ensure_unique_ids(v)


class NoteUpdate(BaseModel):
    """
    Body of PATCH /api/notes/{id}.

    Omitted fields are left untouched. A provided block list replaces the
    stored one entirely.
    """
    title: Optional[str] = Field(default=None, description="New title")
    blocks: Optional[List[Block]] = Field(default=None, description="Replacement block list")

    @field_validator("blocks")
    @classmethod
    def validate_unique_ids(cls, v: Optional[List[Block]]) -> Optional[List[Block]]:
        if v is None:
            return v
        return _ensure_unique_ids(v)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """Full representation of a stored note."""
    id: int = Field(description="Note identifier assigned on creation")
    title: str = Field(description="Note title")
    blocks: List[Block] = Field(description="Ordered block list")
    created_at: datetime = Field(
        validation_alias=AliasChoices("created_at", "createdAt"),
        serialization_alias="createdAt",
        description="When the note was created",
    )
    updated_at: datetime = Field(
        validation_alias=AliasChoices("updated_at", "updatedAt"),
        serialization_alias="updatedAt",
        description="When the note was last modified",
    )

    model_config = {"from_attributes": True}


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "note with ID '42' was not found",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
