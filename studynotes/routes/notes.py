"""
StudyNotes — Notes Route Handlers
==================================

What:  The five REST endpoints over the persistence gateway.
How:   Extracts path/query/body data, delegates to NoteService, returns JSON.
Who:   Called by the editor's API client (studynotes.editor.client).

Endpoints:
    GET    /api/notes             → 200 [Note]
    GET    /api/notes/search?q=   → 200 [Note]   | 400 missing q
    GET    /api/notes/{id}        → 200 Note     | 400 bad id | 404
    POST   /api/notes             → 201 Note     | 400 bad body
    PATCH  /api/notes/{id}        → 200 Note     | 400 | 404
    DELETE /api/notes/{id}        → 204          | 400 | 404

Malformed ids and bodies fail FastAPI request validation; main.py maps those
failures to 400. /notes/search is declared before /notes/{note_id} so the
literal path wins.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from studynotes.database import get_db_session
from studynotes.exceptions import ValidationError
from studynotes.schemas.note import ErrorResponse, NoteCreate, NoteResponse, NoteUpdate
from studynotes.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Notes"])


@router.get(
    "/notes",
    response_model=List[NoteResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List all notes",
    description="Returns every note, most recently updated first. No pagination.",
)
async def list_notes(
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> List[NoteResponse]:
    notes = await note_service.list_notes(db)
    response.headers["X-Total-Count"] = str(len(notes))
    return notes


@router.get(
    "/notes/search",
    response_model=List[NoteResponse],
    responses={
        400: {"description": "Missing search query", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Search notes",
    description="Case-insensitive substring search over note titles and block content.",
)
async def search_notes(
    q: Optional[str] = Query(default=None, description="Text to search for"),
    db: AsyncSession = Depends(get_db_session),
) -> List[NoteResponse]:
    if not q:
        raise ValidationError(message="Search query is required", field="q")
    return await note_service.search_notes(db, q)


@router.get(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={
        400: {"description": "Invalid note ID", "model": ErrorResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a single note by ID",
)
async def get_note(
    note_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.get_note(db, note_id)


@router.post(
    "/notes",
    status_code=201,
    response_model=NoteResponse,
    responses={
        400: {"description": "Invalid note data", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a note",
    description="Creates a note from a title and an initial block list.",
)
async def create_note(
    payload: NoteCreate,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.create_note(db, payload)


@router.patch(
    "/notes/{note_id}",
    response_model=NoteResponse,
    responses={
        400: {"description": "Invalid note ID or data", "model": ErrorResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Update a note",
    description=(
        "Updates the title and/or replaces the whole block list. "
        "Fields left out of the body are not changed."
    ),
)
async def update_note(
    note_id: int,
    payload: NoteUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.update_note(db, note_id, payload)


@router.delete(
    "/notes/{note_id}",
    status_code=204,
    response_class=Response,
    responses={
        400: {"description": "Invalid note ID", "model": ErrorResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a note",
)
async def delete_note(
    note_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await note_service.delete_note(db, note_id)
    return Response(status_code=204)
