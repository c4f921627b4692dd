"""
Notes API — Notes Route Handlers
=================================

What:  HTTP surface for the note lifecycle under /api/notes.
How:   Each handler extracts path/query/body values, calls NoteService, and
       returns the result. Status codes for failures come from the global
       exception handlers in main.py, not from these functions.

Route Table:
    POST   /api/notes             → 201 Note          (400, 500)
    GET    /api/notes?page&limit  → 200 [Note]        (500)
    GET    /api/notes/{id}        → 200 Note          (404, 500)
    PATCH  /api/notes/{id}        → 200 Note          (400, 404, 500)
    DELETE /api/notes/{id}        → 204 empty body    (404, 500)

Request bodies are taken as raw JSON and handed to the validator, which
reports every bad field at once with a 400 (FastAPI's own model binding
would stop at 422 with its own error format).
"""

from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, Query, Response, status

from notes_api.dependencies import get_note_service
from notes_api.schemas.note import ErrorResponse, NoteCreate, NotePatch, NoteResponse
from notes_api.services.note_service import NoteService


router = APIRouter(prefix="/api/notes", tags=["Notes"])


def _json_body(schema) -> dict:
    """OpenAPI requestBody for a raw-JSON handler, documented with `schema`."""
    return {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": schema.model_json_schema()}},
        }
    }


@router.post(
    "",
    response_model=NoteResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid note payload", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a note",
    openapi_extra=_json_body(NoteCreate),
)
async def create_note(
    payload: Any = Body(...),
    service: NoteService = Depends(get_note_service),
) -> NoteResponse:
    return await service.create_note(payload)


@router.get(
    "",
    response_model=List[NoteResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List notes, oldest first",
    description=(
        "Returns one page of notes ordered by creation time (ties broken by id). "
        "`limit` is clamped to the configured maximum and `page` to at least 1. "
        "The total number of notes is returned in the X-Total-Count header."
    ),
)
async def list_notes(
    response: Response,
    page: Optional[int] = Query(default=None, description="1-based page number (default 1)"),
    limit: Optional[int] = Query(default=None, description="Items per page (default 10, capped)"),
    service: NoteService = Depends(get_note_service),
) -> List[NoteResponse]:
    """
    List notes with page/limit pagination.

    Example:
        GET /api/notes?page=2&limit=10  → items 11-20
    """
    result = await service.list_notes(page=page, limit=limit)
    response.headers["X-Total-Count"] = str(result.total_count)
    return result.notes


@router.get(
    "/{note_id}",
    response_model=NoteResponse,
    responses={
        404: {"description": "Note not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a single note by ID",
)
async def get_note(
    note_id: str,
    service: NoteService = Depends(get_note_service),
) -> NoteResponse:
    return await service.get_note(note_id)


@router.patch(
    "/{note_id}",
    response_model=NoteResponse,
    responses={
        400: {"description": "Invalid patch payload", "model": ErrorResponse},
        404: {"description": "Note not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Partially update a note",
    description="Only the fields present in the body are changed; updatedAt is refreshed.",
    openapi_extra=_json_body(NotePatch),
)
async def update_note(
    note_id: str,
    payload: Any = Body(...),
    service: NoteService = Depends(get_note_service),
) -> NoteResponse:
    return await service.update_note(note_id, payload)


@router.delete(
    "/{note_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        404: {"description": "Note not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a note",
)
async def delete_note(
    note_id: str,
    service: NoteService = Depends(get_note_service),
) -> Response:
    """Hard delete. A second delete of the same id is a 404."""
    await service.delete_note(note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
