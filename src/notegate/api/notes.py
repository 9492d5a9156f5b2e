"""Notes API endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_settings
from ..core.models.note import Visibility
from ..core.schemas.notes import (
    NoteCreate,
    NoteListResponse,
    NoteResponse,
    NoteStatsResponse,
    NoteUpdate,
    SharedNoteListResponse,
)
from ..core.services import NoteService
from ..database import get_db_session
from ..middleware.auth import get_current_user_id

router = APIRouter(prefix="/notes", tags=["notes"])

settings = get_settings()


@router.post("/", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
async def create_note(
    request: NoteCreate,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Create a new note."""
    note_service = NoteService(session)
    return await note_service.create_note(current_user_id, request)


@router.get("/", response_model=NoteListResponse)
async def list_notes(
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    visibility: Optional[Visibility] = Query(None),
    tag: Optional[str] = Query(None, min_length=1, max_length=30),
    q: Optional[str] = Query(None, max_length=200, description="Match in title or content"),
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """List own notes, optionally filtered by visibility, tag or text."""
    note_service = NoteService(session)
    return await note_service.list_notes(
        current_user_id,
        page=page,
        per_page=per_page,
        visibility=visibility.value if visibility else None,
        tag=tag,
        q=q,
    )


@router.get("/shared", response_model=SharedNoteListResponse)
async def list_shared_notes(
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Notes other users shared with me."""
    note_service = NoteService(session)
    return await note_service.list_shared_with_me(current_user_id, page, per_page)


@router.get("/stats", response_model=NoteStatsResponse)
async def note_stats(
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Count my notes per visibility."""
    note_service = NoteService(session)
    return await note_service.get_note_stats(current_user_id)


@router.get("/{note_id}", response_model=NoteResponse)
async def get_note(
    note_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Get a specific note."""
    note_service = NoteService(session)
    return await note_service.get_note(note_id, current_user_id)


@router.put("/{note_id}", response_model=NoteResponse)
async def update_note(
    note_id: UUID,
    request: NoteUpdate,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Update a note."""
    note_service = NoteService(session)
    return await note_service.update_note(note_id, current_user_id, request)


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_note(
    note_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Delete a note and all of its shares."""
    note_service = NoteService(session)
    await note_service.delete_note(note_id, current_user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
