"""Sharing API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import get_settings
from ..core.schemas.sharing import (
    NoteShareListResponse,
    ReceivedShareListResponse,
    RevokeShareResponse,
    ShareCreateRequest,
    SharePermissionUpdate,
    ShareResponse,
    ShareStatsResponse,
    UserSearchResponse,
)
from ..core.services import SharingService
from ..database import get_db_session
from ..middleware.auth import get_current_user_id

router = APIRouter(prefix="/sharing", tags=["sharing"])

settings = get_settings()


@router.post("/notes/{note_id}", response_model=ShareResponse, status_code=status.HTTP_201_CREATED)
async def share_note(
    note_id: UUID,
    request: ShareCreateRequest,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Share a note with another user."""
    sharing_service = SharingService(session)
    return await sharing_service.create_share(
        current_user_id, note_id, request.email, request.permission
    )


@router.get("/notes/{note_id}", response_model=NoteShareListResponse)
async def list_note_shares(
    note_id: UUID,
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """List who a note is shared with (owner only)."""
    sharing_service = SharingService(session)
    return await sharing_service.list_note_shares(note_id, current_user_id, page, per_page)


@router.get("/received", response_model=ReceivedShareListResponse)
async def list_received_shares(
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Shares I have received."""
    sharing_service = SharingService(session)
    return await sharing_service.list_received_shares(current_user_id, page, per_page)


@router.get("/users/search", response_model=UserSearchResponse)
async def search_users(
    q: str = Query(..., description="Name or email fragment, at least 2 characters"),
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Find users to share with."""
    sharing_service = SharingService(session)
    return await sharing_service.search_users(q, current_user_id)


@router.get("/stats", response_model=ShareStatsResponse)
async def get_share_stats(
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Get sharing statistics."""
    sharing_service = SharingService(session)
    return await sharing_service.get_share_stats(current_user_id)


@router.patch("/{share_id}", response_model=ShareResponse)
async def change_share_permission(
    share_id: UUID,
    request: SharePermissionUpdate,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Change a share's permission (owner only)."""
    sharing_service = SharingService(session)
    return await sharing_service.change_permission(share_id, current_user_id, request.permission)


@router.delete("/{share_id}", response_model=RevokeShareResponse)
async def revoke_share(
    share_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Revoke a share. The note owner or the recipient may do this."""
    sharing_service = SharingService(session)
    return await sharing_service.revoke_share(share_id, current_user_id)
