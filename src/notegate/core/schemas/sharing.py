"""
Note sharing schemas.

API contracts for granting, listing, changing and revoking per-user shares.
"""

import uuid
from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from ..models.note import Visibility
from ..models.share import SharePermission
from .common import PaginationResponse


class ShareCreateRequest(BaseModel):
    """Share a note with one user, identified by email."""

    email: EmailStr = Field(description="Recipient's account email")
    permission: SharePermission = Field(default=SharePermission.READ)

    model_config = ConfigDict(
        json_schema_extra={"example": {"email": "colleague@example.com", "permission": "read"}}
    )


class SharePermissionUpdate(BaseModel):
    """Change the permission on an existing share."""

    permission: SharePermission


class ShareUser(BaseModel):
    id: uuid.UUID
    name: str
    email: EmailStr


class ShareResponse(BaseModel):
    """A share as seen by the note owner."""

    id: uuid.UUID
    note_id: uuid.UUID
    shared_with: ShareUser
    permission: SharePermission
    created_at: datetime


class NoteShareListResponse(PaginationResponse[ShareResponse]):
    """Shares on one note."""

    note_id: uuid.UUID
    note_title: str
    visibility: Visibility


class ReceivedShareResponse(BaseModel):
    """A share as seen by its recipient."""

    id: uuid.UUID
    note_id: uuid.UUID
    note_title: str
    visibility: Visibility
    shared_by_name: str
    permission: SharePermission
    created_at: datetime


class ReceivedShareListResponse(PaginationResponse[ReceivedShareResponse]):
    """Recipient inbox."""


class RevokeShareResponse(BaseModel):
    """Outcome of a revocation, including the note's visibility afterwards."""

    share_id: uuid.UUID
    note_id: uuid.UUID
    visibility: Visibility


class UserSearchResult(BaseModel):
    id: uuid.UUID
    name: str
    email: EmailStr


class UserSearchResponse(BaseModel):
    query: str
    users: List[UserSearchResult]


class ShareStatsResponse(BaseModel):
    """Sharing statistics for the current user."""

    notes_shared_by_me: int
    notes_shared_with_me: int
    unique_sharers: int
    unique_recipients: int
