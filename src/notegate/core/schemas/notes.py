"""
Note management schemas.

API contracts for note CRUD, listing and the anonymous public projection.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.note import Visibility
from ..models.share import AccessLevel, SharePermission
from ..models.types import TAG_SEPARATOR, normalize_tags
from .common import PaginationResponse

MAX_TAGS = 20
MAX_TAG_LENGTH = 30


def _validate_tags(v: Optional[List[str]]) -> Optional[List[str]]:
    if v is None:
        return v
    for tag in v:
        if TAG_SEPARATOR in tag:
            raise ValueError("Tags cannot contain commas")
        if len(tag.strip()) > MAX_TAG_LENGTH:
            raise ValueError(f"Tags must be at most {MAX_TAG_LENGTH} characters")
    return normalize_tags(v)


class NoteCreate(BaseModel):
    """Note creation request schema."""

    title: str = Field(min_length=1, max_length=200, description="Note title")
    content: str = Field(default="", description="Note content")
    tags: List[str] = Field(default_factory=list, max_length=MAX_TAGS, description="Note tags")
    visibility: Visibility = Field(default=Visibility.PRIVATE, description="Initial visibility")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip()

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v):
        return _validate_tags(v)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Q4 planning",
                "content": "1. Review Q3\n2. Set objectives",
                "tags": ["planning", "q4"],
                "visibility": "private",
            }
        }
    )


class NoteUpdate(BaseModel):
    """Note update request schema. Omitted fields are left unchanged."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = Field(default=None)
    tags: Optional[List[str]] = Field(default=None, max_length=MAX_TAGS)
    visibility: Optional[Visibility] = Field(default=None)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip() if v is not None else v

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v):
        return _validate_tags(v)


class NoteResponse(BaseModel):
    """Full note as seen by an authenticated user with access."""

    id: uuid.UUID
    title: str
    content: str
    tags: List[str]
    visibility: Visibility
    # only populated for the owner
    public_token: Optional[str] = None
    owner_id: uuid.UUID
    author_name: Optional[str] = None
    permission: AccessLevel = Field(description="Requester's resolved permission")
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NoteListItem(BaseModel):
    """Simplified note schema for list views."""

    id: uuid.UUID
    title: str
    content_preview: str
    tags: List[str]
    visibility: Visibility
    created_at: datetime
    updated_at: datetime


class NoteListResponse(PaginationResponse[NoteListItem]):
    """Paginated note list response."""


class SharedNoteItem(NoteListItem):
    """A note someone else shared with the current user."""

    author_name: Optional[str] = None
    permission: SharePermission
    share_id: uuid.UUID
    shared_at: datetime


class SharedNoteListResponse(PaginationResponse[SharedNoteItem]):
    """Paginated list of notes shared with the current user."""


class NoteStatsResponse(BaseModel):
    """Per-visibility note counts for the owner, plus the latest edits."""

    total: int
    private: int
    shared: int
    public: int
    recent: List[NoteListItem] = Field(default_factory=list)


class PublicNoteResponse(BaseModel):
    """Reduced projection served to anonymous readers.

    Never carries the owner's id, email, credential or share list.
    """

    title: str
    content: str
    tags: List[str]
    author_name: str
    created_at: datetime
    updated_at: datetime
