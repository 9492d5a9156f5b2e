"""
Pydantic schemas for validating and documenting API requests and responses.
"""

from .auth import (
    LoginRequest,
    PasswordChangeRequest,
    RefreshTokenRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
    UserUpdateRequest,
)
from .common import ErrorResponse, HealthCheckResponse, MessageResponse, PaginationResponse
from .notes import (
    NoteCreate,
    NoteListItem,
    NoteListResponse,
    NoteResponse,
    NoteStatsResponse,
    NoteUpdate,
    PublicNoteResponse,
    SharedNoteItem,
    SharedNoteListResponse,
)
from .sharing import (
    NoteShareListResponse,
    ReceivedShareListResponse,
    ReceivedShareResponse,
    RevokeShareResponse,
    ShareCreateRequest,
    SharePermissionUpdate,
    ShareResponse,
    ShareStatsResponse,
    UserSearchResponse,
    UserSearchResult,
)

__all__ = [
    # Auth schemas
    "LoginRequest",
    "RegisterRequest",
    "TokenResponse",
    "UserResponse",
    "RefreshTokenRequest",
    "PasswordChangeRequest",
    "UserUpdateRequest",
    # Note schemas
    "NoteCreate",
    "NoteUpdate",
    "NoteResponse",
    "NoteListItem",
    "NoteListResponse",
    "SharedNoteItem",
    "SharedNoteListResponse",
    "NoteStatsResponse",
    "PublicNoteResponse",
    # Sharing schemas
    "ShareCreateRequest",
    "SharePermissionUpdate",
    "ShareResponse",
    "NoteShareListResponse",
    "ReceivedShareResponse",
    "ReceivedShareListResponse",
    "RevokeShareResponse",
    "UserSearchResult",
    "UserSearchResponse",
    "ShareStatsResponse",
    # Common schemas
    "PaginationResponse",
    "ErrorResponse",
    "MessageResponse",
    "HealthCheckResponse",
]
