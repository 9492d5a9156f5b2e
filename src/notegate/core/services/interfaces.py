"""
Service interfaces for NoteGate.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from uuid import UUID

from ..models.share import SharePermission
from ..schemas.auth import (
    LoginRequest,
    PasswordChangeRequest,
    RefreshTokenRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
    UserUpdateRequest,
)
from ..schemas.common import HealthCheckResponse
from ..schemas.notes import (
    NoteCreate,
    NoteListResponse,
    NoteResponse,
    NoteStatsResponse,
    NoteUpdate,
    PublicNoteResponse,
    SharedNoteListResponse,
)
from ..schemas.sharing import (
    NoteShareListResponse,
    ReceivedShareListResponse,
    RevokeShareResponse,
    ShareResponse,
    ShareStatsResponse,
    UserSearchResponse,
)


class IAuthService(ABC):
    """Auth service for user management."""

    @abstractmethod
    async def register_user(self, request: RegisterRequest) -> UserResponse:
        """Register new user."""

    @abstractmethod
    async def authenticate_user(self, request: LoginRequest) -> TokenResponse:
        """Login user and return JWT tokens."""

    @abstractmethod
    async def refresh_token(self, request: RefreshTokenRequest) -> TokenResponse:
        """Refresh JWT token."""

    @abstractmethod
    async def get_current_user(self, user_id: UUID) -> UserResponse:
        """Get user by ID."""

    @abstractmethod
    async def update_user_profile(self, user_id: UUID, request: UserUpdateRequest) -> UserResponse:
        """Update user profile."""

    @abstractmethod
    async def change_password(self, user_id: UUID, request: PasswordChangeRequest) -> bool:
        """Change user password."""

    @abstractmethod
    async def logout_user(self, user_id: UUID, access_token: str) -> bool:
        """Logout user."""


class INoteService(ABC):
    """Note CRUD, listing and public reads."""

    @abstractmethod
    async def create_note(self, user_id: UUID, request: NoteCreate) -> NoteResponse:
        """Create new note."""

    @abstractmethod
    async def get_note(self, note_id: UUID, user_id: UUID) -> NoteResponse:
        """Get note if the user can read it."""

    @abstractmethod
    async def update_note(self, note_id: UUID, user_id: UUID, request: NoteUpdate) -> NoteResponse:
        """Update note if the user can write it."""

    @abstractmethod
    async def delete_note(self, note_id: UUID, user_id: UUID) -> bool:
        """Delete note (owner only)."""

    @abstractmethod
    async def list_notes(
        self,
        user_id: UUID,
        page: int = 1,
        per_page: int = 20,
        visibility: Optional[str] = None,
        tag: Optional[str] = None,
        q: Optional[str] = None,
    ) -> NoteListResponse:
        """List user notes with pagination."""

    @abstractmethod
    async def list_shared_with_me(
        self, user_id: UUID, page: int = 1, per_page: int = 20
    ) -> SharedNoteListResponse:
        """List notes other users shared with this user."""

    @abstractmethod
    async def get_note_stats(self, user_id: UUID) -> NoteStatsResponse:
        """Count user notes per visibility."""

    @abstractmethod
    async def get_public_note(self, token: str) -> PublicNoteResponse:
        """Anonymous read through a public token."""


class ISharingService(ABC):
    """Note sharing service."""

    @abstractmethod
    async def create_share(
        self, owner_id: UUID, note_id: UUID, recipient_email: str, permission: SharePermission
    ) -> ShareResponse:
        """Share note with one user."""

    @abstractmethod
    async def revoke_share(self, share_id: UUID, acting_user_id: UUID) -> RevokeShareResponse:
        """Revoke note share."""

    @abstractmethod
    async def change_permission(
        self, share_id: UUID, owner_id: UUID, permission: SharePermission
    ) -> ShareResponse:
        """Change share permission."""

    @abstractmethod
    async def list_note_shares(
        self, note_id: UUID, owner_id: UUID, page: int = 1, per_page: int = 20
    ) -> NoteShareListResponse:
        """List shares on a note."""

    @abstractmethod
    async def list_received_shares(
        self, user_id: UUID, page: int = 1, per_page: int = 20
    ) -> ReceivedShareListResponse:
        """List shares received by user."""

    @abstractmethod
    async def search_users(self, query: str, acting_user_id: UUID) -> UserSearchResponse:
        """Find users to share with."""

    @abstractmethod
    async def get_share_stats(self, user_id: UUID) -> ShareStatsResponse:
        """Get sharing statistics."""


class IHealthService(ABC):
    """Health check service."""

    @abstractmethod
    async def get_health_status(self) -> HealthCheckResponse:
        """Get app health status."""

    @abstractmethod
    async def check_database_health(self) -> Dict[str, Any]:
        """Check DB connection."""

    @abstractmethod
    async def check_redis_health(self) -> Dict[str, Any]:
        """Check Redis connection."""
