"""Authentication API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.schemas.auth import (
    LoginRequest,
    PasswordChangeRequest,
    RefreshTokenRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
    UserUpdateRequest,
)
from ..core.schemas.common import MessageResponse
from ..core.services import AuthService
from ..database import get_db_session
from ..middleware.auth import get_access_token, get_current_user_id

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, session: AsyncSession = Depends(get_db_session)):
    """Register a new user."""
    auth_service = AuthService(session)
    return await auth_service.register_user(request)


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, session: AsyncSession = Depends(get_db_session)):
    """Login user and get JWT tokens."""
    auth_service = AuthService(session)
    return await auth_service.authenticate_user(request)


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    request: RefreshTokenRequest, session: AsyncSession = Depends(get_db_session)
):
    """Exchange a refresh token for a new token pair."""
    auth_service = AuthService(session)
    return await auth_service.refresh_token(request)


@router.get("/me", response_model=UserResponse)
async def get_current_user(
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Get current user profile."""
    auth_service = AuthService(session)
    return await auth_service.get_current_user(current_user_id)


@router.put("/me", response_model=UserResponse)
async def update_profile(
    request: UserUpdateRequest,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Update user profile."""
    auth_service = AuthService(session)
    return await auth_service.update_user_profile(current_user_id, request)


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    request: PasswordChangeRequest,
    current_user_id: UUID = Depends(get_current_user_id),
    session: AsyncSession = Depends(get_db_session),
):
    """Change user password."""
    auth_service = AuthService(session)
    await auth_service.change_password(current_user_id, request)
    return MessageResponse(message="Password changed successfully")


@router.post("/logout", response_model=MessageResponse)
async def logout(
    current_user_id: UUID = Depends(get_current_user_id),
    access_token: str = Depends(get_access_token),
    session: AsyncSession = Depends(get_db_session),
):
    """Logout user: blacklist the access token and revoke refresh tokens."""
    auth_service = AuthService(session)
    if await auth_service.logout_user(current_user_id, access_token):
        return MessageResponse(message="Logged out successfully")
    return MessageResponse(message="No active sessions found")
