"""Authentication service implementation."""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ...config import get_settings
from ...database import unit_of_work
from ...security import (
    blacklist_token,
    create_access_token,
    hash_password,
    needs_update,
    verify_password,
)
from ..exceptions import AuthenticationError, ConflictError, InvalidOperationError, NotFoundError
from ..logging import get_logger
from ..models.user import User
from ..repositories.refresh_token_repository import RefreshTokenRepository
from ..repositories.user_repository import UserRepository
from ..schemas.auth import (
    LoginRequest,
    PasswordChangeRequest,
    RefreshTokenRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
    UserUpdateRequest,
)
from .interfaces import IAuthService

logger = get_logger("services.auth")


class AuthService(IAuthService):
    """Authentication service implementation."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repo = UserRepository(session)
        self.token_repo = RefreshTokenRepository(session)
        self.settings = get_settings()

    async def register_user(self, request: RegisterRequest) -> UserResponse:
        """Register new user."""
        email = request.email.lower()

        async with unit_of_work(self.session):
            if await self.user_repo.is_email_taken(email):
                raise ConflictError("Email already registered")
            try:
                user = await self.user_repo.create_user(
                    {
                        "email": email,
                        "name": request.name,
                        "password_hash": hash_password(request.password),
                        "is_active": True,
                    }
                )
            except IntegrityError as e:
                raise ConflictError("Email already registered") from e

        logger.info("User registered", extra={"user_id": str(user.id)})
        return UserResponse.model_validate(user)

    async def authenticate_user(self, request: LoginRequest) -> TokenResponse:
        """Login user and return JWT tokens."""
        async with unit_of_work(self.session):
            user = await self.user_repo.get_by_email(request.email)
            if not user or not user.can_login():
                raise AuthenticationError("Invalid credentials")
            if not verify_password(request.password, user.password_hash):
                logger.warning("Failed login", extra={"user_id": str(user.id)})
                raise AuthenticationError("Invalid credentials")

            if needs_update(user.password_hash):
                await self.user_repo.update_user(
                    user, {"password_hash": hash_password(request.password)}
                )

            response = await self._issue_tokens(user)

        logger.info("User logged in", extra={"user_id": str(user.id)})
        return response

    async def refresh_token(self, request: RefreshTokenRequest) -> TokenResponse:
        """Rotate a refresh token: the old one is deleted, a new pair issued."""
        async with unit_of_work(self.session):
            token_obj = await self.token_repo.get_by_token(request.refresh_token)
            if token_obj is None or not token_obj.is_valid:
                raise AuthenticationError("Invalid refresh token")

            user = await self.user_repo.get_by_id(token_obj.user_id)
            if not user or not user.can_login():
                raise AuthenticationError("User account inactive")

            await self.token_repo.delete_token(request.refresh_token)
            response = await self._issue_tokens(user)

        return response

    async def get_current_user(self, user_id: UUID) -> UserResponse:
        user = await self._get_user(user_id)
        return UserResponse.model_validate(user)

    async def update_user_profile(self, user_id: UUID, request: UserUpdateRequest) -> UserResponse:
        """Update name and/or email."""
        async with unit_of_work(self.session):
            user = await self._get_user(user_id)

            update_data = {}
            if request.email is not None:
                email = request.email.lower()
                if email != user.email:
                    if await self.user_repo.is_email_taken(email):
                        raise ConflictError("Email already registered")
                    update_data["email"] = email
            if request.name is not None:
                update_data["name"] = request.name

            if update_data:
                user = await self.user_repo.update_user(user, update_data)

        return UserResponse.model_validate(user)

    async def change_password(self, user_id: UUID, request: PasswordChangeRequest) -> bool:
        """Change password and revoke every refresh token of the user."""
        async with unit_of_work(self.session):
            user = await self._get_user(user_id)
            if not verify_password(request.current_password, user.password_hash):
                raise InvalidOperationError("Current password is incorrect")

            await self.user_repo.update_user(
                user, {"password_hash": hash_password(request.new_password)}
            )
            await self.token_repo.delete_user_tokens(user_id)

        logger.info("Password changed", extra={"user_id": str(user_id)})
        return True

    async def logout_user(self, user_id: UUID, access_token: str) -> bool:
        """Blacklist the access token and drop all refresh tokens."""
        if not await blacklist_token(access_token):
            # Redis down or token already expired; refresh tokens still go
            logger.warning("Access token not blacklisted", extra={"user_id": str(user_id)})

        async with unit_of_work(self.session):
            deleted_count = await self.token_repo.delete_user_tokens(user_id)

        logger.info("User logged out", extra={"user_id": str(user_id)})
        return deleted_count > 0

    async def _get_user(self, user_id: UUID) -> User:
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    async def _issue_tokens(self, user: User) -> TokenResponse:
        refresh = await self.token_repo.create_token(
            user.id, expires_days=self.settings.refresh_token_expire_days
        )
        return TokenResponse(
            access_token=create_access_token(data={"sub": str(user.id)}),
            refresh_token=refresh.token,
            token_type="bearer",
            expires_in=self.settings.access_token_expire_minutes * 60,
            user=UserResponse.model_validate(user),
        )
