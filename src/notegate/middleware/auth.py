"""Authentication middleware."""

from typing import Optional
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..core.exceptions import AuthenticationError
from ..security import get_user_id_from_token


class JWTBearer(HTTPBearer):
    """JWT Bearer token authentication.

    Resolves to the authenticated user's id; every failure is a 401.
    """

    def __init__(self):
        super().__init__(auto_error=False)

    async def __call__(self, request: Request) -> UUID:
        credentials: Optional[HTTPAuthorizationCredentials] = await super().__call__(request)
        if not credentials:
            raise AuthenticationError("Not authenticated")
        if credentials.scheme.lower() != "bearer":
            raise AuthenticationError("Invalid authentication scheme")

        user_id = await get_user_id_from_token(credentials.credentials)
        if not user_id:
            raise AuthenticationError("Invalid token or expired token")

        request.state.user_id = user_id
        return user_id


jwt_bearer = JWTBearer()
bearer_credentials = HTTPBearer(auto_error=False)


# Dependency for getting current user ID from JWT
async def get_current_user_id(user_id: UUID = Depends(jwt_bearer)) -> UUID:
    """Get current authenticated user ID."""
    return user_id


async def get_access_token(
    _: UUID = Depends(jwt_bearer),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_credentials),
) -> str:
    """Raw bearer token of an authenticated request (needed to blacklist it)."""
    return credentials.credentials
