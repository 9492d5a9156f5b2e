"""Middleware for authentication and other cross-cutting concerns."""

from .auth import JWTBearer, get_access_token, get_current_user_id
from .rate_limit import RateLimiter, get_client_ip, public_rate_limit

__all__ = [
    "get_current_user_id",
    "get_access_token",
    "JWTBearer",
    "RateLimiter",
    "get_client_ip",
    "public_rate_limit",
]
