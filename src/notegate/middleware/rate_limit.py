"""Fixed-window rate limiting for anonymous endpoints."""

from typing import Iterable

from fastapi import Depends, Request

from ..config import Settings, get_settings
from ..core.exceptions import RateLimitedError
from ..core.logging import get_logger
from ..core.redis_client import get_redis_client

logger = get_logger("middleware.rate_limit")


def get_client_ip(request: Request, trusted_proxies: Iterable[str] = ()) -> str:
    """Client address used as the rate limit key.

    Proxy headers are only read when the direct peer is a trusted proxy,
    otherwise any client could pick its own key.
    """
    peer = request.client.host if request.client and request.client.host else None
    if peer is not None and peer in set(trusted_proxies):
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
        real_ip = request.headers.get("x-real-ip")
        if real_ip:
            return real_ip.strip()
    return peer or "unknown"


class RateLimiter:
    """Counts hits per client IP in Redis and rejects past the limit.

    Fails open: with Redis unreachable every request is let through.
    """

    def __init__(self, scope: str):
        self.scope = scope

    async def __call__(self, request: Request, settings: Settings = Depends(get_settings)) -> None:
        limit = settings.public_rate_limit_requests
        window = settings.public_rate_limit_window_seconds
        if limit <= 0:
            return

        client_ip = get_client_ip(request, settings.trusted_proxies)
        redis_client = get_redis_client()
        try:
            await redis_client.connect()
        except Exception as e:
            logger.warning(f"Rate limiter disabled, Redis unavailable: {e}")
            return

        count = await redis_client.incr_window(f"ratelimit:{self.scope}:{client_ip}", window)
        if count is not None and count > limit:
            logger.warning(
                "Rate limit exceeded",
                extra={"scope": self.scope, "client_ip": client_ip, "count": count},
            )
            raise RateLimitedError(
                "Too many requests, please try again later",
                details={"limit": limit, "window_seconds": window},
            )


public_rate_limit = RateLimiter("public")
