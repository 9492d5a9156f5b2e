"""Redis client for the token blacklist and rate-limit counters."""

from typing import Optional

import redis.asyncio as redis

from ..config import Settings, get_settings
from .logging import get_logger

logger = get_logger("redis")


class RedisClient:
    """Thin async wrapper around redis-py.

    Every helper degrades to a neutral value when Redis is unavailable, so a
    Redis outage never takes the note API down with it.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.redis: Optional[redis.Redis] = None

    @property
    def connected(self) -> bool:
        return self.redis is not None

    async def connect(self) -> None:
        """Connect to Redis. No-op when already connected."""
        if self.redis is not None:
            return
        client = redis.from_url(
            self.settings.redis_url,
            max_connections=self.settings.redis_max_connections,
            decode_responses=True,
        )
        try:
            await client.ping()
        except Exception as e:
            logger.error(f"Failed to connect to Redis: {e}")
            await client.aclose()
            raise
        self.redis = client
        logger.info("Connected to Redis successfully")

    async def disconnect(self) -> None:
        """Disconnect from Redis."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            logger.info("Disconnected from Redis")

    async def ping(self) -> bool:
        if not self.redis:
            return False
        return bool(await self.redis.ping())

    async def set(self, key: str, value: str, expire: Optional[int] = None) -> bool:
        """Set value in Redis with optional expiration."""
        if not self.redis:
            return False
        try:
            if expire:
                return bool(await self.redis.setex(key, expire, value))
            return bool(await self.redis.set(key, value))
        except Exception as e:
            logger.error(f"Redis SET error for key {key}: {e}")
            return False

    async def exists(self, key: str) -> bool:
        """Check if key exists in Redis."""
        if not self.redis:
            return False
        try:
            return await self.redis.exists(key) > 0
        except Exception as e:
            logger.error(f"Redis EXISTS error for key {key}: {e}")
            return False

    async def add_to_blacklist(self, token_jti: str, expire: int = 900) -> bool:
        """Add token to blacklist (for secure logout)."""
        return await self.set(f"blacklist:{token_jti}", "blacklisted", expire)

    async def is_token_blacklisted(self, token_jti: str) -> bool:
        return await self.exists(f"blacklist:{token_jti}")

    # Rate limiting
    async def incr_window(self, key: str, window_seconds: int) -> Optional[int]:
        """Increment a fixed-window counter and return the new count.

        The window starts at the first hit; later hits don't extend it.
        Returns None when Redis is unavailable.
        """
        if not self.redis:
            return None
        try:
            count = await self.redis.incr(key)
            if count == 1:
                await self.redis.expire(key, window_seconds)
            return int(count)
        except Exception as e:
            logger.error(f"Rate limit error for key {key}: {e}")
            return None


# Singleton instance
_redis_client: Optional[RedisClient] = None


def get_redis_client() -> RedisClient:
    """Get Redis client singleton."""
    global _redis_client
    if _redis_client is None:
        _redis_client = RedisClient()
    return _redis_client
