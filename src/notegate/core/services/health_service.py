"""Health service implementation."""

import time
from typing import Any, Dict, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from ... import __version__
from ..logging import get_logger
from ..redis_client import RedisClient, get_redis_client
from ..schemas.common import HealthCheckResponse
from .interfaces import IHealthService

logger = get_logger("services.health")


class HealthService(IHealthService):
    """Health check service implementation."""

    def __init__(self, session: AsyncSession, redis_client: Optional[RedisClient] = None):
        self.session = session
        self.redis_client = redis_client or get_redis_client()

    async def get_health_status(self) -> HealthCheckResponse:
        db_health = await self.check_database_health()
        redis_health = await self.check_redis_health()

        # Redis only backs the blacklist and rate limits, so its loss degrades
        if not db_health["connected"]:
            overall_status = "unhealthy"
        elif not redis_health["connected"]:
            overall_status = "degraded"
        else:
            overall_status = "healthy"

        return HealthCheckResponse(
            status=overall_status,
            version=__version__,
            checks={"database": db_health, "redis": redis_health},
        )

    async def check_database_health(self) -> Dict[str, Any]:
        """Check DB connection with ``SELECT 1``."""
        start = time.perf_counter()
        try:
            result = await self.session.execute(text("SELECT 1"))
            result.scalar()
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return {"connected": False, "status": "unhealthy", "error": str(e), "response_time_ms": None}

        return {
            "connected": True,
            "status": "healthy",
            "response_time_ms": round((time.perf_counter() - start) * 1000, 2),
        }

    async def check_redis_health(self) -> Dict[str, Any]:
        """Check Redis connection with ``PING``."""
        start = time.perf_counter()
        try:
            await self.redis_client.connect()
            await self.redis_client.ping()
        except Exception as e:
            logger.warning(f"Redis health check failed: {e}")
            return {"connected": False, "status": "unhealthy", "error": str(e), "response_time_ms": None}

        return {
            "connected": True,
            "status": "healthy",
            "response_time_ms": round((time.perf_counter() - start) * 1000, 2),
        }
