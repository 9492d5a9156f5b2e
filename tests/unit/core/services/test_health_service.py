"""Tests for HealthService."""

from notegate.core.services import HealthService


async def test_all_healthy(session, fake_redis):
    status = await HealthService(session, fake_redis).get_health_status()

    assert status.status == "healthy"
    assert status.checks["database"]["connected"]
    assert status.checks["redis"]["connected"]


async def test_redis_down_is_degraded(session, fake_redis, monkeypatch):
    async def boom():
        raise ConnectionError("refused")

    monkeypatch.setattr(fake_redis, "ping", boom)

    status = await HealthService(session, fake_redis).get_health_status()
    assert status.status == "degraded"
    assert status.checks["redis"]["error"] == "refused"
