"""Shared pytest fixtures: in-memory SQLite per test and an in-memory Redis."""

import logging
from types import SimpleNamespace

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import StaticPool

from notegate.config import Settings, get_settings
from notegate.core import redis_client as redis_module
from notegate.core.redis_client import RedisClient
from notegate.core.repositories.user_repository import UserRepository
from notegate.database import Database
from notegate.main import app
from notegate.security.jwt import create_access_token

# Silence extremely verbose DEBUG logs from aiosqlite to keep test output readable
logging.getLogger("aiosqlite").setLevel(logging.WARNING)

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


class FakeRedis:
    """Just enough of redis.asyncio.Redis for the blacklist and rate limiter."""

    def __init__(self):
        self.storage = {}
        self.ttls = {}

    async def ping(self):
        return True

    async def set(self, key, value):
        self.storage[key] = value
        return True

    async def setex(self, key, expire, value):
        self.storage[key] = value
        self.ttls[key] = expire
        return True

    async def exists(self, key):
        return 1 if key in self.storage else 0

    async def incr(self, key):
        self.storage[key] = int(self.storage.get(key, 0)) + 1
        return self.storage[key]

    async def expire(self, key, seconds):
        self.ttls[key] = seconds
        return True

    async def aclose(self):
        return None


@pytest.fixture
def test_settings():
    return Settings(database_url=TEST_DB_URL, secret_key="test-secret-key", debug=True)


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch):
    """Swap the Redis singleton for one backed by an in-memory dict."""
    client = RedisClient()
    client.redis = FakeRedis()
    monkeypatch.setattr(redis_module, "_redis_client", client)
    return client


def make_database() -> Database:
    # StaticPool keeps the one in-memory database alive across sessions
    return Database(
        TEST_DB_URL, poolclass=StaticPool, connect_args={"check_same_thread": False}
    )


@pytest.fixture
async def database():
    """Fresh schema for every test."""
    db = make_database()
    await db.create_tables()
    try:
        yield db
    finally:
        await db.drop_tables()
        await db.dispose()


@pytest.fixture
async def session(database):
    async with database.session() as s:
        yield s


async def create_user(session, email: str, name: str, password_hash: str = "not-a-real-hash"):
    """Insert a user and return a plain snapshot (safe to read after rollbacks)."""
    user = await UserRepository(session).create_user(
        {"email": email, "name": name, "password_hash": password_hash, "is_active": True}
    )
    await session.commit()
    return SimpleNamespace(id=user.id, email=user.email, name=user.name)


@pytest.fixture
async def users(session):
    """Three users: the owner ``alice`` and the recipients ``bob`` and ``carol``."""
    return SimpleNamespace(
        alice=await create_user(session, "alice@example.com", "Alice"),
        bob=await create_user(session, "bob@example.com", "Bob"),
        carol=await create_user(session, "carol@example.com", "Carol"),
    )


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': str(user.id)})}"}


@pytest.fixture
async def api_client(database, test_settings):
    """Async client talking to the app in-process, bound to the test database."""
    app.state.database = database
    app.dependency_overrides[get_settings] = lambda: test_settings
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()
        app.state.database = None
