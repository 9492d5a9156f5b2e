"""Database engine, session factory and unit-of-work helper."""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from .config import Settings
from .core.exceptions import InternalError
from .core.logging import get_logger
from .core.models.base import BaseModel

logger = get_logger("database")


class Database:
    """Owns the engine and session factory for the lifetime of the app.

    Built once at startup and stored on ``app.state.database``; ``dispose()``
    is called from the lifespan shutdown branch.
    """

    def __init__(self, url: str, echo: bool = False, **engine_kwargs):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(url, echo=echo, **engine_kwargs)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine.sync_engine, "connect", _sqlite_on_connect)
            if _is_sqlite_file(self.engine.url.database):
                event.listen(self.engine.sync_engine, "connect", _sqlite_enable_wal)
        self.session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(settings.database_url, echo=settings.database_echo)

    async def create_tables(self) -> None:
        """Create all tables."""
        async with self.engine.begin() as conn:
            await conn.run_sync(BaseModel.metadata.create_all)

    async def drop_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(BaseModel.metadata.drop_all)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.session_factory() as session:
            yield session

    async def dispose(self) -> None:
        await self.engine.dispose()


def _is_sqlite_file(database: Optional[str]) -> bool:
    return bool(database) and database != ":memory:" and not database.startswith("file::memory:")


def _sqlite_on_connect(dbapi_connection, connection_record):  # noqa: ANN001
    # SQLite leaves FK enforcement (and so ON DELETE CASCADE) off by default
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


def _sqlite_enable_wal(dbapi_connection, connection_record):  # noqa: ANN001
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA journal_mode=WAL")
    finally:
        cursor.close()


async def get_db_session(request: Request) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency yielding a session from the app's Database."""
    database: Optional[Database] = getattr(request.app.state, "database", None)
    if database is None:
        raise InternalError("Database is not initialised")
    async with database.session() as session:
        yield session


@asynccontextmanager
async def unit_of_work(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Run a block as one transaction: commit on success, rollback on any error.

    Repositories only flush, so every record touched inside the block becomes
    visible to other connections together or not at all.
    """
    try:
        yield session
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error("Transaction rolled back after store failure", exc_info=e)
        raise InternalError("Store operation failed") from e
    except BaseException:
        await session.rollback()
        raise
