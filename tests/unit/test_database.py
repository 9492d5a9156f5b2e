"""Tests for the Database wrapper and its SQLite connection setup."""

from sqlalchemy import text

from notegate.database import Database


async def _pragma(db: Database, name: str):
    async with db.engine.connect() as conn:
        return (await conn.execute(text(f"PRAGMA {name}"))).scalar()


async def test_memory_database_keeps_default_journal():
    db = Database("sqlite+aiosqlite:///:memory:")
    try:
        assert await _pragma(db, "journal_mode") == "memory"
        assert await _pragma(db, "foreign_keys") == 1
    finally:
        await db.dispose()


async def test_file_database_uses_wal(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'notes.db'}")
    try:
        assert await _pragma(db, "journal_mode") == "wal"
        assert await _pragma(db, "foreign_keys") == 1
    finally:
        await db.dispose()
