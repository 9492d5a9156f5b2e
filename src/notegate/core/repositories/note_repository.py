"""Note repository for database operations."""

from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import Text, cast, delete, desc, func, literal, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.note import Note, Visibility
from ..models.share import Share
from ..models.types import TAG_SEPARATOR

LIKE_ESCAPE = "\\"


def escape_like(value: str) -> str:
    """Make user input match literally inside a LIKE pattern."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


class NoteRepository:
    """Repository for note database operations.

    Methods flush but never commit; the calling service owns the transaction.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_note(self, note_data: dict) -> Note:
        """Create new note."""
        note = Note(**note_data)
        self.session.add(note)
        await self.session.flush()
        return note

    async def get_by_id(self, note_id: UUID) -> Optional[Note]:
        return await self.session.get(Note, note_id)

    async def get_for_update(self, note_id: UUID) -> Optional[Note]:
        """Load a note with its row locked until the transaction ends.

        Share changes take this lock before counting shares so promotion and
        demotion of the same note are serialized.
        """
        stmt = (
            select(Note)
            .where(Note.id == note_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_public_token(self, token: str) -> Optional[Note]:
        """Get a note by token, only while it is still public."""
        stmt = select(Note).where(
            Note.public_token == token, Note.visibility == Visibility.PUBLIC.value
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def public_token_exists(self, token: str) -> bool:
        stmt = select(func.count(Note.id)).where(Note.public_token == token)
        result = await self.session.execute(stmt)
        return bool(result.scalar())

    async def update_fields(self, note: Note, update_data: Dict[str, Any]) -> Note:
        for key, value in update_data.items():
            setattr(note, key, value)
        await self.session.flush()
        return note

    async def delete(self, note: Note) -> None:
        """Delete a note together with every share on it."""
        await self.session.execute(delete(Share).where(Share.note_id == note.id))
        await self.session.delete(note)
        await self.session.flush()

    async def list_user_notes(
        self,
        user_id: UUID,
        page: int = 1,
        per_page: int = 20,
        visibility: Optional[str] = None,
        tag: Optional[str] = None,
        query: Optional[str] = None,
    ) -> Tuple[List[Note], int]:
        """List notes owned by user, newest update first."""
        conditions = [Note.owner_id == user_id]
        if visibility:
            conditions.append(Note.visibility == visibility)
        if tag:
            # tags are stored comma-joined; pad both sides so "go" never matches "golang"
            sep = literal(TAG_SEPARATOR, type_=Text)
            padded = sep + cast(Note.tags, Text) + sep
            pattern = f"%{TAG_SEPARATOR}{escape_like(tag.strip().lower())}{TAG_SEPARATOR}%"
            conditions.append(padded.like(pattern, escape=LIKE_ESCAPE))
        if query and query.strip():
            term = f"%{escape_like(query.strip())}%"
            conditions.append(
                or_(
                    Note.title.ilike(term, escape=LIKE_ESCAPE),
                    Note.content.ilike(term, escape=LIKE_ESCAPE),
                )
            )

        count_stmt = select(func.count(Note.id)).where(*conditions)
        total = (await self.session.execute(count_stmt)).scalar() or 0

        stmt = (
            select(Note)
            .where(*conditions)
            .order_by(desc(Note.updated_at))
            .offset((page - 1) * per_page)
            .limit(per_page)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars()), total

    async def list_shared_with_user(
        self, user_id: UUID, page: int = 1, per_page: int = 20
    ) -> Tuple[List[Tuple[Note, Share]], int]:
        """Notes shared with user, most recently shared first."""
        count_stmt = select(func.count(Share.id)).where(Share.shared_with_user_id == user_id)
        total = (await self.session.execute(count_stmt)).scalar() or 0

        stmt = (
            select(Note, Share)
            .join(Share, Share.note_id == Note.id)
            .where(Share.shared_with_user_id == user_id)
            .order_by(desc(Share.created_at))
            .offset((page - 1) * per_page)
            .limit(per_page)
        )
        result = await self.session.execute(stmt)
        return [(row[0], row[1]) for row in result.all()], total

    async def recent_notes(self, user_id: UUID, limit: int = 3) -> List[Note]:
        """User's most recently updated notes."""
        stmt = (
            select(Note)
            .where(Note.owner_id == user_id)
            .order_by(desc(Note.updated_at))
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars())

    async def visibility_counts(self, user_id: UUID) -> Dict[str, int]:
        """Count user's notes per visibility."""
        stmt = (
            select(Note.visibility, func.count(Note.id))
            .where(Note.owner_id == user_id)
            .group_by(Note.visibility)
        )
        result = await self.session.execute(stmt)
        counts = {v.value: 0 for v in Visibility}
        for visibility, count in result.all():
            counts[visibility] = count
        return counts
