"""Resolves what a requester may do with a note."""

from typing import Optional, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import ForbiddenError
from ..logging import get_logger
from ..models.note import Note
from ..models.share import AccessLevel
from ..repositories.note_repository import NoteRepository
from ..repositories.share_repository import ShareRepository

logger = get_logger("services.access")


class AccessResolver:
    """Single source of truth for note permissions.

    Every note and sharing entry point goes through ``require``; nothing else
    re-derives ownership or share checks.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.note_repo = NoteRepository(session)
        self.share_repo = ShareRepository(session)

    async def resolve(self, note_id: UUID, user_id: UUID) -> AccessLevel:
        """Return the requester's permission; ``NONE`` for a missing note."""
        _, level = await self._lookup(note_id, user_id)
        return level

    async def require(
        self, note_id: UUID, user_id: UUID, needed: AccessLevel = AccessLevel.READ
    ) -> Tuple[Note, AccessLevel]:
        """Load the note and check the requester holds at least ``needed``.

        A missing note and a note the user cannot see both raise the same
        ForbiddenError, so callers can't probe for existence.
        """
        note, level = await self._lookup(note_id, user_id)
        if note is None or level is AccessLevel.NONE:
            logger.warning(
                "Note access denied", extra={"note_id": str(note_id), "user_id": str(user_id)}
            )
            raise ForbiddenError("Access denied")
        if not level.allows(needed):
            logger.warning(
                "Insufficient note permission",
                extra={
                    "note_id": str(note_id),
                    "user_id": str(user_id),
                    "has": level.value,
                    "needed": needed.value,
                },
            )
            raise ForbiddenError(f"This operation requires {needed.value} access")
        return note, level

    async def _lookup(self, note_id: UUID, user_id: UUID) -> Tuple[Optional[Note], AccessLevel]:
        note = await self.note_repo.get_by_id(note_id)
        if note is None:
            return None, AccessLevel.NONE
        if note.owner_id == user_id:
            return note, AccessLevel.OWNER

        share = await self.share_repo.get_for_note_and_user(note_id, user_id)
        if share is None:
            return note, AccessLevel.NONE
        return note, AccessLevel.from_permission(share.permission)
