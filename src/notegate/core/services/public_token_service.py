"""Issues, preserves and revokes the anonymous public-access token."""

import secrets
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import InternalError
from ..logging import get_logger
from ..models.note import Note
from ..repositories.note_repository import NoteRepository
from ..repositories.user_repository import UserRepository
from ..schemas.notes import PublicNoteResponse

logger = get_logger("services.public_token")

TOKEN_BYTES = 24  # 192 bits
MAX_ISSUE_ATTEMPTS = 5


def generate_public_token() -> str:
    """Generate an unguessable URL-safe token."""
    return secrets.token_urlsafe(TOKEN_BYTES)


class PublicTokenManager:
    """Owns the ``public_token`` field of notes.

    ``issue`` and ``revoke`` only mutate the note in the caller's session; the
    calling service commits them together with the visibility change.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.note_repo = NoteRepository(session)
        self.user_repo = UserRepository(session)

    async def issue(self, note: Note) -> str:
        """Give the note a token, keeping an existing one untouched."""
        if note.public_token:
            return note.public_token

        for _ in range(MAX_ISSUE_ATTEMPTS):
            token = generate_public_token()
            if not await self.note_repo.public_token_exists(token):
                note.public_token = token
                logger.info("Public token issued", extra={"note_id": str(note.id)})
                return token

        raise InternalError("Could not generate a unique public token")

    def revoke(self, note: Note) -> None:
        if note.public_token is not None:
            logger.info("Public token revoked", extra={"note_id": str(note.id)})
        note.public_token = None

    async def lookup(self, token: str) -> Optional[PublicNoteResponse]:
        """Resolve a token to the reduced public projection.

        Returns None unless the note behind the token is still public.
        """
        if not token:
            return None
        note = await self.note_repo.get_by_public_token(token)
        if note is None:
            return None

        owner = await self.user_repo.get_by_id(note.owner_id)
        return PublicNoteResponse(
            title=note.title,
            content=note.content,
            tags=list(note.tags or []),
            author_name=owner.display_name if owner else "Unknown",
            created_at=note.created_at,
            updated_at=note.updated_at,
        )
