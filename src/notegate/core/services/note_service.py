"""Note service implementation."""

from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ...database import unit_of_work
from ..exceptions import ForbiddenError, NotFoundError
from ..logging import get_logger
from ..models.note import Note, Visibility
from ..models.share import AccessLevel
from ..repositories.note_repository import NoteRepository
from ..repositories.user_repository import UserRepository
from ..schemas.notes import (
    NoteCreate,
    NoteListItem,
    NoteListResponse,
    NoteResponse,
    NoteStatsResponse,
    NoteUpdate,
    PublicNoteResponse,
    SharedNoteItem,
    SharedNoteListResponse,
)
from .access_resolver import AccessResolver
from .interfaces import INoteService
from .public_token_service import PublicTokenManager
from .visibility import WRITE_RECIPIENT_CAN_CHANGE_VISIBILITY, VisibilityStateMachine, parse_visibility

logger = get_logger("services.notes")

RECENT_NOTES_LIMIT = 3


class NoteService(INoteService):
    """Note service implementation."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.note_repo = NoteRepository(session)
        # Used to fetch author names for responses
        self.user_repo = UserRepository(session)
        self.access = AccessResolver(session)
        self.tokens = PublicTokenManager(session)
        self.visibility = VisibilityStateMachine(session, self.tokens)

    async def create_note(self, user_id: UUID, request: NoteCreate) -> NoteResponse:
        """Create new note. A public note gets its token in the same transaction."""
        async with unit_of_work(self.session):
            note = await self.note_repo.create_note(
                {
                    "title": request.title,
                    "content": request.content,
                    "tags": request.tags,
                    "visibility": Visibility.PRIVATE.value,
                    "owner_id": user_id,
                }
            )
            if request.visibility is not Visibility.PRIVATE:
                await self.visibility.transition(note, request.visibility)

        logger.info(
            "Note created", extra={"note_id": str(note.id), "visibility": note.visibility}
        )
        return await self._note_to_response(note, AccessLevel.OWNER)

    async def get_note(self, note_id: UUID, user_id: UUID) -> NoteResponse:
        """Get note by ID for its owner or any share recipient."""
        note, level = await self.access.require(note_id, user_id, AccessLevel.READ)
        return await self._note_to_response(note, level)

    async def update_note(self, note_id: UUID, user_id: UUID, request: NoteUpdate) -> NoteResponse:
        """Update a note. Needs write access; visibility stays with the owner."""
        async with unit_of_work(self.session):
            note, level = await self.access.require(note_id, user_id, AccessLevel.WRITE)

            if (
                request.visibility is not None
                and level is not AccessLevel.OWNER
                and not WRITE_RECIPIENT_CAN_CHANGE_VISIBILITY
            ):
                logger.warning(
                    "Visibility change by non-owner rejected",
                    extra={"note_id": str(note_id), "user_id": str(user_id)},
                )
                raise ForbiddenError("Only the note owner can change visibility")

            update_data = {
                key: value
                for key, value in request.model_dump(
                    exclude_unset=True, exclude={"visibility"}
                ).items()
                if value is not None
            }
            if update_data:
                await self.note_repo.update_fields(note, update_data)
            if request.visibility is not None:
                await self.visibility.transition(note, request.visibility)

        return await self._note_to_response(note, level)

    async def delete_note(self, note_id: UUID, user_id: UUID) -> bool:
        """Delete note and every share on it. Owner only."""
        async with unit_of_work(self.session):
            note, _ = await self.access.require(note_id, user_id, AccessLevel.OWNER)
            await self.note_repo.delete(note)

        logger.info("Note deleted", extra={"note_id": str(note_id)})
        return True

    async def list_notes(
        self,
        user_id: UUID,
        page: int = 1,
        per_page: int = 20,
        visibility: Optional[str] = None,
        tag: Optional[str] = None,
        q: Optional[str] = None,
    ) -> NoteListResponse:
        """List the user's own notes, newest update first."""
        if visibility:
            visibility = parse_visibility(visibility).value

        notes, total = await self.note_repo.list_user_notes(
            user_id, page=page, per_page=per_page, visibility=visibility, tag=tag, query=q
        )
        return NoteListResponse.create(
            items=[self._to_list_item(n) for n in notes],
            total=total,
            page=page,
            per_page=per_page,
        )

    async def list_shared_with_me(
        self, user_id: UUID, page: int = 1, per_page: int = 20
    ) -> SharedNoteListResponse:
        rows, total = await self.note_repo.list_shared_with_user(user_id, page, per_page)

        items = []
        for note, share in rows:
            owner = await self.user_repo.get_by_id(note.owner_id)
            items.append(
                SharedNoteItem(
                    **self._to_list_item(note).model_dump(),
                    author_name=owner.display_name if owner else None,
                    permission=share.permission,
                    share_id=share.id,
                    shared_at=share.created_at,
                )
            )
        return SharedNoteListResponse.create(
            items=items, total=total, page=page, per_page=per_page
        )

    async def get_note_stats(self, user_id: UUID) -> NoteStatsResponse:
        counts = await self.note_repo.visibility_counts(user_id)
        recent = await self.note_repo.recent_notes(user_id, RECENT_NOTES_LIMIT)
        return NoteStatsResponse(
            total=sum(counts.values()),
            **counts,
            recent=[self._to_list_item(n) for n in recent],
        )

    async def get_public_note(self, token: str) -> PublicNoteResponse:
        """Anonymous read through a public token."""
        public = await self.tokens.lookup(token)
        if public is None:
            raise NotFoundError("Public note not found")
        return public

    async def _note_to_response(self, note: Note, level: AccessLevel) -> NoteResponse:
        owner = await self.user_repo.get_by_id(note.owner_id)
        return NoteResponse(
            id=note.id,
            title=note.title,
            content=note.content,
            tags=list(note.tags or []),
            visibility=note.visibility,
            public_token=note.public_token if level is AccessLevel.OWNER else None,
            owner_id=note.owner_id,
            author_name=owner.display_name if owner else None,
            permission=level,
            created_at=note.created_at,
            updated_at=note.updated_at,
        )

    @staticmethod
    def _to_list_item(note: Note) -> NoteListItem:
        return NoteListItem(
            id=note.id,
            title=note.title,
            content_preview=note.preview,
            tags=list(note.tags or []),
            visibility=note.visibility,
            created_at=note.created_at,
            updated_at=note.updated_at,
        )
