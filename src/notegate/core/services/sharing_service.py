"""Sharing service implementation."""

from typing import Union
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ...database import unit_of_work
from ..exceptions import ConflictError, ForbiddenError, InvalidOperationError, NotFoundError
from ..logging import get_logger
from ..models.share import AccessLevel, Share, SharePermission
from ..repositories.note_repository import NoteRepository
from ..repositories.share_repository import ShareRepository
from ..repositories.user_repository import UserRepository
from ..schemas.sharing import (
    NoteShareListResponse,
    ReceivedShareListResponse,
    ReceivedShareResponse,
    RevokeShareResponse,
    ShareResponse,
    ShareStatsResponse,
    ShareUser,
    UserSearchResponse,
    UserSearchResult,
)
from .access_resolver import AccessResolver
from .interfaces import ISharingService
from .visibility import VisibilityStateMachine

logger = get_logger("services.sharing")

MIN_SEARCH_LENGTH = 2
SEARCH_LIMIT = 10


def parse_permission(value: Union[str, SharePermission]) -> SharePermission:
    try:
        return SharePermission(value)
    except ValueError:
        raise InvalidOperationError(
            f"Invalid permission '{value}'. Must be 'read' or 'write'"
        ) from None


class SharingService(ISharingService):
    """Sharing service implementation."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.share_repo = ShareRepository(session)
        self.user_repo = UserRepository(session)
        self.note_repo = NoteRepository(session)
        self.access = AccessResolver(session)
        self.visibility = VisibilityStateMachine(session)

    async def create_share(
        self,
        owner_id: UUID,
        note_id: UUID,
        recipient_email: str,
        permission: Union[str, SharePermission] = SharePermission.READ,
    ) -> ShareResponse:
        """Share a note with one user and promote it out of private if needed."""
        permission = parse_permission(permission)

        async with unit_of_work(self.session):
            note, _ = await self.access.require(note_id, owner_id, AccessLevel.OWNER)
            note = await self.note_repo.get_for_update(note_id)

            recipient = await self.user_repo.get_by_email(recipient_email)
            if recipient is None:
                raise NotFoundError("User not found")
            if recipient.id == owner_id:
                raise InvalidOperationError("Cannot share note with yourself")

            existing = await self.share_repo.get_for_note_and_user(note_id, recipient.id)
            if existing is not None:
                raise ConflictError("Note is already shared with this user")

            try:
                share = await self.share_repo.create_share(
                    {
                        "note_id": note_id,
                        "shared_by_user_id": owner_id,
                        "shared_with_user_id": recipient.id,
                        "permission": permission.value,
                    }
                )
            except IntegrityError as e:
                # lost a race with a concurrent share of the same pair
                raise ConflictError("Note is already shared with this user") from e

            await self.visibility.on_share_created(note)

        logger.info(
            "Share created",
            extra={
                "share_id": str(share.id),
                "note_id": str(note_id),
                "recipient_id": str(recipient.id),
                "permission": permission.value,
            },
        )
        return self._to_share_response(share)

    async def revoke_share(self, share_id: UUID, acting_user_id: UUID) -> RevokeShareResponse:
        """Delete a share. Allowed for the note owner and the recipient."""
        async with unit_of_work(self.session):
            share = await self.share_repo.get_by_id(share_id)
            if share is None:
                raise NotFoundError("Share not found")

            note = await self.note_repo.get_for_update(share.note_id)
            is_owner = note.owner_id == acting_user_id
            if not is_owner and share.shared_with_user_id != acting_user_id:
                logger.warning(
                    "Share revoke denied",
                    extra={"share_id": str(share_id), "user_id": str(acting_user_id)},
                )
                raise ForbiddenError("Only the note owner or the recipient can revoke a share")

            note_id = share.note_id
            await self.share_repo.delete(share)
            remaining = await self.share_repo.count_for_note(note_id)
            await self.visibility.on_share_revoked(note, remaining)

        logger.info(
            "Share revoked",
            extra={
                "share_id": str(share_id),
                "note_id": str(note_id),
                "revoked_by": "owner" if is_owner else "recipient",
                "remaining_shares": remaining,
            },
        )
        return RevokeShareResponse(
            share_id=share_id, note_id=note_id, visibility=note.visibility
        )

    async def change_permission(
        self, share_id: UUID, owner_id: UUID, permission: Union[str, SharePermission]
    ) -> ShareResponse:
        """Change a share's permission in place; the share keeps its id."""
        permission = parse_permission(permission)

        async with unit_of_work(self.session):
            share = await self.share_repo.get_by_id(share_id)
            if share is None:
                raise NotFoundError("Share not found")

            note = await self.note_repo.get_by_id(share.note_id)
            if note is None or note.owner_id != owner_id:
                logger.warning(
                    "Permission change denied",
                    extra={"share_id": str(share_id), "user_id": str(owner_id)},
                )
                raise ForbiddenError("Only the note owner can change share permissions")

            previous = share.permission
            share = await self.share_repo.update_permission(share, permission.value)

        logger.info(
            "Share permission changed",
            extra={"share_id": str(share_id), "from": previous, "to": permission.value},
        )
        return self._to_share_response(share)

    async def list_note_shares(
        self, note_id: UUID, owner_id: UUID, page: int = 1, per_page: int = 20
    ) -> NoteShareListResponse:
        note, _ = await self.access.require(note_id, owner_id, AccessLevel.OWNER)
        shares, total = await self.share_repo.list_for_note(note_id, page, per_page)

        return NoteShareListResponse.create(
            items=[self._to_share_response(s) for s in shares],
            total=total,
            page=page,
            per_page=per_page,
            note_id=note.id,
            note_title=note.title,
            visibility=note.visibility,
        )

    async def list_received_shares(
        self, user_id: UUID, page: int = 1, per_page: int = 20
    ) -> ReceivedShareListResponse:
        """Shares the user has received, newest first."""
        shares, total = await self.share_repo.list_for_recipient(user_id, page, per_page)

        items = [
            ReceivedShareResponse(
                id=s.id,
                note_id=s.note_id,
                note_title=s.note.title,
                visibility=s.note.visibility,
                shared_by_name=s.shared_by_user.display_name,
                permission=s.permission,
                created_at=s.created_at,
            )
            for s in shares
        ]
        return ReceivedShareListResponse.create(
            items=items, total=total, page=page, per_page=per_page
        )

    async def search_users(self, query: str, acting_user_id: UUID) -> UserSearchResponse:
        """Find users to share with by name or email."""
        query = (query or "").strip()
        if len(query) < MIN_SEARCH_LENGTH:
            raise InvalidOperationError(
                f"Search query must be at least {MIN_SEARCH_LENGTH} characters"
            )

        users = await self.user_repo.search(query, exclude_user_id=acting_user_id, limit=SEARCH_LIMIT)
        return UserSearchResponse(
            query=query,
            users=[UserSearchResult(id=u.id, name=u.name, email=u.email) for u in users],
        )

    async def get_share_stats(self, user_id: UUID) -> ShareStatsResponse:
        stats = await self.share_repo.get_share_stats(user_id)
        return ShareStatsResponse(**stats)

    @staticmethod
    def _to_share_response(share: Share) -> ShareResponse:
        recipient = share.shared_with_user
        return ShareResponse(
            id=share.id,
            note_id=share.note_id,
            shared_with=ShareUser(id=recipient.id, name=recipient.name, email=recipient.email),
            permission=share.permission,
            created_at=share.created_at,
        )
