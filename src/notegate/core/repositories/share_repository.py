"""Share repository for database operations."""

from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.share import Share


class ShareRepository:
    """Repository for share database operations.

    Methods flush but never commit; the calling service owns the transaction.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_share(self, share_data: dict) -> Share:
        """Create new share."""
        share = Share(**share_data)
        self.session.add(share)
        await self.session.flush()
        await self.session.refresh(share, ["note", "shared_by_user", "shared_with_user"])
        return share

    async def get_by_id(self, share_id: UUID) -> Optional[Share]:
        stmt = select(Share).where(Share.id == share_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_for_note_and_user(self, note_id: UUID, user_id: UUID) -> Optional[Share]:
        """Get the share granting user access to note, if any."""
        stmt = select(Share).where(Share.note_id == note_id, Share.shared_with_user_id == user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_permission(self, share: Share, permission: str) -> Share:
        share.permission = permission
        await self.session.flush()
        return share

    async def delete(self, share: Share) -> None:
        await self.session.delete(share)
        await self.session.flush()

    async def count_for_note(self, note_id: UUID) -> int:
        stmt = select(func.count(Share.id)).where(Share.note_id == note_id)
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def list_for_note(
        self, note_id: UUID, page: int = 1, per_page: int = 20
    ) -> Tuple[List[Share], int]:
        """List shares on a note, oldest first."""
        total = await self.count_for_note(note_id)
        stmt = (
            select(Share)
            .where(Share.note_id == note_id)
            .order_by(Share.created_at)
            .offset((page - 1) * per_page)
            .limit(per_page)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars()), total

    async def list_for_recipient(
        self, user_id: UUID, page: int = 1, per_page: int = 20
    ) -> Tuple[List[Share], int]:
        """List shares received by user, newest first."""
        count_stmt = select(func.count(Share.id)).where(Share.shared_with_user_id == user_id)
        total = (await self.session.execute(count_stmt)).scalar() or 0

        stmt = (
            select(Share)
            .where(Share.shared_with_user_id == user_id)
            .order_by(desc(Share.created_at))
            .offset((page - 1) * per_page)
            .limit(per_page)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars()), total

    async def get_share_stats(self, user_id: UUID) -> dict:
        """Get sharing statistics for user."""
        given = (
            await self.session.execute(
                select(func.count(Share.id)).where(Share.shared_by_user_id == user_id)
            )
        ).scalar()
        received = (
            await self.session.execute(
                select(func.count(Share.id)).where(Share.shared_with_user_id == user_id)
            )
        ).scalar()
        sharers = (
            await self.session.execute(
                select(func.count(Share.shared_by_user_id.distinct())).where(
                    Share.shared_with_user_id == user_id
                )
            )
        ).scalar()
        recipients = (
            await self.session.execute(
                select(func.count(Share.shared_with_user_id.distinct())).where(
                    Share.shared_by_user_id == user_id
                )
            )
        ).scalar()

        return {
            "notes_shared_by_me": given or 0,
            "notes_shared_with_me": received or 0,
            "unique_sharers": sharers or 0,
            "unique_recipients": recipients or 0,
        }
