"""User repository for database operations."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.user import User
from .note_repository import LIKE_ESCAPE, escape_like


class UserRepository:
    """Repository for user database operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_user(self, user_data: dict) -> User:
        """Create new user."""
        user = User(**user_data)
        self.session.add(user)
        await self.session.flush()
        return user

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        return await self.session.get(User, user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email, case-insensitively."""
        stmt = select(User).where(User.email == email.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_user(self, user: User, update_data: dict) -> User:
        for key, value in update_data.items():
            setattr(user, key, value)
        await self.session.flush()
        return user

    async def is_email_taken(self, email: str) -> bool:
        return await self.get_by_email(email) is not None

    async def search(self, query: str, exclude_user_id: UUID, limit: int = 10) -> List[User]:
        """Find active users whose name or email contains query."""
        term = f"%{escape_like(query.strip().lower())}%"
        stmt = (
            select(User)
            .where(
                or_(
                    func.lower(User.name).like(term, escape=LIKE_ESCAPE),
                    User.email.like(term, escape=LIKE_ESCAPE),
                ),
                User.id != exclude_user_id,
                User.is_active.is_(True),
            )
            .order_by(User.name)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars())
