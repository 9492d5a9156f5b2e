"""
User model for authentication.
"""

import uuid
from typing import TYPE_CHECKING, List

from sqlalchemy import Boolean, CheckConstraint, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel

if TYPE_CHECKING:
    from .note import Note
    from .refresh_token import RefreshToken
    from .share import Share


class User(BaseModel):
    """User account with email/password auth."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Relations
    notes: Mapped[List["Note"]] = relationship(
        "Note",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    shares_given: Mapped[List["Share"]] = relationship(
        "Share",
        foreign_keys="Share.shared_by_user_id",
        back_populates="shared_by_user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    shares_received: Mapped[List["Share"]] = relationship(
        "Share",
        foreign_keys="Share.shared_with_user_id",
        back_populates="shared_with_user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    refresh_tokens: Mapped[List["RefreshToken"]] = relationship(
        "RefreshToken",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint("length(email) <= 255", name="ck_users_email_len"),
        CheckConstraint("length(name) <= 100", name="ck_users_name_len"),
        Index("idx_users_active", "is_active"),
    )

    def __repr__(self) -> str:
        return f"<User(email='{self.email}')>"

    @property
    def display_name(self) -> str:
        """Name shown to other users, falls back to the email's local part."""
        return self.name or self.email.split("@", 1)[0]

    def can_login(self) -> bool:
        return self.is_active

    def owns(self, user_id: uuid.UUID) -> bool:
        return self.id == user_id
