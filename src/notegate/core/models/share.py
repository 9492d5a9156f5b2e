# Note sharing between users
import uuid
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel
from .types import GUID

if TYPE_CHECKING:
    from .note import Note
    from .user import User


class SharePermission(str, Enum):
    """Capability a recipient holds on a shared note."""

    READ = "read"
    WRITE = "write"


class Share(BaseModel):
    """Grants one recipient read or write access to one note."""

    __tablename__ = "shares"

    note_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False
    )
    shared_by_user_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    shared_with_user_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    permission: Mapped[str] = mapped_column(
        String(10), default=SharePermission.READ.value, nullable=False
    )

    note: Mapped["Note"] = relationship("Note", back_populates="shares", lazy="selectin")
    shared_by_user: Mapped["User"] = relationship(
        "User",
        foreign_keys=[shared_by_user_id],
        back_populates="shares_given",
        lazy="selectin",
    )
    shared_with_user: Mapped["User"] = relationship(
        "User",
        foreign_keys=[shared_with_user_id],
        back_populates="shares_received",
        lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint("note_id", "shared_with_user_id", name="uq_shares_note_recipient"),
        CheckConstraint("permission IN ('read', 'write')", name="ck_shares_permission"),
        CheckConstraint("shared_by_user_id <> shared_with_user_id", name="ck_shares_not_self"),
        Index("idx_shares_note_id", "note_id"),
        Index("idx_shares_shared_by", "shared_by_user_id"),
        Index("idx_shares_shared_with", "shared_with_user_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Share(note_id={self.note_id}, shared_with={self.shared_with_user_id}, "
            f"permission={self.permission})>"
        )

    @property
    def can_write(self) -> bool:
        return self.permission == SharePermission.WRITE


class AccessLevel(str, Enum):
    """Resolved permission of a requester on a note."""

    NONE = "none"
    READ = "read"
    WRITE = "write"
    OWNER = "owner"

    @property
    def rank(self) -> int:
        return _ACCESS_RANK[self]

    def allows(self, needed: "AccessLevel") -> bool:
        return self.rank >= needed.rank

    @classmethod
    def from_permission(cls, permission: str) -> "AccessLevel":
        return cls.WRITE if permission == SharePermission.WRITE else cls.READ


_ACCESS_RANK = {
    AccessLevel.NONE: 0,
    AccessLevel.READ: 1,
    AccessLevel.WRITE: 2,
    AccessLevel.OWNER: 3,
}
