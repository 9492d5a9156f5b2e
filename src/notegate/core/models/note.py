# Note model for user content
import uuid
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import BaseModel
from .types import GUID, TagListType

if TYPE_CHECKING:
    from .share import Share
    from .user import User


class Visibility(str, Enum):
    """Who can see a note."""

    PRIVATE = "private"
    SHARED = "shared"
    PUBLIC = "public"


class Note(BaseModel):
    """Note with title, content and tags."""

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    tags: Mapped[List[str]] = mapped_column(TagListType, nullable=False, default=list)

    visibility: Mapped[str] = mapped_column(
        String(10), nullable=False, default=Visibility.PRIVATE.value
    )
    # set only while visibility is public
    public_token: Mapped[Optional[str]] = mapped_column(String(64), unique=True, nullable=True)

    owner_id: Mapped[uuid.UUID] = mapped_column(
        GUID(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    owner: Mapped["User"] = relationship("User", back_populates="notes", lazy="selectin")

    shares: Mapped[List["Share"]] = relationship(
        "Share",
        back_populates="note",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint(
            "visibility IN ('private', 'shared', 'public')", name="ck_notes_visibility"
        ),
        CheckConstraint(
            "(visibility = 'public' AND public_token IS NOT NULL)"
            " OR (visibility <> 'public' AND public_token IS NULL)",
            name="ck_notes_public_token",
        ),
        CheckConstraint("length(title) <= 200", name="ck_notes_title_len"),
        Index("idx_notes_owner_id", "owner_id"),
        Index("idx_notes_visibility", "visibility"),
        Index("idx_notes_owner_updated", "owner_id", "updated_at"),
    )

    def __repr__(self) -> str:
        truncated = self.title if len(self.title) <= 30 else (self.title[:30] + "...")
        return f"<Note(title='{truncated}', visibility={self.visibility})>"

    @property
    def is_public(self) -> bool:
        return self.visibility == Visibility.PUBLIC

    @property
    def preview(self) -> str:
        """Get content preview."""
        if len(self.content) <= 200:
            return self.content
        return self.content[:197] + "..."

    def is_owned_by(self, user_id: uuid.UUID) -> bool:
        return self.owner_id == user_id
