"""
Database models for NoteGate.

SQLAlchemy ORM models defining the schema:
    - User: account identity (email, display name, credential hash)
    - Note: note content, tags, visibility and the optional public token
    - Share: per-recipient read/write grant on a note
    - RefreshToken: JWT refresh token management
"""

from .base import BaseModel
from .note import Note, Visibility
from .refresh_token import RefreshToken
from .share import AccessLevel, Share, SharePermission
from .user import User

__all__ = [
    "BaseModel",
    "User",
    "Note",
    "Visibility",
    "Share",
    "SharePermission",
    "AccessLevel",
    "RefreshToken",
]
