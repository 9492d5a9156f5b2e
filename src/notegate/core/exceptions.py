"""
Domain errors raised by the service layer.

Services never raise HTTPException directly; the API layer maps these to
transport responses through the handlers registered in ``main.py``.
"""

from typing import Any, Dict, Optional


class NoteGateError(Exception):
    """Base class for all expected service failures."""

    status_code: int = 500
    error: str = "InternalError"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class NotFoundError(NoteGateError):
    """Note, share or recipient user does not exist."""

    status_code = 404
    error = "NotFound"


class ForbiddenError(NoteGateError):
    """Authenticated but lacking the required permission."""

    status_code = 403
    error = "Forbidden"


class InvalidOperationError(NoteGateError):
    """Self-share, bad visibility/permission literal and similar."""

    status_code = 400
    error = "InvalidOperation"


class ConflictError(NoteGateError):
    """Duplicate share for a (note, recipient) pair, taken email."""

    status_code = 409
    error = "Conflict"


class AuthenticationError(NoteGateError):
    """Bad credentials or unusable token."""

    status_code = 401
    error = "Unauthorized"


class RateLimitedError(NoteGateError):
    status_code = 429
    error = "TooManyRequests"


class InternalError(NoteGateError):
    """Store failure."""

    status_code = 500
    error = "InternalError"
