"""API routers for NoteGate."""

from .auth import router as auth_router
from .health import router as health_router
from .notes import router as notes_router
from .public import router as public_router
from .sharing import router as sharing_router

__all__ = ["auth_router", "notes_router", "public_router", "sharing_router", "health_router"]
