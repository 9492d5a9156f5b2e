"""
Service layer: interfaces, the access and visibility core, and concrete services.
"""

from .interfaces import IAuthService, IHealthService, INoteService, ISharingService

from .access_resolver import AccessResolver
from .auth_service import AuthService
from .health_service import HealthService
from .note_service import NoteService
from .public_token_service import PublicTokenManager
from .sharing_service import SharingService
from .visibility import VisibilityStateMachine

__all__ = [
    # Interfaces
    "IAuthService",
    "INoteService",
    "ISharingService",
    "IHealthService",
    # Implementations
    "AccessResolver",
    "VisibilityStateMachine",
    "PublicTokenManager",
    "AuthService",
    "NoteService",
    "SharingService",
    "HealthService",
]
