"""
Visibility state machine for notes.

States are ``private``, ``shared`` and ``public``. The owner may move a note
to any state directly. Share activity drives two derived transitions,
controlled by ``SHARE_DRIVEN_VISIBILITY``:

* first share on a ``private`` note promotes it to ``shared``
* revoking the last share on a ``shared`` note demotes it to ``private``

``public`` is never changed by share activity. Entering ``public`` issues a
public token, leaving it clears the token.
"""

from typing import Union

from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import InvalidOperationError
from ..logging import get_logger
from ..models.note import Note, Visibility
from .public_token_service import PublicTokenManager

logger = get_logger("services.visibility")

# Share create/revoke promotes private -> shared and demotes shared -> private.
SHARE_DRIVEN_VISIBILITY = True

# Visibility is owner-only; write recipients may edit title/content/tags only.
WRITE_RECIPIENT_CAN_CHANGE_VISIBILITY = False


def parse_visibility(value: Union[str, Visibility]) -> Visibility:
    """Coerce a literal to Visibility or raise InvalidOperationError."""
    try:
        return Visibility(value)
    except ValueError:
        allowed = ", ".join(v.value for v in Visibility)
        raise InvalidOperationError(
            f"Invalid visibility '{value}'. Must be one of: {allowed}"
        ) from None


class VisibilityStateMachine:
    """Applies visibility transitions to a note inside the caller's transaction."""

    def __init__(self, session: AsyncSession, token_manager: PublicTokenManager = None):
        self.session = session
        self.tokens = token_manager or PublicTokenManager(session)

    async def transition(self, note: Note, target: Union[str, Visibility]) -> Note:
        """Move the note to ``target`` at the owner's explicit request."""
        target = parse_visibility(target)
        current = note.visibility

        if target is Visibility.PUBLIC:
            # token first: the store rejects a public note without one
            await self.tokens.issue(note)
            note.visibility = target.value
        else:
            note.visibility = target.value
            self.tokens.revoke(note)

        if current != target.value:
            logger.info(
                "Note visibility changed",
                extra={"note_id": str(note.id), "from": current, "to": target.value},
            )
        return note

    async def on_share_created(self, note: Note) -> Note:
        if SHARE_DRIVEN_VISIBILITY and note.visibility == Visibility.PRIVATE.value:
            await self.transition(note, Visibility.SHARED)
        return note

    async def on_share_revoked(self, note: Note, remaining_shares: int) -> Note:
        if (
            SHARE_DRIVEN_VISIBILITY
            and remaining_shares == 0
            and note.visibility == Visibility.SHARED.value
        ):
            await self.transition(note, Visibility.PRIVATE)
        return note
