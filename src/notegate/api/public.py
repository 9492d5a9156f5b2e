"""Anonymous read access to public notes."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.schemas.notes import PublicNoteResponse
from ..core.services import NoteService
from ..database import get_db_session
from ..middleware.rate_limit import public_rate_limit

router = APIRouter(prefix="/public", tags=["public"])


@router.get(
    "/{token}",
    response_model=PublicNoteResponse,
    dependencies=[Depends(public_rate_limit)],
)
async def get_public_note(token: str, session: AsyncSession = Depends(get_db_session)):
    """Read a public note by its token. No authentication."""
    note_service = NoteService(session)
    return await note_service.get_public_note(token)
