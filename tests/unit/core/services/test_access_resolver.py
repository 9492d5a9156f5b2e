"""Tests for AccessResolver."""

import uuid

import pytest

from notegate.core.exceptions import ForbiddenError
from notegate.core.models import AccessLevel
from notegate.core.repositories import NoteRepository, ShareRepository
from notegate.core.services import AccessResolver


@pytest.fixture
async def shared_note(session, users):
    note = await NoteRepository(session).create_note(
        {"title": "Doc", "content": "", "owner_id": users.alice.id, "visibility": "shared"}
    )
    await ShareRepository(session).create_share(
        {
            "note_id": note.id,
            "shared_by_user_id": users.alice.id,
            "shared_with_user_id": users.bob.id,
            "permission": "read",
        }
    )
    await session.commit()
    return note.id


async def test_resolve_levels(session, users, shared_note):
    resolver = AccessResolver(session)
    assert await resolver.resolve(shared_note, users.alice.id) is AccessLevel.OWNER
    assert await resolver.resolve(shared_note, users.bob.id) is AccessLevel.READ
    assert await resolver.resolve(shared_note, users.carol.id) is AccessLevel.NONE


async def test_missing_note_resolves_to_none(session, users):
    assert await AccessResolver(session).resolve(uuid.uuid4(), users.alice.id) is AccessLevel.NONE


async def test_missing_and_unshared_notes_are_indistinguishable(session, users, shared_note):
    resolver = AccessResolver(session)

    with pytest.raises(ForbiddenError) as missing:
        await resolver.require(uuid.uuid4(), users.carol.id)
    with pytest.raises(ForbiddenError) as hidden:
        await resolver.require(shared_note, users.carol.id)

    assert missing.value.message == hidden.value.message


async def test_require_rejects_insufficient_level(session, users, shared_note):
    resolver = AccessResolver(session)

    note, level = await resolver.require(shared_note, users.bob.id, AccessLevel.READ)
    assert note.id == shared_note
    assert level is AccessLevel.READ

    with pytest.raises(ForbiddenError):
        await resolver.require(shared_note, users.bob.id, AccessLevel.WRITE)
    with pytest.raises(ForbiddenError):
        await resolver.require(shared_note, users.bob.id, AccessLevel.OWNER)


async def test_write_share_grants_write(session, users, shared_note):
    share = await ShareRepository(session).get_for_note_and_user(shared_note, users.bob.id)
    await ShareRepository(session).update_permission(share, "write")
    await session.commit()

    _, level = await AccessResolver(session).require(shared_note, users.bob.id, AccessLevel.WRITE)
    assert level is AccessLevel.WRITE
