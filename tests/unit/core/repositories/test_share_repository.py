"""Tests for ShareRepository against in-memory SQLite."""

import pytest
from sqlalchemy.exc import IntegrityError

from notegate.core.repositories import NoteRepository, ShareRepository


@pytest.fixture
async def note(session, users):
    note = await NoteRepository(session).create_note(
        {"title": "Shared", "content": "", "owner_id": users.alice.id}
    )
    await session.commit()
    return note


def _share_data(note, owner, recipient, permission="read"):
    return {
        "note_id": note.id,
        "shared_by_user_id": owner.id,
        "shared_with_user_id": recipient.id,
        "permission": permission,
    }


async def test_create_loads_relations(session, users, note):
    share = await ShareRepository(session).create_share(_share_data(note, users.alice, users.bob))
    assert share.shared_with_user.email == "bob@example.com"
    assert share.note.title == "Shared"


async def test_duplicate_pair_violates_unique_constraint(session, users, note):
    repo = ShareRepository(session)
    await repo.create_share(_share_data(note, users.alice, users.bob))
    await session.commit()

    with pytest.raises(IntegrityError):
        await repo.create_share(_share_data(note, users.alice, users.bob, "write"))
    await session.rollback()


async def test_self_share_violates_check_constraint(session, users, note):
    with pytest.raises(IntegrityError):
        await ShareRepository(session).create_share(_share_data(note, users.alice, users.alice))
    await session.rollback()


async def test_lookup_and_counts(session, users, note):
    repo = ShareRepository(session)
    await repo.create_share(_share_data(note, users.alice, users.bob))
    await repo.create_share(_share_data(note, users.alice, users.carol, "write"))
    await session.commit()

    share = await repo.get_for_note_and_user(note.id, users.carol.id)
    assert share.permission == "write"
    assert await repo.get_for_note_and_user(note.id, users.alice.id) is None
    assert await repo.count_for_note(note.id) == 2

    items, total = await repo.list_for_note(note.id)
    assert total == 2
    assert len(items) == 2

    received, total = await repo.list_for_recipient(users.bob.id)
    assert total == 1
    assert received[0].note_id == note.id


async def test_update_permission_keeps_identity(session, users, note):
    repo = ShareRepository(session)
    share = await repo.create_share(_share_data(note, users.alice, users.bob))
    share_id = share.id

    await repo.update_permission(share, "write")
    await session.commit()

    reloaded = await repo.get_by_id(share_id)
    assert reloaded.permission == "write"
    assert await repo.count_for_note(note.id) == 1


async def test_share_stats(session, users, note):
    repo = ShareRepository(session)
    await repo.create_share(_share_data(note, users.alice, users.bob))
    await repo.create_share(_share_data(note, users.alice, users.carol))
    await session.commit()

    assert await repo.get_share_stats(users.alice.id) == {
        "notes_shared_by_me": 2,
        "notes_shared_with_me": 0,
        "unique_sharers": 0,
        "unique_recipients": 2,
    }
    assert (await repo.get_share_stats(users.bob.id))["unique_sharers"] == 1
