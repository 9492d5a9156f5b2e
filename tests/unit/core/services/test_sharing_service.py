"""Tests for SharingService against in-memory SQLite."""

import uuid
from unittest.mock import AsyncMock

import pytest

from notegate.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidOperationError,
    NotFoundError,
)
from notegate.core.models import Visibility
from notegate.core.repositories import ShareRepository
from notegate.core.schemas.notes import NoteCreate
from notegate.core.services import NoteService, SharingService


@pytest.fixture
async def note_id(session, users):
    note = await NoteService(session).create_note(users.alice.id, NoteCreate(title="Plan"))
    return note.id


async def _visibility(session, note_id, user_id):
    return (await NoteService(session).get_note(note_id, user_id)).visibility


class TestCreateShare:
    async def test_creates_share_and_promotes_private_note(self, session, users, note_id):
        service = SharingService(session)

        share = await service.create_share(users.alice.id, note_id, "Bob@Example.com", "write")

        assert share.note_id == note_id
        assert share.shared_with.id == users.bob.id
        assert share.permission == "write"
        assert await _visibility(session, note_id, users.alice.id) is Visibility.SHARED

    async def test_non_owner_is_forbidden(self, session, users, note_id):
        service = SharingService(session)
        await service.create_share(users.alice.id, note_id, "bob@example.com", "write")

        # write access is not enough to share further
        with pytest.raises(ForbiddenError):
            await service.create_share(users.bob.id, note_id, "carol@example.com", "read")

    async def test_missing_note_is_forbidden_not_not_found(self, session, users):
        with pytest.raises(ForbiddenError):
            await SharingService(session).create_share(
                users.alice.id, uuid.uuid4(), "bob@example.com", "read"
            )

    async def test_unknown_recipient(self, session, users, note_id):
        with pytest.raises(NotFoundError):
            await SharingService(session).create_share(
                users.alice.id, note_id, "ghost@example.com", "read"
            )

    async def test_self_share_rejected(self, session, users, note_id):
        with pytest.raises(InvalidOperationError):
            await SharingService(session).create_share(
                users.alice.id, note_id, "alice@example.com", "read"
            )
        assert await ShareRepository(session).count_for_note(note_id) == 0

    async def test_duplicate_pair_conflicts(self, session, users, note_id):
        service = SharingService(session)
        await service.create_share(users.alice.id, note_id, "bob@example.com", "read")

        with pytest.raises(ConflictError):
            await service.create_share(users.alice.id, note_id, "bob@example.com", "write")

        assert await ShareRepository(session).count_for_note(note_id) == 1

    async def test_unique_constraint_race_maps_to_conflict(self, session, users, note_id, monkeypatch):
        service = SharingService(session)
        await service.create_share(users.alice.id, note_id, "bob@example.com", "read")

        # pretend the pre-check ran before a concurrent insert landed
        monkeypatch.setattr(service.share_repo, "get_for_note_and_user", AsyncMock(return_value=None))

        with pytest.raises(ConflictError):
            await service.create_share(users.alice.id, note_id, "bob@example.com", "write")

        assert await ShareRepository(session).count_for_note(note_id) == 1

    async def test_invalid_permission_literal(self, session, users, note_id):
        with pytest.raises(InvalidOperationError):
            await SharingService(session).create_share(
                users.alice.id, note_id, "bob@example.com", "admin"
            )

    async def test_public_note_stays_public(self, session, users):
        note = await NoteService(session).create_note(
            users.alice.id, NoteCreate(title="Open", visibility="public")
        )
        await SharingService(session).create_share(users.alice.id, note.id, "bob@example.com", "read")

        reloaded = await NoteService(session).get_note(note.id, users.alice.id)
        assert reloaded.visibility is Visibility.PUBLIC
        assert reloaded.public_token == note.public_token


    async def test_locks_note_row_before_promoting(self, session, users, note_id, monkeypatch):
        service = SharingService(session)
        lock = AsyncMock(wraps=service.note_repo.get_for_update)
        monkeypatch.setattr(service.note_repo, "get_for_update", lock)

        await service.create_share(users.alice.id, note_id, "bob@example.com", "read")

        lock.assert_awaited_once_with(note_id)


class TestRevokeShare:
    async def test_owner_revokes_last_share_and_note_demotes(self, session, users, note_id):
        service = SharingService(session)
        share = await service.create_share(users.alice.id, note_id, "bob@example.com", "read")

        result = await service.revoke_share(share.id, users.alice.id)

        assert result.visibility is Visibility.PRIVATE
        assert await _visibility(session, note_id, users.alice.id) is Visibility.PRIVATE

    async def test_demotion_waits_for_last_share(self, session, users, note_id):
        service = SharingService(session)
        share = await service.create_share(users.alice.id, note_id, "bob@example.com", "read")
        await service.create_share(users.alice.id, note_id, "carol@example.com", "read")

        result = await service.revoke_share(share.id, users.alice.id)
        assert result.visibility is Visibility.SHARED

    async def test_recipient_can_revoke_own_share(self, session, users, note_id):
        service = SharingService(session)
        share = await service.create_share(users.alice.id, note_id, "bob@example.com", "read")

        await service.revoke_share(share.id, users.bob.id)

        with pytest.raises(ForbiddenError):
            await NoteService(session).get_note(note_id, users.bob.id)

    async def test_third_party_cannot_revoke(self, session, users, note_id):
        service = SharingService(session)
        share = await service.create_share(users.alice.id, note_id, "bob@example.com", "read")

        with pytest.raises(ForbiddenError):
            await service.revoke_share(share.id, users.carol.id)
        assert await ShareRepository(session).count_for_note(note_id) == 1

    async def test_locks_note_row_before_demoting(self, session, users, note_id, monkeypatch):
        service = SharingService(session)
        share = await service.create_share(users.alice.id, note_id, "bob@example.com", "read")
        lock = AsyncMock(wraps=service.note_repo.get_for_update)
        monkeypatch.setattr(service.note_repo, "get_for_update", lock)

        await service.revoke_share(share.id, users.alice.id)

        lock.assert_awaited_once_with(note_id)

    async def test_missing_share(self, session, users):
        with pytest.raises(NotFoundError):
            await SharingService(session).revoke_share(uuid.uuid4(), users.alice.id)


class TestChangePermission:
    async def test_updates_in_place(self, session, users, note_id):
        service = SharingService(session)
        share = await service.create_share(users.alice.id, note_id, "bob@example.com", "read")

        updated = await service.change_permission(share.id, users.alice.id, "write")

        assert updated.id == share.id
        assert updated.permission == "write"
        note = await NoteService(session).get_note(note_id, users.bob.id)
        assert note.permission == "write"

    async def test_recipient_cannot_upgrade_self(self, session, users, note_id):
        service = SharingService(session)
        share = await service.create_share(users.alice.id, note_id, "bob@example.com", "read")

        with pytest.raises(ForbiddenError):
            await service.change_permission(share.id, users.bob.id, "write")

    async def test_missing_share_before_ownership(self, session, users):
        with pytest.raises(NotFoundError):
            await SharingService(session).change_permission(uuid.uuid4(), users.carol.id, "write")


class TestQueries:
    async def test_note_shares_are_owner_only(self, session, users, note_id):
        service = SharingService(session)
        await service.create_share(users.alice.id, note_id, "bob@example.com", "read")
        await service.create_share(users.alice.id, note_id, "carol@example.com", "write")

        listing = await service.list_note_shares(note_id, users.alice.id)
        assert listing.total == 2
        assert listing.note_title == "Plan"
        assert {s.shared_with.email for s in listing.items} == {"bob@example.com", "carol@example.com"}

        with pytest.raises(ForbiddenError):
            await service.list_note_shares(note_id, users.bob.id)

    async def test_received_inbox(self, session, users, note_id):
        service = SharingService(session)
        await service.create_share(users.alice.id, note_id, "bob@example.com", "read")

        inbox = await service.list_received_shares(users.bob.id)
        assert inbox.total == 1
        item = inbox.items[0]
        assert item.note_title == "Plan"
        assert item.shared_by_name == "Alice"
        assert item.visibility is Visibility.SHARED

        assert (await service.list_received_shares(users.carol.id)).total == 0

    async def test_search_users(self, session, users):
        service = SharingService(session)

        result = await service.search_users("car", users.alice.id)
        assert [u.email for u in result.users] == ["carol@example.com"]

        assert (await service.search_users("alice", users.alice.id)).users == []

        with pytest.raises(InvalidOperationError):
            await service.search_users("c", users.alice.id)

    async def test_share_stats(self, session, users, note_id):
        service = SharingService(session)
        await service.create_share(users.alice.id, note_id, "bob@example.com", "read")

        stats = await service.get_share_stats(users.alice.id)
        assert stats.notes_shared_by_me == 1
        assert stats.unique_recipients == 1
        assert (await service.get_share_stats(users.bob.id)).notes_shared_with_me == 1
