"""Tests for PublicTokenManager."""

import pytest

from notegate.core.exceptions import InternalError
from notegate.core.repositories import NoteRepository
from notegate.core.services import public_token_service
from notegate.core.services.public_token_service import PublicTokenManager, generate_public_token


def test_generated_tokens_are_long_and_distinct():
    tokens = {generate_public_token() for _ in range(50)}
    assert len(tokens) == 50
    assert all(len(t) >= 32 for t in tokens)


async def _private_note(session, owner_id, title="Note"):
    return await NoteRepository(session).create_note(
        {"title": title, "content": "body", "owner_id": owner_id, "tags": ["a"]}
    )


async def test_issue_is_idempotent(session, users):
    manager = PublicTokenManager(session)
    note = await _private_note(session, users.alice.id)

    first = await manager.issue(note)
    second = await manager.issue(note)

    assert first == second == note.public_token


async def test_revoke_clears_token(session, users):
    manager = PublicTokenManager(session)
    note = await _private_note(session, users.alice.id)
    await manager.issue(note)

    manager.revoke(note)
    assert note.public_token is None


async def test_issue_redraws_on_collision(session, users, monkeypatch):
    first = await _private_note(session, users.alice.id, "first")
    first.public_token = "taken"
    first.visibility = "public"
    await session.commit()

    draws = iter(["taken", "taken", "fresh"])
    monkeypatch.setattr(public_token_service, "generate_public_token", lambda: next(draws))

    second = await _private_note(session, users.alice.id, "second")
    assert await PublicTokenManager(session).issue(second) == "fresh"


async def test_issue_gives_up_after_repeated_collisions(session, users, monkeypatch):
    first = await _private_note(session, users.alice.id, "first")
    first.public_token = "taken"
    first.visibility = "public"
    await session.commit()

    monkeypatch.setattr(public_token_service, "generate_public_token", lambda: "taken")

    second = await _private_note(session, users.alice.id, "second")
    with pytest.raises(InternalError):
        await PublicTokenManager(session).issue(second)
    assert second.public_token is None


async def test_lookup_returns_reduced_projection(session, users):
    note = await _private_note(session, users.alice.id)
    note.public_token = "tok"
    note.visibility = "public"
    await session.commit()

    public = await PublicTokenManager(session).lookup("tok")

    assert public.title == "Note"
    assert public.author_name == "Alice"
    assert set(public.model_dump()) == {
        "title",
        "content",
        "tags",
        "author_name",
        "created_at",
        "updated_at",
    }


async def test_lookup_unknown_or_empty_token(session, users):
    manager = PublicTokenManager(session)
    assert await manager.lookup("nope") is None
    assert await manager.lookup("") is None
