"""Tests for UserRepository and RefreshTokenRepository."""

from notegate.core.repositories import RefreshTokenRepository, UserRepository

from conftest import create_user


async def test_get_by_email_is_case_insensitive(session, users):
    repo = UserRepository(session)
    user = await repo.get_by_email("  ALICE@Example.com ")
    assert user.id == users.alice.id
    assert await repo.is_email_taken("bob@example.com")
    assert not await repo.is_email_taken("nobody@example.com")


async def test_search_matches_name_or_email_and_excludes_caller(session, users):
    repo = UserRepository(session)
    await create_user(session, "robert@corp.example", "Robert")

    found = await repo.search("rob", exclude_user_id=users.alice.id)
    assert {u.name for u in found} == {"Robert"}

    found = await repo.search("example.com", exclude_user_id=users.alice.id)
    assert {u.name for u in found} == {"Bob", "Carol"}


async def test_search_skips_inactive_users(session, users):
    repo = UserRepository(session)
    bob = await repo.get_by_id(users.bob.id)
    await repo.update_user(bob, {"is_active": False})
    await session.commit()

    assert await repo.search("bob", exclude_user_id=users.alice.id) == []


async def test_refresh_token_lifecycle(session, users):
    repo = RefreshTokenRepository(session)
    token = await repo.create_token(users.alice.id, expires_days=1)
    await repo.create_token(users.alice.id, expires_days=1)
    await session.commit()

    assert (await repo.get_by_token(token.token)).user_id == users.alice.id
    assert await repo.delete_token(token.token)
    assert not await repo.delete_token(token.token)
    assert await repo.delete_user_tokens(users.alice.id) == 1


async def test_search_treats_like_wildcards_literally(session, users):
    repo = UserRepository(session)

    assert await repo.search("%", exclude_user_id=users.alice.id) == []
    assert await repo.search("__", exclude_user_id=users.alice.id) == []
