"""Unit tests for password hashing."""

from notegate.security.password import hash_password, needs_update, verify_password


def test_hash_and_verify():
    hashed = hash_password("s3cret-password")
    assert hashed != "s3cret-password"
    assert verify_password("s3cret-password", hashed)
    assert not verify_password("other", hashed)
    assert not needs_update(hashed)


def test_long_passwords_are_not_truncated():
    base = "x" * 80
    hashed = hash_password(base + "a")
    assert not verify_password(base + "b", hashed)


def test_malformed_hash_never_matches():
    assert not verify_password("anything", "not-a-real-hash")
