import pytest
from pydantic import ValidationError

from notegate.core.schemas.auth import PasswordChangeRequest, RegisterRequest, UserUpdateRequest


def test_register_request_valid():
    request = RegisterRequest(
        email="ada@example.com", name=" Ada ", password="password123", confirm_password="password123"
    )
    assert request.name == "Ada"


def test_register_request_password_mismatch():
    with pytest.raises(ValidationError, match="Passwords do not match"):
        RegisterRequest(
            email="ada@example.com", name="Ada", password="password123", confirm_password="password456"
        )


def test_register_request_short_password():
    with pytest.raises(ValidationError):
        RegisterRequest(email="ada@example.com", name="Ada", password="short", confirm_password="short")


def test_password_change_mismatch():
    with pytest.raises(ValidationError, match="New passwords do not match"):
        PasswordChangeRequest(
            current_password="old", new_password="newpassword1", confirm_new_password="newpassword2"
        )


def test_user_update_blank_name():
    with pytest.raises(ValidationError, match="Name cannot be empty"):
        UserUpdateRequest(name="   ")


def test_user_update_allows_partial():
    assert UserUpdateRequest(email="new@example.com").model_dump(exclude_unset=True) == {
        "email": "new@example.com"
    }
