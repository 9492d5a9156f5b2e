"""Tests for the JWT bearer dependency."""

from uuid import uuid4

import pytest
from starlette.requests import Request

from notegate.core.exceptions import AuthenticationError
from notegate.middleware.auth import JWTBearer
from notegate.security.jwt import create_access_token


def _request(authorization=None) -> Request:
    headers = []
    if authorization is not None:
        headers.append((b"authorization", authorization.encode()))
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


async def test_valid_token_resolves_user_id():
    user_id = uuid4()
    request = _request(f"Bearer {create_access_token({'sub': str(user_id)})}")

    assert await JWTBearer()(request) == user_id
    assert request.state.user_id == user_id


@pytest.mark.parametrize("header", [None, "Basic abc", "Bearer not-a-token"])
async def test_rejections_are_401(header):
    with pytest.raises(AuthenticationError) as exc:
        await JWTBearer()(_request(header))
    assert exc.value.status_code == 401
