"""
Tests for resolving the auth context from the session cookie.
"""

import uuid
from unittest.mock import MagicMock

import pytest

from qanda.auth.context import ANONYMOUS
from qanda.auth.middleware import get_auth_context
from qanda.auth.tokens import SessionTokenIssuer
from qanda.config import Settings
from qanda.logging import user_id_ctx

SECRET = "middleware-test-secret-that-is-32-chars"


def _request(cookies):
    request = MagicMock()
    request.cookies = cookies
    return request


@pytest.fixture
def config():
    return Settings(app_secret=SECRET)


@pytest.mark.asyncio
async def test_valid_cookie_authenticates(config):
    user_id = uuid.uuid4()
    token = SessionTokenIssuer.from_settings(config).issue(user_id)

    auth = await get_auth_context(_request({"token": token}), config)

    assert auth.is_authenticated
    assert auth.user_id == user_id
    assert auth.token == token
    assert user_id_ctx.get() == str(user_id)


@pytest.mark.asyncio
async def test_missing_cookie_is_anonymous(config):
    auth = await get_auth_context(_request({}), config)

    assert auth is ANONYMOUS
    assert not auth.is_authenticated


@pytest.mark.asyncio
async def test_invalid_cookie_is_anonymous(config):
    auth = await get_auth_context(_request({"token": "tampered"}), config)

    assert auth is ANONYMOUS


@pytest.mark.asyncio
async def test_no_secret_configured_is_anonymous():
    token = SessionTokenIssuer(secret_key=SECRET).issue(uuid.uuid4())

    auth = await get_auth_context(_request({"token": token}), Settings(app_secret=None))

    assert auth is ANONYMOUS
