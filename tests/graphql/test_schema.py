"""
Tests for schema wiring: field names, error codes and the request context.
"""

import uuid
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import Response

from qanda.auth.context import ANONYMOUS
from qanda.auth.manager import AuthResult
from qanda.dbmodels import Users
from qanda.errors import UserNotFoundError
from qanda.graphql.schema import get_context, schema, validate_schema


def test_validate_schema():
    validate_schema()


def test_mutation_fields_are_camel_case():
    mutation_type = schema._schema.mutation_type
    assert mutation_type is not None

    assert set(mutation_type.fields) == {
        "signup",
        "signin",
        "signout",
        "requestReset",
        "resetPassword",
        "updateUser",
        "createQuestion",
        "createQuestionView",
        "createTag",
        "createAnswer",
    }
    assert set(mutation_type.fields["resetPassword"].args) == {
        "resetToken",
        "password",
        "confirmPassword",
    }


def test_user_type_hides_secrets():
    user_type = schema._schema.get_type("User")

    assert set(user_type.fields) == {"id", "email", "name", "permissions"}


@pytest.mark.asyncio
async def test_get_context_carries_request_response_and_auth():
    request = MagicMock(cookies={})
    response = Response()

    context = await get_context(request, response)

    assert context["request"] is request
    assert context["response"] is response
    assert context["auth"] is ANONYMOUS


def _context():
    return {"request": MagicMock(cookies={}), "response": Response(), "auth": ANONYMOUS}


@pytest.mark.asyncio
async def test_domain_error_code_in_extensions():
    result = await schema.execute(
        'mutation { createTag(name: "python") { id name } }',
        context_value=_context(),
    )

    assert result.errors
    error = result.errors[0]
    assert error.message == "You must be logged in to do that!"
    assert error.extensions == {"code": "NOT_AUTHENTICATED"}


@pytest.mark.asyncio
async def test_signin_error_surfaces_message():
    manager = MagicMock()
    manager.authenticate = AsyncMock(
        side_effect=UserNotFoundError.for_email("ghost@example.com")
    )

    with patch("qanda.graphql.resolvers.auth.get_async_session") as mock_session, patch(
        "qanda.graphql.resolvers.auth.build_credential_manager", return_value=manager
    ):
        mock_session.return_value.__aenter__.return_value = AsyncMock()
        result = await schema.execute(
            'mutation { signin(email: "ghost@example.com", password: "x") { id } }',
            context_value=_context(),
        )

    assert result.errors[0].message == "No such user found for email ghost@example.com"
    assert result.errors[0].extensions["code"] == "USER_NOT_FOUND"


@pytest.mark.asyncio
async def test_signup_through_schema_sets_cookie():
    now = datetime.now(UTC)
    user = Users(
        id=uuid.uuid4(),
        email="new@example.com",
        name="New",
        password_hash="$2b$10$digest",
        permissions=["USER"],
        created_at=now,
        updated_at=now,
    )
    manager = MagicMock()
    manager.register = AsyncMock(return_value=AuthResult(user=user, token="jwt-token"))
    context = _context()

    with patch("qanda.graphql.resolvers.auth.get_async_session") as mock_session, patch(
        "qanda.graphql.resolvers.auth.build_credential_manager", return_value=manager
    ):
        mock_session.return_value.__aenter__.return_value = AsyncMock()
        result = await schema.execute(
            """
            mutation {
              signup(email: "new@example.com", password: "hunter22", name: "New") {
                id email name permissions
              }
            }
            """,
            context_value=context,
        )

    assert result.errors is None
    assert result.data["signup"] == {
        "id": str(user.id),
        "email": "new@example.com",
        "name": "New",
        "permissions": ["USER"],
    }
    assert context["response"].headers["set-cookie"].startswith("token=jwt-token;")


@pytest.mark.asyncio
async def test_signout_through_schema():
    context = _context()

    result = await schema.execute("mutation { signout { message } }", context_value=context)

    assert result.data == {"signout": {"message": "Goodbye!"}}
    assert "Max-Age=0" in context["response"].headers["set-cookie"]
