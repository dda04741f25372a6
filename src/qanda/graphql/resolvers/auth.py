from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry
from fastapi import Response
from sqlalchemy.ext.asyncio import AsyncSession

from ...auth.cookies import clear_session_cookie, set_session_cookie
from ...auth.manager import CredentialManager
from ...auth.store import SqlAlchemyUserStore
from ...config import settings
from ...database.connection import get_async_session
from ...logging import get_logger
from ...mail import get_mail_transport
from ..access_control import get_auth_context_from_info

if TYPE_CHECKING:
    from ..types.message import SuccessMessage
    from ..types.user import User

logger = get_logger(__name__)


def build_credential_manager(session: AsyncSession) -> CredentialManager:
    """Wire a manager to the request's database session and configured mailer."""
    return CredentialManager(
        SqlAlchemyUserStore(session),
        config=settings,
        mailer=get_mail_transport(settings),
    )


def _response_from_info(info: strawberry.Info) -> Response | None:
    response = info.context.get("response")
    if response is None:
        logger.error("Response not found in GraphQL context; session cookie not changed")
    return response


async def signup(
    info: strawberry.Info, email: str, password: str, name: str | None = None
) -> User:
    """Create an account and start a session for it."""
    from ..types.user import User as UserType

    async with get_async_session() as session:
        manager = build_credential_manager(session)
        result = await manager.register(email, password, {"name": name})
        user = UserType.from_model(result.user)

    response = _response_from_info(info)
    if response is not None:
        set_session_cookie(response, result.token)
    return user


async def signin(info: strawberry.Info, email: str, password: str) -> User:
    """Check credentials and start a session."""
    from ..types.user import User as UserType

    async with get_async_session() as session:
        manager = build_credential_manager(session)
        result = await manager.authenticate(email, password)
        user = UserType.from_model(result.user)

    response = _response_from_info(info)
    if response is not None:
        set_session_cookie(response, result.token)
    return user


async def signout(info: strawberry.Info) -> SuccessMessage:
    """End the session by clearing the cookie."""
    from ..types.message import SuccessMessage as SuccessMessageType

    ack = CredentialManager.logout()
    response = _response_from_info(info)
    if response is not None:
        clear_session_cookie(response)
    return SuccessMessageType(message=ack.message)


async def request_reset(info: strawberry.Info, email: str) -> SuccessMessage:
    """Email a password reset link to the account holder."""
    from ..types.message import SuccessMessage as SuccessMessageType

    async with get_async_session() as session:
        manager = build_credential_manager(session)
        ack = await manager.issue_reset_token(email)

    return SuccessMessageType(message=ack.message)


async def reset_password(
    info: strawberry.Info, reset_token: str, password: str, confirm_password: str
) -> User:
    """Redeem a reset token, set the new password and start a session."""
    from ..types.user import User as UserType

    async with get_async_session() as session:
        manager = build_credential_manager(session)
        result = await manager.consume_reset_token(reset_token, password, confirm_password)
        user = UserType.from_model(result.user)

    response = _response_from_info(info)
    if response is not None:
        set_session_cookie(response, result.token)
    return user


async def resolve_current_user(info: strawberry.Info) -> User | None:
    """Return the signed-in user, or None for anonymous requests."""
    from ..types.user import User as UserType

    auth_context = await get_auth_context_from_info(info)
    if not auth_context.is_authenticated or auth_context.user_id is None:
        return None

    async with get_async_session() as session:
        user = await SqlAlchemyUserStore(session).get_by_id(auth_context.user_id)
        if user is None:
            logger.info("Session refers to a missing user", user_id=str(auth_context.user_id))
            return None
        return UserType.from_model(user)
