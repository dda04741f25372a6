"""Session-cookie authentication for incoming requests."""

from __future__ import annotations

from fastapi import Request

from ..config import Settings, settings
from ..logging import get_logger, user_id_ctx
from .context import ANONYMOUS, AuthContext
from .tokens import AuthenticationError, SessionTokenIssuer

logger = get_logger(__name__)


async def get_auth_context(request: Request, config: Settings | None = None) -> AuthContext:
    """
    Resolve the caller from the session cookie.

    A missing cookie yields an anonymous context. A cookie that fails
    verification is logged and also treated as anonymous, so a stale or
    tampered token never blocks public operations such as signin.
    """
    config = config or settings
    token = request.cookies.get(config.session_cookie_name)
    if not token:
        return ANONYMOUS

    if not config.app_secret:
        logger.error("Session cookie received but no app secret is configured")
        return ANONYMOUS

    try:
        user_id = SessionTokenIssuer.from_settings(config).verify(token)
    except AuthenticationError as e:
        logger.warning("Session token rejected", error=str(e))
        return ANONYMOUS

    user_id_ctx.set(str(user_id))
    return AuthContext(user_id=user_id, token=token)
