"""
Shared access control logic for GraphQL resolvers
"""

from typing import TYPE_CHECKING
from uuid import UUID

import strawberry

from ..auth.context import ANONYMOUS, AuthContext
from ..auth.middleware import get_auth_context
from ..errors import NotAuthenticatedError
from ..logging import get_logger

if TYPE_CHECKING:
    from ..dbmodels import Users

logger = get_logger(__name__)

ADMIN_PERMISSION = "ADMIN"


async def get_auth_context_from_info(info: strawberry.Info) -> AuthContext:
    """
    Extract auth context from GraphQL info object.

    The context getter resolves it once per request; fall back to reading
    the cookie when resolvers run under a bare context.
    """
    auth = info.context.get("auth")
    if auth is not None:
        return auth

    request = info.context.get("request")
    if not request:
        logger.error("Request not found in GraphQL context")
        return ANONYMOUS

    return await get_auth_context(request)


async def require_user_id(info: strawberry.Info) -> UUID:
    """Return the caller's user id or fail with NotAuthenticatedError."""
    auth_context = await get_auth_context_from_info(info)
    if not auth_context.is_authenticated or auth_context.user_id is None:
        raise NotAuthenticatedError()
    return auth_context.user_id


def can_update_user(actor: "Users", target_id: UUID) -> bool:
    """A user may edit their own profile; admins may edit anyone's."""
    if actor.id == target_id:
        return True
    return ADMIN_PERMISSION in (actor.permissions or [])
