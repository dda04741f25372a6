from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import strawberry

from ...auth.store import SqlAlchemyUserStore
from ...database.connection import get_async_session
from ...errors import NotAuthenticatedError, NotFoundError, PermissionDeniedError
from ...logging import get_logger
from ..access_control import can_update_user, require_user_id

if TYPE_CHECKING:
    from ..mutations.root import UpdateUserInput
    from ..types.user import User

logger = get_logger(__name__)


async def update_user(info: strawberry.Info, input: UpdateUserInput) -> User:
    """
    Update a user's profile.

    Only ``name`` and ``email`` are writable. Users may edit themselves;
    admins may edit anyone.
    """
    from ..types.user import User as UserType

    actor_id = await require_user_id(info)

    fields: dict[str, str | None] = {}
    if input.name is not None:
        fields["name"] = input.name
    if input.email is not None:
        fields["email"] = input.email.lower()

    async with get_async_session() as session:
        store = SqlAlchemyUserStore(session)

        actor = await store.get_by_id(actor_id)
        if actor is None:
            # Cookie outlived the account
            raise NotAuthenticatedError()

        if not can_update_user(actor, UUID(str(input.id))):
            logger.info(
                "Profile update denied",
                actor_id=str(actor_id),
                target_id=str(input.id),
            )
            raise PermissionDeniedError()

        user = await store.update_profile(UUID(str(input.id)), fields)
        if user is None:
            raise NotFoundError("User not found")

        logger.info(
            "User profile updated",
            actor_id=str(actor_id),
            target_id=str(user.id),
            fields=sorted(fields),
        )
        return UserType.from_model(user)
