"""
User GraphQL type definitions
"""

from enum import Enum
from uuid import UUID

import strawberry

from ...dbmodels import Users


@strawberry.enum
class Permission(Enum):
    """Role tags a user can hold."""

    ADMIN = "ADMIN"
    USER = "USER"


@strawberry.type
class User:
    """User type for GraphQL API.

    Password digests and reset fields are never exposed.
    """

    id: UUID
    email: str
    name: str | None
    permissions: list[Permission]

    @classmethod
    def from_model(cls, user: Users) -> "User":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            permissions=[
                Permission(p) for p in (user.permissions or []) if p in Permission.__members__
            ],
        )
