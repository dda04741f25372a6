"""Authentication context for request handling."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID


@dataclass
class AuthContext:
    """Runtime authentication context for a request."""

    user_id: UUID | None
    token: str | None

    @property
    def is_authenticated(self) -> bool:
        """Check if the request is authenticated."""
        return self.user_id is not None


ANONYMOUS = AuthContext(user_id=None, token=None)
