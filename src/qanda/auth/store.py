"""User record persistence for the credential manager."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Protocol
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..dbmodels import DEFAULT_PERMISSIONS, Users
from ..errors import DuplicateEmailError
from ..logging import get_logger

logger = get_logger(__name__)

# Fields a caller may change through a profile update
PROFILE_FIELDS = frozenset({"name", "email"})


class UserStore(Protocol):
    """Storage operations the credential manager relies on.

    Implementations must make ``complete_password_reset`` atomic per user
    row so that a reset token can be redeemed at most once.
    """

    async def get_by_id(self, user_id: UUID) -> Users | None: ...

    async def get_by_email(self, email: str) -> Users | None: ...

    async def find_by_reset_token(self, reset_token: str, not_before: datetime) -> Users | None:
        """Return the user holding ``reset_token`` with an expiry at or after ``not_before``."""
        ...

    async def create(
        self,
        *,
        email: str,
        password_hash: str,
        permissions: list[str],
        name: str | None = None,
    ) -> Users:
        """Insert a user; raise DuplicateEmailError on the email unique constraint."""
        ...

    async def set_reset_token(self, user_id: UUID, reset_token: str, expiry: datetime) -> None: ...

    async def complete_password_reset(
        self, user_id: UUID, reset_token: str, password_hash: str
    ) -> Users | None:
        """Swap in the new hash and clear the reset fields if the token still matches."""
        ...

    async def update_profile(self, user_id: UUID, fields: dict[str, Any]) -> Users | None: ...

    async def commit(self) -> None:
        """Make pending writes durable before side effects that depend on them."""
        ...


class SqlAlchemyUserStore:
    """UserStore backed by an async SQLAlchemy session.

    The session's transaction is owned by the caller; this class only
    flushes so that constraint violations surface where they happen.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: UUID) -> Users | None:
        result = await self.session.execute(select(Users).where(Users.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Users | None:
        result = await self.session.execute(select(Users).where(Users.email == email))
        return result.scalar_one_or_none()

    async def find_by_reset_token(self, reset_token: str, not_before: datetime) -> Users | None:
        stmt = (
            select(Users)
            .where(Users.reset_token == reset_token, Users.reset_token_expiry >= not_before)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(
        self,
        *,
        email: str,
        password_hash: str,
        permissions: list[str] | None = None,
        name: str | None = None,
    ) -> Users:
        user = Users(
            email=email,
            name=name,
            password_hash=password_hash,
            permissions=list(permissions or DEFAULT_PERMISSIONS),
        )
        self.session.add(user)
        try:
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            if "users_email_key" in str(e.orig):
                raise DuplicateEmailError() from e
            raise
        await self.session.refresh(user)
        return user

    async def commit(self) -> None:
        await self.session.commit()

    async def set_reset_token(self, user_id: UUID, reset_token: str, expiry: datetime) -> None:
        stmt = (
            update(Users)
            .where(Users.id == user_id)
            .values(
                reset_token=reset_token,
                reset_token_expiry=expiry,
                updated_at=datetime.now(UTC),
            )
        )
        await self.session.execute(stmt)

    async def complete_password_reset(
        self, user_id: UUID, reset_token: str, password_hash: str
    ) -> Users | None:
        stmt = (
            update(Users)
            .where(Users.id == user_id, Users.reset_token == reset_token)
            .values(
                password_hash=password_hash,
                reset_token=None,
                reset_token_expiry=None,
                updated_at=datetime.now(UTC),
            )
            .returning(Users)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update_profile(self, user_id: UUID, fields: dict[str, Any]) -> Users | None:
        unknown = set(fields) - PROFILE_FIELDS
        if unknown:
            raise ValueError(f"Fields not writable through a profile update: {sorted(unknown)}")

        if not fields:
            return await self.get_by_id(user_id)

        stmt = (
            update(Users)
            .where(Users.id == user_id)
            .values(**fields, updated_at=datetime.now(UTC))
            .returning(Users)
            .execution_options(synchronize_session="fetch")
        )
        try:
            result = await self.session.execute(stmt)
        except IntegrityError as e:
            await self.session.rollback()
            if "users_email_key" in str(e.orig):
                raise DuplicateEmailError() from e
            raise
        return result.scalar_one_or_none()
