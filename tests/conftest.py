"""
Shared pytest fixtures and configuration for all tests.
"""

import os
import uuid
from collections.abc import Generator
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

import pytest

from qanda.auth.manager import CredentialManager
from qanda.auth.passwords import PasswordHasher
from qanda.config import Settings
from qanda.dbmodels import DEFAULT_PERMISSIONS, Users
from qanda.errors import DuplicateEmailError
from qanda.mail import MailDeliveryError, MailMessage

TEST_SECRET = "test-secret-key-that-is-long-enough-for-hs256"


class InMemoryUserStore:
    """UserStore over a dict, with the same contract as the SQL store."""

    def __init__(self) -> None:
        self.users: dict[UUID, Users] = {}
        self.commits = 0
        self.fail_commit = False

    async def get_by_id(self, user_id: UUID) -> Users | None:
        return self.users.get(user_id)

    async def get_by_email(self, email: str) -> Users | None:
        for user in self.users.values():
            if user.email == email:
                return user
        return None

    async def find_by_reset_token(self, reset_token: str, not_before: datetime) -> Users | None:
        for user in self.users.values():
            if (
                user.reset_token == reset_token
                and user.reset_token_expiry is not None
                and user.reset_token_expiry >= not_before
            ):
                return user
        return None

    async def create(
        self,
        *,
        email: str,
        password_hash: str,
        permissions: list[str] | None = None,
        name: str | None = None,
    ) -> Users:
        if await self.get_by_email(email) is not None:
            raise DuplicateEmailError()
        now = datetime.now(UTC)
        user = Users(
            id=uuid.uuid4(),
            email=email,
            name=name,
            password_hash=password_hash,
            permissions=list(permissions or DEFAULT_PERMISSIONS),
            reset_token=None,
            reset_token_expiry=None,
            created_at=now,
            updated_at=now,
        )
        self.users[user.id] = user
        return user

    async def set_reset_token(self, user_id: UUID, reset_token: str, expiry: datetime) -> None:
        user = self.users[user_id]
        user.reset_token = reset_token
        user.reset_token_expiry = expiry

    async def complete_password_reset(
        self, user_id: UUID, reset_token: str, password_hash: str
    ) -> Users | None:
        user = self.users.get(user_id)
        if user is None or user.reset_token != reset_token:
            return None
        user.password_hash = password_hash
        user.reset_token = None
        user.reset_token_expiry = None
        return user

    async def update_profile(self, user_id: UUID, fields: dict[str, Any]) -> Users | None:
        user = self.users.get(user_id)
        if user is None:
            return None
        for key, value in fields.items():
            setattr(user, key, value)
        return user

    async def commit(self) -> None:
        if self.fail_commit:
            raise ConnectionError("database went away")
        self.commits += 1


class RecordingMailTransport:
    """Keeps sent messages in memory; can be told to fail."""

    def __init__(self, fail: bool = False) -> None:
        self.sent: list[MailMessage] = []
        self.fail = fail

    async def send(self, message: MailMessage) -> None:
        if self.fail:
            raise MailDeliveryError("provider unavailable")
        self.sent.append(message)


class FakeClock:
    """Settable clock.

    Starts a few hours in the past so tokens issued after advancing it still
    carry an ``iat`` that is not in the future.
    """

    def __init__(self) -> None:
        self.now = datetime.now(UTC) - timedelta(hours=6)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def test_settings() -> Settings:
    """Settings with a signing secret and cheap bcrypt cost."""
    return Settings(
        app_secret=TEST_SECRET,
        bcrypt_rounds=4,
        frontend_url="http://frontend.test",
        mail_from="noreply@qanda.test",
        mail_provider="console",
    )


@pytest.fixture
def user_store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture
def mailer() -> RecordingMailTransport:
    return RecordingMailTransport()


@pytest.fixture
def failing_mailer() -> RecordingMailTransport:
    return RecordingMailTransport(fail=True)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def manager(
    user_store: InMemoryUserStore,
    mailer: RecordingMailTransport,
    test_settings: Settings,
    clock: FakeClock,
) -> CredentialManager:
    return CredentialManager(
        user_store,
        config=test_settings,
        mailer=mailer,
        hasher=PasswordHasher(rounds=4),
        clock=clock,
    )


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test")  # type: ignore[reportUnknownMemberType]
    config.addinivalue_line("markers", "unit: mark test as unit test")  # type: ignore[reportUnknownMemberType]
