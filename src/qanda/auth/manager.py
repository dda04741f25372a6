"""
Credential & session manager.

Owns the account lifecycle: registration, password sign-in, sign-out and the
two-step password reset. Sessions are stateless signed tokens; resolvers
turn the returned token into the ``token`` cookie.

Reset flow, per user::

    NoResetPending --issue_reset_token--> ResetPending(token, expiry)
    ResetPending --consume_reset_token(match, in window)--> NoResetPending
    ResetPending --consume_reset_token(no match / stale)--> ResetPending
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from ..config import Settings
from ..dbmodels import DEFAULT_PERMISSIONS, Users
from ..errors import (
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    PasswordMismatchError,
    UserNotFoundError,
)
from ..logging import get_logger
from ..mail import MailDeliveryError, MailMessage, MailTransport, make_nice_email
from .passwords import PasswordHasher
from .store import UserStore
from .tokens import SessionTokenIssuer, generate_reset_token

logger = get_logger(__name__)

SIGNOUT_MESSAGE = "Goodbye!"
RESET_REQUESTED_MESSAGE = "Thanks!"
RESET_EMAIL_SUBJECT = "Your Password Reset Token"

# Profile fields accepted at signup; everything else is system-managed
SIGNUP_PROFILE_FIELDS = frozenset({"name"})


@dataclass
class AuthResult:
    """A user plus the freshly issued session token for them."""

    user: Users
    token: str


@dataclass
class Ack:
    message: str


def utc_now() -> datetime:
    return datetime.now(UTC)


class CredentialManager:
    """Register, authenticate and reset passwords against a UserStore."""

    def __init__(
        self,
        store: UserStore,
        *,
        config: Settings,
        mailer: MailTransport,
        hasher: PasswordHasher | None = None,
        issuer: SessionTokenIssuer | None = None,
        clock: Callable[[], datetime] = utc_now,
        token_factory: Callable[[int], str] = generate_reset_token,
    ):
        self.store = store
        self.config = config
        self.mailer = mailer
        self.hasher = hasher or PasswordHasher(rounds=config.bcrypt_rounds)
        self.issuer = issuer or SessionTokenIssuer.from_settings(config)
        self.clock = clock
        self.token_factory = token_factory

    @property
    def reset_token_ttl(self) -> timedelta:
        return timedelta(seconds=self.config.reset_token_ttl_seconds)

    @property
    def reset_token_window(self) -> timedelta:
        return timedelta(seconds=self.config.reset_token_window_seconds)

    async def register(
        self, email: str, password: str, profile: dict[str, Any] | None = None
    ) -> AuthResult:
        """Create an account and sign it in.

        Raises:
            DuplicateEmailError: the store already holds this email.
        """
        email = email.lower()
        password_hash = await self.hasher.hash(password)

        profile_fields = {
            key: value
            for key, value in (profile or {}).items()
            if key in SIGNUP_PROFILE_FIELDS
        }
        user = await self.store.create(
            email=email,
            password_hash=password_hash,
            permissions=list(DEFAULT_PERMISSIONS),
            **profile_fields,
        )

        logger.info("User registered", user_id=str(user.id))
        return AuthResult(user=user, token=self.issuer.issue(user.id, issued_at=self.clock()))

    async def authenticate(self, email: str, password: str) -> AuthResult:
        """Check an email/password pair and sign the user in.

        Raises:
            UserNotFoundError: no account for this email.
            InvalidCredentialsError: the password does not match.
        """
        email = email.lower()
        user = await self.store.get_by_email(email)
        if user is None:
            raise UserNotFoundError.for_email(email)

        if not await self.hasher.verify(password, user.password_hash):
            logger.info("Sign-in rejected: wrong password", user_id=str(user.id))
            raise InvalidCredentialsError()

        logger.info("User signed in", user_id=str(user.id))
        return AuthResult(user=user, token=self.issuer.issue(user.id, issued_at=self.clock()))

    @staticmethod
    def logout() -> Ack:
        # Nothing to revoke: the caller drops the cookie.
        return Ack(message=SIGNOUT_MESSAGE)

    async def issue_reset_token(self, email: str) -> Ack:
        """Store a fresh reset token on the account and email the reset link.

        The email is looked up exactly as submitted, unlike register and
        authenticate. The token is committed before the email is sent.

        Raises:
            UserNotFoundError: no account for this email.
        """
        user = await self.store.get_by_email(email)
        if user is None:
            raise UserNotFoundError.for_email(email)

        reset_token = self.token_factory(self.config.reset_token_bytes)
        expiry = self.clock() + self.reset_token_ttl
        await self.store.set_reset_token(user.id, reset_token, expiry)
        # The emailed link must point at a stored token
        await self.store.commit()
        logger.info("Password reset requested", user_id=str(user.id))

        reset_link = f"{self.config.frontend_url}/reset?resetToken={reset_token}"
        message = MailMessage(
            sender=self.config.mail_from,
            to=user.email,
            subject=RESET_EMAIL_SUBJECT,
            html=make_nice_email(
                "Your Password Reset Token is here!\n\n"
                f'<a href="{reset_link}">Click Here to Reset</a>'
            ),
        )
        try:
            await self.mailer.send(message)
        except MailDeliveryError as e:
            # Same answer either way so the response does not reveal delivery state
            logger.warning("Password reset email failed", user_id=str(user.id), error=str(e))

        return Ack(message=RESET_REQUESTED_MESSAGE)

    async def consume_reset_token(
        self, reset_token: str, password: str, confirm_password: str
    ) -> AuthResult:
        """Redeem a reset token, set the new password and sign the user in.

        A token is accepted while its stored expiry is no older than
        ``reset_token_window`` before now.

        Raises:
            PasswordMismatchError: the two passwords differ.
            InvalidOrExpiredTokenError: no user holds the token inside the window,
                or another request redeemed it first.
        """
        if password != confirm_password:
            raise PasswordMismatchError()

        not_before = self.clock() - self.reset_token_window
        user = await self.store.find_by_reset_token(reset_token, not_before)
        if user is None:
            raise InvalidOrExpiredTokenError()

        password_hash = await self.hasher.hash(password)
        updated = await self.store.complete_password_reset(user.id, reset_token, password_hash)
        if updated is None:
            logger.info("Reset token redeemed concurrently", user_id=str(user.id))
            raise InvalidOrExpiredTokenError()

        logger.info("Password reset completed", user_id=str(updated.id))
        return AuthResult(
            user=updated, token=self.issuer.issue(updated.id, issued_at=self.clock())
        )
