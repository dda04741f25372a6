"""Session token issuance and verification, plus reset-token generation."""

from __future__ import annotations

import secrets
from datetime import UTC, datetime
from uuid import UUID

import jwt
from fastapi import Request
from jwt.exceptions import InvalidTokenError

from ..config import Settings, settings
from ..logging import get_logger

logger = get_logger(__name__)


class AuthenticationError(Exception):
    """Raised when a session token cannot be verified."""

    pass


class SessionTokenIssuer:
    """Signs stateless session tokens carrying the user id.

    Tokens have no ``exp`` claim: the session lasts as long as the cookie
    that carries it.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256"):
        if not secret_key:
            raise ValueError("A signing secret is required to issue session tokens")
        self.secret_key = secret_key
        self.algorithm = algorithm

    @classmethod
    def from_settings(cls, config: Settings) -> SessionTokenIssuer:
        return cls(secret_key=config.app_secret or "", algorithm=config.jwt_algorithm)

    def issue(self, user_id: UUID | str, issued_at: datetime | None = None) -> str:
        payload = {
            "userId": str(user_id),
            "iat": issued_at or datetime.now(UTC),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> UUID:
        """Verify a session token and return the user id it carries."""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except InvalidTokenError as e:
            raise AuthenticationError("Invalid session token") from e

        user_id = payload.get("userId")
        if not user_id:
            raise AuthenticationError("Missing 'userId' claim in session token")

        try:
            return UUID(str(user_id))
        except ValueError as e:
            raise AuthenticationError("Malformed 'userId' claim in session token") from e


def generate_reset_token(nbytes: int = 20) -> str:
    """Return ``nbytes`` of randomness as a hex string (40 chars by default)."""
    return secrets.token_hex(nbytes)


def session_user_id_from_request(request: Request, config: Settings | None = None) -> UUID | None:
    """Best-effort read of the user id from the session cookie; never raises."""
    config = config or settings
    token = request.cookies.get(config.session_cookie_name)
    if not token or not config.app_secret:
        return None

    try:
        return SessionTokenIssuer.from_settings(config).verify(token)
    except AuthenticationError:
        return None
