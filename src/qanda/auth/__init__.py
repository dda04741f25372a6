"""Credentials, sessions and request authentication for Qanda."""

from .context import AuthContext
from .cookies import clear_session_cookie, set_session_cookie
from .manager import Ack, AuthResult, CredentialManager
from .middleware import get_auth_context
from .passwords import PasswordHasher
from .store import SqlAlchemyUserStore, UserStore
from .tokens import AuthenticationError, SessionTokenIssuer, generate_reset_token

__all__ = [
    "Ack",
    "AuthContext",
    "AuthResult",
    "AuthenticationError",
    "CredentialManager",
    "PasswordHasher",
    "SessionTokenIssuer",
    "SqlAlchemyUserStore",
    "UserStore",
    "clear_session_cookie",
    "generate_reset_token",
    "get_auth_context",
    "set_session_cookie",
]
