"""
Domain errors raised by resolvers and the credential manager.

Each error carries a stable ``code`` that the GraphQL layer copies into the
error ``extensions`` so clients can branch without parsing messages.
"""


class QandaError(Exception):
    """Base class for request-level failures surfaced to API clients."""

    code = "INTERNAL_ERROR"
    default_message = "Something went wrong"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class DuplicateEmailError(QandaError):
    code = "DUPLICATE_EMAIL"
    default_message = "A user with that email already exists"


class UserNotFoundError(QandaError):
    code = "USER_NOT_FOUND"
    default_message = "No such user found"

    @classmethod
    def for_email(cls, email: str) -> "UserNotFoundError":
        # Echoes the submitted address; see DESIGN.md on enumeration risk.
        return cls(f"No such user found for email {email}")


class InvalidCredentialsError(QandaError):
    code = "INVALID_CREDENTIALS"
    default_message = "Invalid Password!"


class PasswordMismatchError(QandaError):
    code = "PASSWORD_MISMATCH"
    default_message = "Passwords don't match!"


class InvalidOrExpiredTokenError(QandaError):
    code = "INVALID_OR_EXPIRED_TOKEN"
    default_message = "This token is either invalid or expired!"


class NotAuthenticatedError(QandaError):
    code = "NOT_AUTHENTICATED"
    default_message = "You must be logged in to do that!"


class PermissionDeniedError(QandaError):
    code = "PERMISSION_DENIED"
    default_message = "You do not have permission to do that"


class NotFoundError(QandaError):
    code = "NOT_FOUND"
    default_message = "Not found"
