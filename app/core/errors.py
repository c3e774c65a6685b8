"""Typed failures raised by the auth workflows.

Every error carries a stable ``code`` and a user-safe ``message``; the HTTP
layer maps ``status_code`` onto the response. Messages never include query
text, hashes, or tokens.
"""


class AuthError(Exception):
    """Base class for failures surfaced to callers."""

    status_code: int = 400
    code: str = "auth_error"
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class EmailExistsError(AuthError):
    status_code = 409
    code = "email_exists"
    default_message = "Email already exists"


class InvalidCredentialsError(AuthError):
    """Unknown email and wrong password share this error so accounts cannot be enumerated."""

    status_code = 401
    code = "invalid_credentials"
    default_message = "Invalid email or password"


class AccountDeactivatedError(AuthError):
    status_code = 403
    code = "account_deactivated"
    default_message = "Account is deactivated"


class EmailNotVerifiedError(AuthError):
    status_code = 403
    code = "email_not_verified"
    default_message = "Email not verified"


class InvalidOrExpiredTokenError(AuthError):
    status_code = 401
    code = "invalid_or_expired_token"
    default_message = "Invalid or expired token"


class IncorrectCurrentPasswordError(AuthError):
    status_code = 400
    code = "incorrect_current_password"
    default_message = "Current password is incorrect"


class UserNotFoundError(AuthError):
    """The session pointed at a user the store no longer has."""

    status_code = 404
    code = "user_not_found"
    default_message = "User not found"


class MissingTokenError(AuthError):
    status_code = 401
    code = "missing_token"
    default_message = "Authentication token required"


class StoreUnavailableError(AuthError):
    status_code = 503
    code = "store_unavailable"
    default_message = "Service temporarily unavailable"


class PasswordHashingError(AuthError):
    """Bcrypt failed or a stored hash is malformed; a server fault, not a login failure."""

    status_code = 500
    code = "server_error"
    default_message = "Internal server error"


__all__ = [
    "AccountDeactivatedError",
    "AuthError",
    "EmailExistsError",
    "EmailNotVerifiedError",
    "IncorrectCurrentPasswordError",
    "InvalidCredentialsError",
    "InvalidOrExpiredTokenError",
    "MissingTokenError",
    "PasswordHashingError",
    "StoreUnavailableError",
    "UserNotFoundError",
]
