"""Password hashing and opaque session token generation."""

import secrets

import bcrypt

from app.core.config import settings
from app.core.errors import PasswordHashingError

# 32 random bytes = 256 bits of entropy, rendered as 64 hex characters.
SESSION_TOKEN_BYTES = 32

# Min/max lengths for email, names and passwords (input validation).
EMAIL_MAX_LEN = 255
NAME_MIN_LEN = 1
NAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128

# bcrypt only looks at the first 72 bytes of its input.
BCRYPT_MAX_BYTES = 72


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
        return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")
    except (ValueError, TypeError) as e:
        raise PasswordHashingError() from e


def verify_password(plain_password: str, hashed: str) -> bool:
    """
    Verify a plain password against a stored hash.

    A stored hash bcrypt cannot parse is a data fault and raises
    PasswordHashingError instead of reporting a mismatch.
    """
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError) as e:
        raise PasswordHashingError() from e


def generate_session_token() -> str:
    """Return a random bearer token. It is a lookup key only and carries no claims."""
    return secrets.token_hex(SESSION_TOKEN_BYTES)
