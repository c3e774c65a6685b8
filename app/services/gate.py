"""Access gate: the presence check every protected operation passes first.

The gate only asks whether a bearer token was supplied. Whether the token is
live, and whose it is, is decided by each workflow through SessionManager.
"""

from dataclasses import dataclass

from app.core.errors import MissingTokenError


@dataclass(frozen=True)
class AuthContext:
    """Per-call context built by the transport from the Authorization header."""

    token: str | None = None


def require_token(context: AuthContext) -> str:
    """Return the bearer token or raise MissingTokenError when none was sent."""
    if not context.token or not context.token.strip():
        raise MissingTokenError()
    return context.token.strip()
