"""Session lifecycle: issue, resolve with expiry and account checks, invalidate."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from app.core.security import generate_session_token
from app.stores.base import AuthStore, SessionRecord, UserRecord

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL = timedelta(hours=24)


def utcnow() -> datetime:
    return datetime.now(UTC)


class SessionNotFound(Exception):
    """No live session for the token: missing, expired, or owned by an inactive user."""


class SessionManager:
    """
    Creates and resolves bearer-token sessions against an AuthStore.

    Expiry is lazy: an expired row stays in the store until deleted but never
    resolves. Every write runs in the store's transaction scope, so callers can
    group several calls into one atomic unit by opening an outer scope.
    """

    def __init__(
        self,
        store: AuthStore,
        ttl: timedelta = DEFAULT_SESSION_TTL,
        clock: Callable[[], datetime] = utcnow,
        token_factory: Callable[[], str] = generate_session_token,
    ) -> None:
        self._store = store
        self._ttl = ttl
        self._clock = clock
        self._token_factory = token_factory

    def create_session(self, user_id: int, ttl: timedelta | None = None) -> SessionRecord:
        """Insert a new session for the user. Existing sessions are left alone."""
        now = self._clock()
        with self._store.transaction():
            return self._store.create_session(
                user_id=user_id,
                token=self._token_factory(),
                expires_at=now + (ttl or self._ttl),
                created_at=now,
            )

    def resolve(self, token: str) -> tuple[UserRecord, SessionRecord]:
        """Return the owning user and session, or raise SessionNotFound."""
        found = self._store.get_session_with_user(token)
        if found is None:
            raise SessionNotFound()
        session, user = found
        if session.expires_at <= self._clock():
            raise SessionNotFound()
        if not user.is_active:
            raise SessionNotFound()
        return user, session

    def invalidate_all(self, user_id: int) -> int:
        """Delete every session of the user; returns how many were removed (may be 0)."""
        with self._store.transaction():
            deleted = self._store.delete_sessions_for_user(user_id)
        logger.info("Invalidated sessions: user_id=%s, sessions_deleted=%s", user_id, deleted)
        return deleted

    def invalidate_one(self, token: str) -> None:
        """Delete the session for token if it exists. Unknown tokens are not an error."""
        with self._store.transaction():
            self._store.delete_session(token)

    def purge_expired(self) -> int:
        """Delete sessions whose expires_at has passed."""
        with self._store.transaction():
            return self._store.delete_expired_sessions(self._clock())

    def login_stats(self, user_id: int) -> tuple[int, datetime | None]:
        """
        Return (total sessions on record, start of the previous session).

        The most recent session is the one in use, so the previous login is the
        second newest; None when the user has signed in only once.
        """
        total = self._store.count_sessions_for_user(user_id)
        recent = self._store.recent_session_times(user_id, limit=2)
        previous = recent[1] if len(recent) > 1 else None
        return total, previous
