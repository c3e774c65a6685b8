"""Account workflows: signup, login, logout, current user, profile and password changes."""

import logging
from collections.abc import Callable
from datetime import datetime

from app.core.errors import (
    AccountDeactivatedError,
    EmailExistsError,
    EmailNotVerifiedError,
    IncorrectCurrentPasswordError,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    UserNotFoundError,
)
from app.core.security import hash_password, verify_password
from app.schemas.auth import AuthResponse, PublicUser
from app.schemas.dashboard import DashboardData, DashboardStats
from app.services.sessions import SessionManager, SessionNotFound, utcnow
from app.stores.base import AuthStore, ConstraintViolation, SessionRecord, UserRecord

logger = logging.getLogger(__name__)


def to_public_user(user: UserRecord) -> PublicUser:
    """Project a stored user onto the public view (drops password_hash)."""
    return PublicUser.model_validate(user)


class AuthService:
    """
    Orchestrates the account workflows over an injected AuthStore.

    Each workflow is a short pipeline that exits at the first failing step.
    Writes that must land together (new user + first session, new password
    hash + session invalidation) share one store transaction.
    """

    def __init__(
        self,
        store: AuthStore,
        sessions: SessionManager,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._sessions = sessions
        self._clock = clock

    def _resolve_or_reject(self, token: str) -> tuple[UserRecord, SessionRecord]:
        try:
            return self._sessions.resolve(token)
        except SessionNotFound:
            raise InvalidOrExpiredTokenError() from None

    def signup(
        self, email: str, password: str, first_name: str, last_name: str
    ) -> AuthResponse:
        """Create a user with role 'user', unverified, and sign them in."""
        if self._store.get_user_by_email(email) is not None:
            raise EmailExistsError()

        password_hash = hash_password(password)
        try:
            with self._store.transaction():
                user = self._store.create_user(
                    email=email,
                    password_hash=password_hash,
                    first_name=first_name,
                    last_name=last_name,
                    now=self._clock(),
                )
                session = self._sessions.create_session(user.id)
        except ConstraintViolation as e:
            # Lost a race with a concurrent signup for the same email.
            if e.field in ("email", None):
                raise EmailExistsError() from e
            raise

        logger.info("Signup completed: user_id=%s", user.id)
        return AuthResponse(user=to_public_user(user), token=session.token)

    def login(self, email: str, password: str) -> AuthResponse:
        """
        Verify credentials and open a new session.

        Unknown email and wrong password raise the same InvalidCredentialsError.
        Account state is checked only after the password matches.
        """
        user = self._store.get_user_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Login rejected: reason=%s", InvalidCredentialsError.code)
            raise InvalidCredentialsError()
        if not user.is_active:
            logger.info("Login rejected: user_id=%s, reason=%s", user.id, AccountDeactivatedError.code)
            raise AccountDeactivatedError()
        if not user.email_verified:
            logger.info("Login rejected: user_id=%s, reason=%s", user.id, EmailNotVerifiedError.code)
            raise EmailNotVerifiedError()

        session = self._sessions.create_session(user.id)
        logger.info("Login completed: user_id=%s", user.id)
        return AuthResponse(user=to_public_user(user), token=session.token)

    def logout(self, token: str) -> None:
        """End the session for token. Succeeds whether or not the session existed."""
        self._sessions.invalidate_one(token)

    def get_current_user(self, token: str) -> PublicUser | None:
        """Return the token's user, or None when the token does not resolve."""
        try:
            user, _ = self._sessions.resolve(token)
        except SessionNotFound:
            return None
        return to_public_user(user)

    def change_password(self, token: str, current_password: str, new_password: str) -> None:
        """
        Replace the password and end every session of the user.

        The calling session is revoked too; the caller has to log in again.
        """
        user, _ = self._resolve_or_reject(token)
        if not verify_password(current_password, user.password_hash):
            raise IncorrectCurrentPasswordError()

        new_hash = hash_password(new_password)
        with self._store.transaction():
            updated = self._store.update_password_hash(user.id, new_hash, self._clock())
            if updated is None:
                raise UserNotFoundError()
            self._sessions.invalidate_all(user.id)
        logger.info("Password changed: user_id=%s", user.id)

    def update_profile(
        self,
        token: str,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> PublicUser:
        """Apply the given name fields; updated_at is bumped even when nothing else changes."""
        user, _ = self._resolve_or_reject(token)
        with self._store.transaction():
            updated = self._store.update_profile(
                user.id,
                now=self._clock(),
                first_name=first_name,
                last_name=last_name,
            )
            if updated is None:
                raise UserNotFoundError()
        return to_public_user(updated)

    def get_dashboard_data(self, token: str) -> DashboardData:
        """Public user view plus login history for the dashboard."""
        user, _ = self._resolve_or_reject(token)
        total_logins, last_login = self._sessions.login_stats(user.id)
        return DashboardData(
            user=to_public_user(user),
            stats=DashboardStats(
                total_logins=total_logins,
                last_login=last_login,
                account_created=user.created_at,
            ),
        )
