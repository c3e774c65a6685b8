"""In-process AuthStore for tests and local experiments."""

import itertools
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime

from app.stores.base import ConstraintViolation, SessionRecord, UserRecord


class InMemoryAuthStore:
    """
    Dict-backed AuthStore with the same constraints as the SQL schema.

    Email and token are unique, sessions must reference an existing user, and
    the outermost transaction() restores a snapshot when an exception escapes.
    """

    def __init__(self) -> None:
        self.users: dict[int, UserRecord] = {}
        self.sessions: dict[int, SessionRecord] = {}
        self._user_ids = itertools.count(1)
        self._session_ids = itertools.count(1)
        self._depth = 0

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self._depth:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return
        users_snapshot = dict(self.users)
        sessions_snapshot = dict(self.sessions)
        self._depth = 1
        try:
            yield
        except Exception:
            self.users = users_snapshot
            self.sessions = sessions_snapshot
            raise
        finally:
            self._depth = 0

    def get_user(self, user_id: int) -> UserRecord | None:
        return self.users.get(user_id)

    def get_user_by_email(self, email: str) -> UserRecord | None:
        return next((u for u in self.users.values() if u.email == email), None)

    def create_user(
        self,
        *,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        now: datetime,
        role: str = "user",
        is_active: bool = True,
        email_verified: bool = False,
    ) -> UserRecord:
        if self.get_user_by_email(email) is not None:
            raise ConstraintViolation("Constraint violated", field="email")
        user = UserRecord(
            id=next(self._user_ids),
            email=email,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            role=role,
            is_active=is_active,
            email_verified=email_verified,
            created_at=now,
            updated_at=now,
        )
        self.users[user.id] = user
        return user

    def update_password_hash(
        self, user_id: int, password_hash: str, now: datetime
    ) -> UserRecord | None:
        user = self.users.get(user_id)
        if user is None:
            return None
        user = replace(user, password_hash=password_hash, updated_at=now)
        self.users[user_id] = user
        return user

    def update_profile(
        self,
        user_id: int,
        *,
        now: datetime,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> UserRecord | None:
        user = self.users.get(user_id)
        if user is None:
            return None
        changes: dict = {"updated_at": now}
        if first_name is not None:
            changes["first_name"] = first_name
        if last_name is not None:
            changes["last_name"] = last_name
        user = replace(user, **changes)
        self.users[user_id] = user
        return user

    def set_user_flags(
        self,
        user_id: int,
        *,
        is_active: bool | None = None,
        email_verified: bool | None = None,
    ) -> UserRecord:
        """Flip account flags directly (no workflow changes them)."""
        user = self.users[user_id]
        changes: dict = {}
        if is_active is not None:
            changes["is_active"] = is_active
        if email_verified is not None:
            changes["email_verified"] = email_verified
        user = replace(user, **changes)
        self.users[user_id] = user
        return user

    def create_session(
        self, *, user_id: int, token: str, expires_at: datetime, created_at: datetime
    ) -> SessionRecord:
        if user_id not in self.users:
            raise ConstraintViolation("Constraint violated", field="user_id")
        if any(s.token == token for s in self.sessions.values()):
            raise ConstraintViolation("Constraint violated", field="token")
        session = SessionRecord(
            id=next(self._session_ids),
            user_id=user_id,
            token=token,
            expires_at=expires_at,
            created_at=created_at,
        )
        self.sessions[session.id] = session
        return session

    def get_session_with_user(
        self, token: str
    ) -> tuple[SessionRecord, UserRecord] | None:
        for session in self.sessions.values():
            if session.token == token:
                user = self.users.get(session.user_id)
                return (session, user) if user is not None else None
        return None

    def _delete_where(self, predicate) -> int:
        doomed = [sid for sid, s in self.sessions.items() if predicate(s)]
        for sid in doomed:
            del self.sessions[sid]
        return len(doomed)

    def delete_session(self, token: str) -> int:
        return self._delete_where(lambda s: s.token == token)

    def delete_sessions_for_user(self, user_id: int) -> int:
        return self._delete_where(lambda s: s.user_id == user_id)

    def delete_expired_sessions(self, now: datetime) -> int:
        return self._delete_where(lambda s: s.expires_at <= now)

    def count_sessions_for_user(self, user_id: int) -> int:
        return sum(1 for s in self.sessions.values() if s.user_id == user_id)

    def recent_session_times(self, user_id: int, limit: int) -> list[datetime]:
        owned = [s for s in self.sessions.values() if s.user_id == user_id]
        owned.sort(key=lambda s: (s.created_at, s.id), reverse=True)
        return [s.created_at for s in owned[:limit]]
