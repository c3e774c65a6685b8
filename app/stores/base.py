"""Store protocols and the plain records they exchange with the auth services."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Protocol

UserRoleName = Literal["admin", "user"]


@dataclass(frozen=True)
class UserRecord:
    """A stored user. password_hash never leaves the service layer."""

    id: int
    email: str
    password_hash: str
    first_name: str
    last_name: str
    role: UserRoleName
    is_active: bool
    email_verified: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class SessionRecord:
    """A stored session; valid only while now < expires_at."""

    id: int
    user_id: int
    token: str
    expires_at: datetime
    created_at: datetime


class ConstraintViolation(Exception):
    """Raised when a uniqueness or foreign-key constraint is violated on write."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


class CredentialStore(Protocol):
    def get_user(self, user_id: int) -> UserRecord | None: ...

    def get_user_by_email(self, email: str) -> UserRecord | None: ...

    def create_user(
        self,
        *,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        now: datetime,
        role: UserRoleName = "user",
        is_active: bool = True,
        email_verified: bool = False,
    ) -> UserRecord: ...

    def update_password_hash(
        self, user_id: int, password_hash: str, now: datetime
    ) -> UserRecord | None: ...

    def update_profile(
        self,
        user_id: int,
        *,
        now: datetime,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> UserRecord | None: ...


class SessionStore(Protocol):
    def create_session(
        self, *, user_id: int, token: str, expires_at: datetime, created_at: datetime
    ) -> SessionRecord: ...

    def get_session_with_user(
        self, token: str
    ) -> tuple[SessionRecord, UserRecord] | None: ...

    def delete_session(self, token: str) -> int: ...

    def delete_sessions_for_user(self, user_id: int) -> int: ...

    def delete_expired_sessions(self, now: datetime) -> int: ...

    def count_sessions_for_user(self, user_id: int) -> int: ...

    def recent_session_times(self, user_id: int, limit: int) -> list[datetime]: ...


class AuthStore(CredentialStore, SessionStore, Protocol):
    """
    Both adapters behind one transaction scope.

    transaction() is re-entrant: only the outermost scope commits, and any
    exception escaping it rolls back every write made inside.
    """

    def transaction(self) -> AbstractContextManager[None]: ...
