"""SQLAlchemy-backed credential and session store."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from app.core.errors import StoreUnavailableError
from app.models import User, UserSession
from app.stores.base import ConstraintViolation, SessionRecord, UserRecord

logger = logging.getLogger(__name__)


def _aware(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; everything stored is UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _to_user_record(row: User) -> UserRecord:
    return UserRecord(
        id=row.id,
        email=row.email,
        password_hash=row.password_hash,
        first_name=row.first_name,
        last_name=row.last_name,
        role=row.role,
        is_active=row.is_active,
        email_verified=row.email_verified,
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


def _to_session_record(row: UserSession) -> SessionRecord:
    return SessionRecord(
        id=row.id,
        user_id=row.user_id,
        token=row.token,
        expires_at=_aware(row.expires_at),
        created_at=_aware(row.created_at),
    )


def _violated_field(exc: IntegrityError) -> str | None:
    message = str(exc.orig).lower()
    for field in ("email", "token", "user_id"):
        if field in message:
            return field
    return None


@contextmanager
def _translate_errors() -> Iterator[None]:
    """Map driver failures onto store-level errors; no query text leaves this layer."""
    try:
        yield
    except IntegrityError as e:
        field = _violated_field(e)
        logger.warning("Constraint violation on write: field=%s", field)
        raise ConstraintViolation("Constraint violated", field=field) from e
    except OperationalError as e:
        logger.error("Database unavailable: %s", type(e).__name__)
        raise StoreUnavailableError() from e


class SqlAuthStore:
    """AuthStore over one SQLAlchemy session (one per request)."""

    def __init__(self, db: Session) -> None:
        self._db = db
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
        self._depth = 1
        try:
            yield
            with _translate_errors():
                self._db.commit()
        except Exception:
            self._db.rollback()
            raise
        finally:
            self._depth = 0

    def get_user(self, user_id: int) -> UserRecord | None:
        with _translate_errors():
            row = self._db.get(User, user_id)
        return _to_user_record(row) if row is not None else None

    def get_user_by_email(self, email: str) -> UserRecord | None:
        with _translate_errors():
            row = self._db.query(User).filter(User.email == email).first()
        return _to_user_record(row) if row is not None else None

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
        row = User(
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
        with _translate_errors():
            self._db.add(row)
            self._db.flush()
        return _to_user_record(row)

    def update_password_hash(
        self, user_id: int, password_hash: str, now: datetime
    ) -> UserRecord | None:
        with _translate_errors():
            row = self._db.get(User, user_id)
            if row is None:
                return None
            row.password_hash = password_hash
            row.updated_at = now
            self._db.flush()
        return _to_user_record(row)

    def update_profile(
        self,
        user_id: int,
        *,
        now: datetime,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> UserRecord | None:
        with _translate_errors():
            row = self._db.get(User, user_id)
            if row is None:
                return None
            if first_name is not None:
                row.first_name = first_name
            if last_name is not None:
                row.last_name = last_name
            row.updated_at = now
            self._db.flush()
        return _to_user_record(row)

    def create_session(
        self, *, user_id: int, token: str, expires_at: datetime, created_at: datetime
    ) -> SessionRecord:
        row = UserSession(
            user_id=user_id,
            token=token,
            expires_at=expires_at,
            created_at=created_at,
        )
        with _translate_errors():
            self._db.add(row)
            self._db.flush()
        return _to_session_record(row)

    def get_session_with_user(
        self, token: str
    ) -> tuple[SessionRecord, UserRecord] | None:
        with _translate_errors():
            result = (
                self._db.query(UserSession, User)
                .join(User, UserSession.user_id == User.id)
                .filter(UserSession.token == token)
                .first()
            )
        if result is None:
            return None
        session_row, user_row = result
        return _to_session_record(session_row), _to_user_record(user_row)

    def delete_session(self, token: str) -> int:
        with _translate_errors():
            return (
                self._db.query(UserSession)
                .filter(UserSession.token == token)
                .delete(synchronize_session=False)
            )

    def delete_sessions_for_user(self, user_id: int) -> int:
        with _translate_errors():
            return (
                self._db.query(UserSession)
                .filter(UserSession.user_id == user_id)
                .delete(synchronize_session=False)
            )

    def delete_expired_sessions(self, now: datetime) -> int:
        with _translate_errors():
            return (
                self._db.query(UserSession)
                .filter(UserSession.expires_at <= now)
                .delete(synchronize_session=False)
            )

    def count_sessions_for_user(self, user_id: int) -> int:
        with _translate_errors():
            return (
                self._db.query(UserSession)
                .filter(UserSession.user_id == user_id)
                .count()
            )

    def recent_session_times(self, user_id: int, limit: int) -> list[datetime]:
        with _translate_errors():
            rows = (
                self._db.query(UserSession.created_at)
                .filter(UserSession.user_id == user_id)
                .order_by(UserSession.created_at.desc(), UserSession.id.desc())
                .limit(limit)
                .all()
            )
        return [_aware(created_at) for (created_at,) in rows]
