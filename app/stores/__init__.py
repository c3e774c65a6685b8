"""Credential and session store adapters."""

from app.stores.base import (
    AuthStore,
    ConstraintViolation,
    CredentialStore,
    SessionRecord,
    SessionStore,
    UserRecord,
)
from app.stores.memory import InMemoryAuthStore
from app.stores.sql import SqlAuthStore

__all__ = [
    "AuthStore",
    "ConstraintViolation",
    "CredentialStore",
    "InMemoryAuthStore",
    "SessionRecord",
    "SessionStore",
    "SqlAuthStore",
    "UserRecord",
]
