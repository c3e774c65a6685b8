"""Unit and integration tests for the expired-session purge."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

from app.services.session_purge import run_session_purge
from app.services.sessions import SessionManager
from app.stores.memory import InMemoryAuthStore


class TestPurgeDisabled(unittest.TestCase):
    """When SESSION_PURGE_ENABLED is False, run_session_purge does nothing."""

    def test_returns_zero_and_does_not_delete(self) -> None:
        settings = MagicMock()
        settings.SESSION_PURGE_ENABLED = False
        manager = MagicMock()
        self.assertEqual(run_session_purge(manager, settings), 0)
        manager.purge_expired.assert_not_called()


class TestPurgeEnabled(unittest.TestCase):
    """When enabled, run_session_purge returns the manager's deleted count."""

    def test_returns_deleted_count(self) -> None:
        settings = MagicMock()
        settings.SESSION_PURGE_ENABLED = True
        manager = MagicMock()
        manager.purge_expired.return_value = 4
        self.assertEqual(run_session_purge(manager, settings), 4)
        manager.purge_expired.assert_called_once()

    def test_against_store(self) -> None:
        settings = MagicMock()
        settings.SESSION_PURGE_ENABLED = True
        now = datetime(2026, 1, 1, tzinfo=UTC)
        store = InMemoryAuthStore()
        user = store.create_user(
            email="a@x.com", password_hash="h", first_name="A", last_name="B", now=now
        )
        issuing = SessionManager(store, clock=lambda: now)
        issuing.create_session(user.id)
        issuing.create_session(user.id, ttl=timedelta(days=3))

        later = SessionManager(store, clock=lambda: now + timedelta(days=2))
        self.assertEqual(run_session_purge(later, settings), 1)
        self.assertEqual(store.count_sessions_for_user(user.id), 1)
        self.assertEqual(run_session_purge(later, settings), 0)


if __name__ == "__main__":
    unittest.main()
