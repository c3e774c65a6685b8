"""Unit tests for app.services.auth: signup, login, logout, current user, profile, password."""

import unittest
from datetime import UTC, datetime, timedelta

from app.core.errors import (
    AccountDeactivatedError,
    EmailExistsError,
    EmailNotVerifiedError,
    IncorrectCurrentPasswordError,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    StoreUnavailableError,
)
from app.core.security import verify_password
from app.schemas.auth import PublicUser
from app.services.auth import AuthService
from app.services.sessions import SessionManager
from app.stores.memory import InMemoryAuthStore

START = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


class FakeClock:
    """Settable clock shared by the service and its session manager."""

    def __init__(self, now: datetime = START) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


class AuthServiceTestCase(unittest.TestCase):
    """Service over a fresh in-memory store for every test."""

    def setUp(self) -> None:
        self.clock = FakeClock()
        self.store = InMemoryAuthStore()
        self.sessions = SessionManager(self.store, clock=self.clock)
        self.service = AuthService(self.store, self.sessions, clock=self.clock)

    def _signup(self, email: str = "a@x.com", password: str = "pw123456") -> str:
        return self.service.signup(email, password, "A", "B").token

    def _verified_user(self, email: str = "a@x.com", password: str = "pw123456") -> int:
        self._signup(email, password)
        user = self.store.get_user_by_email(email)
        self.store.set_user_flags(user.id, email_verified=True)
        return user.id


class TestSignup(AuthServiceTestCase):
    def test_returns_public_user_and_resolvable_token(self) -> None:
        result = self.service.signup("a@x.com", "pw123456", "A", "B")
        self.assertIsInstance(result.user, PublicUser)
        self.assertEqual(result.user.email, "a@x.com")
        self.assertEqual(result.user.role, "user")
        self.assertTrue(result.user.is_active)
        self.assertFalse(result.user.email_verified)
        self.assertEqual(result.user.created_at, START)
        self.assertNotIn("password_hash", result.model_dump()["user"])

        current = self.service.get_current_user(result.token)
        self.assertIsNotNone(current)
        self.assertEqual(current.email, "a@x.com")
        self.assertFalse(hasattr(current, "password_hash"))

    def test_password_is_stored_hashed(self) -> None:
        self._signup()
        stored = self.store.get_user_by_email("a@x.com")
        self.assertNotEqual(stored.password_hash, "pw123456")
        self.assertTrue(verify_password("pw123456", stored.password_hash))

    def test_duplicate_email(self) -> None:
        self._signup()
        with self.assertRaises(EmailExistsError):
            self.service.signup("a@x.com", "otherpass1", "C", "D")
        self.assertEqual(len(self.store.users), 1)

    def test_email_is_case_sensitive(self) -> None:
        self._signup("a@x.com")
        self._signup("A@x.com")
        self.assertEqual(len(self.store.users), 2)

    def test_session_failure_leaves_no_user(self) -> None:
        def broken_token() -> str:
            raise StoreUnavailableError()

        sessions = SessionManager(self.store, clock=self.clock, token_factory=broken_token)
        service = AuthService(self.store, sessions, clock=self.clock)
        with self.assertRaises(StoreUnavailableError):
            service.signup("a@x.com", "pw123456", "A", "B")
        self.assertEqual(self.store.users, {})
        self.assertEqual(self.store.sessions, {})


class TestLogin(AuthServiceTestCase):
    def test_success_for_verified_active_user(self) -> None:
        user_id = self._verified_user()
        result = self.service.login("a@x.com", "pw123456")
        self.assertEqual(result.user.id, user_id)
        self.assertEqual(self.service.get_current_user(result.token).id, user_id)

    def test_wrong_password_and_unknown_email_are_indistinguishable(self) -> None:
        self._verified_user()
        with self.assertRaises(InvalidCredentialsError) as wrong_pw:
            self.service.login("a@x.com", "not-the-password")
        with self.assertRaises(InvalidCredentialsError) as unknown:
            self.service.login("nobody@x.com", "pw123456")
        self.assertEqual(wrong_pw.exception.message, unknown.exception.message)
        self.assertEqual(wrong_pw.exception.code, unknown.exception.code)

    def test_deactivated_account(self) -> None:
        user_id = self._verified_user()
        self.store.set_user_flags(user_id, is_active=False)
        with self.assertRaises(AccountDeactivatedError):
            self.service.login("a@x.com", "pw123456")

    def test_deactivated_account_with_wrong_password_is_invalid_credentials(self) -> None:
        user_id = self._verified_user()
        self.store.set_user_flags(user_id, is_active=False)
        with self.assertRaises(InvalidCredentialsError):
            self.service.login("a@x.com", "wrong-password")

    def test_unverified_email(self) -> None:
        self._signup()
        with self.assertRaises(EmailNotVerifiedError):
            self.service.login("a@x.com", "pw123456")

    def test_two_logins_give_two_valid_tokens(self) -> None:
        self._verified_user()
        first = self.service.login("a@x.com", "pw123456").token
        second = self.service.login("a@x.com", "pw123456").token
        self.assertNotEqual(first, second)
        self.assertIsNotNone(self.service.get_current_user(first))
        self.assertIsNotNone(self.service.get_current_user(second))

        self.service.logout(first)
        self.assertIsNone(self.service.get_current_user(first))
        self.assertIsNotNone(self.service.get_current_user(second))


class TestLogout(AuthServiceTestCase):
    def test_removes_session(self) -> None:
        token = self._signup()
        self.service.logout(token)
        self.assertIsNone(self.service.get_current_user(token))

    def test_unknown_and_expired_tokens_succeed(self) -> None:
        self.assertIsNone(self.service.logout("never-issued"))
        token = self._signup()
        self.clock.advance(timedelta(hours=25))
        self.assertIsNone(self.service.logout(token))
        self.assertIsNone(self.service.logout(token))


class TestGetCurrentUser(AuthServiceTestCase):
    def test_expired_session_is_same_as_missing(self) -> None:
        token = self._signup()
        self.clock.advance(timedelta(hours=24))
        self.assertIsNone(self.service.get_current_user(token))
        self.assertIsNone(self.service.get_current_user("never-issued"))

    def test_inactive_user(self) -> None:
        token = self._signup()
        user = self.store.get_user_by_email("a@x.com")
        self.store.set_user_flags(user.id, is_active=False)
        self.assertIsNone(self.service.get_current_user(token))


class TestChangePassword(AuthServiceTestCase):
    def test_rotates_hash_and_revokes_every_session(self) -> None:
        user_id = self._verified_user()
        other = self.service.login("a@x.com", "pw123456").token
        current = self.service.login("a@x.com", "pw123456").token

        self.clock.advance(timedelta(minutes=5))
        self.service.change_password(current, "pw123456", "newpw123")

        stored = self.store.get_user(user_id)
        self.assertFalse(verify_password("pw123456", stored.password_hash))
        self.assertTrue(verify_password("newpw123", stored.password_hash))
        self.assertEqual(stored.updated_at, START + timedelta(minutes=5))
        self.assertIsNone(self.service.get_current_user(current))
        self.assertIsNone(self.service.get_current_user(other))
        self.assertEqual(self.store.count_sessions_for_user(user_id), 0)

        with self.assertRaises(InvalidCredentialsError):
            self.service.login("a@x.com", "pw123456")
        self.assertIsNotNone(self.service.login("a@x.com", "newpw123").token)

    def test_wrong_current_password(self) -> None:
        token = self._signup()
        with self.assertRaises(IncorrectCurrentPasswordError):
            self.service.change_password(token, "not-it-at-all", "newpw123")
        self.assertIsNotNone(self.service.get_current_user(token))

    def test_expired_token(self) -> None:
        token = self._signup()
        self.clock.advance(timedelta(days=2))
        with self.assertRaises(InvalidOrExpiredTokenError):
            self.service.change_password(token, "pw123456", "newpw123")

    def test_hash_update_rolls_back_when_invalidation_fails(self) -> None:
        class FailingDeleteStore(InMemoryAuthStore):
            def delete_sessions_for_user(self, user_id: int) -> int:
                raise StoreUnavailableError()

        store = FailingDeleteStore()
        sessions = SessionManager(store, clock=self.clock)
        service = AuthService(store, sessions, clock=self.clock)
        token = service.signup("a@x.com", "pw123456", "A", "B").token
        with self.assertRaises(StoreUnavailableError):
            service.change_password(token, "pw123456", "newpw123")
        stored = store.get_user_by_email("a@x.com")
        self.assertTrue(verify_password("pw123456", stored.password_hash))
        self.assertIsNotNone(service.get_current_user(token))


class TestUpdateProfile(AuthServiceTestCase):
    def test_applies_only_given_fields(self) -> None:
        token = self._signup()
        self.clock.advance(timedelta(minutes=1))
        user = self.service.update_profile(token, first_name="Ada")
        self.assertEqual(user.first_name, "Ada")
        self.assertEqual(user.last_name, "B")
        self.assertEqual(user.updated_at, START + timedelta(minutes=1))
        self.assertEqual(user.created_at, START)

    def test_empty_update_still_bumps_updated_at(self) -> None:
        token = self._signup()
        self.clock.advance(timedelta(minutes=3))
        user = self.service.update_profile(token)
        self.assertEqual((user.first_name, user.last_name), ("A", "B"))
        self.assertEqual(user.updated_at, START + timedelta(minutes=3))

    def test_invalid_token(self) -> None:
        with self.assertRaises(InvalidOrExpiredTokenError):
            self.service.update_profile("never-issued", first_name="X")


class TestDashboard(AuthServiceTestCase):
    def test_stats_after_several_logins(self) -> None:
        self._verified_user()
        self.clock.advance(timedelta(hours=1))
        self.service.login("a@x.com", "pw123456")
        self.clock.advance(timedelta(hours=1))
        token = self.service.login("a@x.com", "pw123456").token

        data = self.service.get_dashboard_data(token)
        self.assertEqual(data.user.email, "a@x.com")
        self.assertEqual(data.stats.total_logins, 3)
        self.assertEqual(data.stats.last_login, START + timedelta(hours=1))
        self.assertEqual(data.stats.account_created, START)

    def test_first_session_has_no_last_login(self) -> None:
        token = self._signup()
        data = self.service.get_dashboard_data(token)
        self.assertEqual(data.stats.total_logins, 1)
        self.assertIsNone(data.stats.last_login)

    def test_invalid_token(self) -> None:
        with self.assertRaises(InvalidOrExpiredTokenError):
            self.service.get_dashboard_data("never-issued")


class TestSignupChangePasswordScenario(AuthServiceTestCase):
    """Signup, rotate password, then find the verification state unchanged."""

    def test_scenario(self) -> None:
        t1 = self.service.signup("a@x.com", "pw123456", "A", "B").token
        self.assertFalse(self.service.get_current_user(t1).email_verified)

        self.service.change_password(t1, "pw123456", "newpw123")
        self.assertIsNone(self.service.get_current_user(t1))

        with self.assertRaises(EmailNotVerifiedError):
            self.service.login("a@x.com", "newpw123")


if __name__ == "__main__":
    unittest.main()
