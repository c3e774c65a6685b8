"""Tests for the create_user bootstrap script."""

import unittest
from unittest.mock import patch

from sqlalchemy.orm import sessionmaker

from app.core.database import create_db_engine
from app.core.security import verify_password
from app.models import Base, User
from app.scripts import create_user


class TestCreateUserScript(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = create_db_engine("sqlite://")
        Base.metadata.create_all(self.engine)
        self.SessionFactory = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)
        patcher = patch.object(create_user, "SessionLocal", self.SessionFactory)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(self.engine.dispose)

    def _users(self) -> list[User]:
        db = self.SessionFactory()
        try:
            return db.query(User).all()
        finally:
            db.close()

    def test_creates_verified_admin(self) -> None:
        code = create_user.main(
            ["admin@x.com", "pw123456", "Ada", "Admin", "admin", "--verified"]
        )
        self.assertEqual(code, 0)
        (user,) = self._users()
        self.assertEqual(user.role, "admin")
        self.assertTrue(user.email_verified)
        self.assertTrue(user.is_active)
        self.assertTrue(verify_password("pw123456", user.password_hash))

    def test_defaults_to_unverified_user(self) -> None:
        self.assertEqual(create_user.main(["u@x.com", "pw123456", "U", "Ser"]), 0)
        (user,) = self._users()
        self.assertEqual(user.role, "user")
        self.assertFalse(user.email_verified)

    def test_rejects_duplicate(self) -> None:
        self.assertEqual(create_user.main(["u@x.com", "pw123456", "U", "Ser"]), 0)
        self.assertEqual(create_user.main(["u@x.com", "pw123456", "U", "Ser"]), 1)
        self.assertEqual(len(self._users()), 1)

    def test_rejects_short_password(self) -> None:
        self.assertEqual(create_user.main(["u@x.com", "short", "U", "Ser"]), 1)
        self.assertEqual(self._users(), [])


if __name__ == "__main__":
    unittest.main()
