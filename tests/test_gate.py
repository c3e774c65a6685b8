"""Unit tests for app.services.gate: bearer token presence check."""

import unittest

from app.core.errors import MissingTokenError
from app.services.gate import AuthContext, require_token


class TestRequireToken(unittest.TestCase):
    """require_token only checks that a token was supplied."""

    def test_returns_token(self) -> None:
        self.assertEqual(require_token(AuthContext(token="abc123")), "abc123")

    def test_missing_token(self) -> None:
        with self.assertRaises(MissingTokenError) as ctx:
            require_token(AuthContext())
        self.assertEqual(ctx.exception.code, "missing_token")
        self.assertEqual(ctx.exception.status_code, 401)

    def test_blank_token_counts_as_missing(self) -> None:
        with self.assertRaises(MissingTokenError):
            require_token(AuthContext(token="   "))

    def test_unknown_token_passes_gate(self) -> None:
        # Validity is checked later by the workflow, not here.
        self.assertEqual(require_token(AuthContext(token="no-such-session")), "no-such-session")


if __name__ == "__main__":
    unittest.main()
