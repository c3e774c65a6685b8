"""
Create a user (e.g. first admin). Run from project root:
  python -m app.scripts.create_user EMAIL PASSWORD FIRST_NAME LAST_NAME [role] [--verified]
Example:
  python -m app.scripts.create_user admin@example.com your-secure-password Ada Admin admin --verified
"""
import argparse
import sys
from datetime import UTC, datetime

from app.core.database import SessionLocal
from app.core.security import (
    EMAIL_MAX_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    hash_password,
)
from app.models import USER_ROLES
from app.stores.base import ConstraintViolation
from app.stores.sql import SqlAuthStore


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an account outside the signup flow.")
    parser.add_argument("email", help="Login email")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("first_name")
    parser.add_argument("last_name")
    parser.add_argument("role", nargs="?", default="user", choices=list(USER_ROLES))
    parser.add_argument(
        "--verified",
        action="store_true",
        help="Mark the email as verified so the account can log in immediately",
    )
    args = parser.parse_args(argv)

    email = args.email.strip()
    if not email or "@" not in email or len(email) > EMAIL_MAX_LEN:
        print("Invalid email.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1

    db = SessionLocal()
    try:
        store = SqlAuthStore(db)
        if store.get_user_by_email(email) is not None:
            print(f"User '{email}' already exists.", file=sys.stderr)
            return 1
        try:
            with store.transaction():
                store.create_user(
                    email=email,
                    password_hash=hash_password(args.password),
                    first_name=args.first_name.strip(),
                    last_name=args.last_name.strip(),
                    now=datetime.now(UTC),
                    role=args.role,
                    email_verified=args.verified,
                )
        except ConstraintViolation:
            print(f"User '{email}' already exists.", file=sys.stderr)
            return 1
        print(f"Created user '{email}' with role '{args.role}'.")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
