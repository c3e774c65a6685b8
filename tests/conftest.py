"""Test environment: in-memory SQLite and cheap bcrypt before app modules import settings."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("APP_ENV", "dev")
