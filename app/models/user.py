"""ORM model for application users (credentials, profile and role)."""

from sqlalchemy import Boolean, Column, DateTime, Enum, Integer, String, false, func, true
from sqlalchemy.orm import relationship

from app.models.base import Base

USER_ROLES = ("admin", "user")


class User(Base):
    """
    User account for session-token authentication.

    role: 'admin' or 'user'. email is the login identity and is unique as stored.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    role = Column(
        Enum(*USER_ROLES, name="user_role"),
        nullable=False,
        default="user",
        server_default="user",
    )
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())
    email_verified = Column(Boolean, nullable=False, default=False, server_default=false())
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    sessions = relationship(
        "UserSession",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
