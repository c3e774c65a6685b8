"""Request/response schemas for auth endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.core.security import (
    NAME_MAX_LEN,
    NAME_MIN_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
)


class SignupRequest(BaseModel):
    """New account details."""

    email: EmailStr = Field(..., description="Login email")
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password"
    )
    first_name: str = Field(..., min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    last_name: str = Field(..., min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: EmailStr = Field(..., description="Login email")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")


class UpdateProfileRequest(BaseModel):
    """Partial profile update; omitted fields are left unchanged."""

    first_name: str | None = Field(default=None, min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    last_name: str | None = Field(default=None, min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)


class ChangePasswordRequest(BaseModel):
    """Current password plus its replacement."""

    current_password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)
    new_password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)


class PublicUser(BaseModel):
    """User as shown to callers; password_hash is never part of it."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    first_name: str
    last_name: str
    role: Literal["admin", "user"]
    is_active: bool
    email_verified: bool
    created_at: datetime
    updated_at: datetime


class AuthResponse(BaseModel):
    """Signed-in user and the bearer token for their new session."""

    user: PublicUser
    token: str = Field(..., description="Opaque bearer token; send as Authorization: Bearer <token>")


class SuccessResponse(BaseModel):
    """Acknowledgement for mutations with nothing else to return."""

    success: bool = True
