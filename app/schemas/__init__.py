"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    PublicUser,
    SignupRequest,
    SuccessResponse,
    UpdateProfileRequest,
)
from app.schemas.dashboard import DashboardData, DashboardStats
from app.schemas.health import HealthResponse
from app.schemas.landing import CallToAction, LandingFeature, LandingPageContent

__all__ = [
    "AuthResponse",
    "CallToAction",
    "ChangePasswordRequest",
    "DashboardData",
    "DashboardStats",
    "HealthResponse",
    "LandingFeature",
    "LandingPageContent",
    "LoginRequest",
    "PublicUser",
    "SignupRequest",
    "SuccessResponse",
    "UpdateProfileRequest",
]
