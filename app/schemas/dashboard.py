"""Pydantic schemas for the signed-in dashboard."""

from datetime import datetime

from pydantic import BaseModel, Field

from app.schemas.auth import PublicUser


class DashboardStats(BaseModel):
    """Login history derived from the user's stored sessions."""

    total_logins: int = Field(..., ge=0, description="Sessions on record for the user")
    last_login: datetime | None = Field(
        default=None, description="Start of the session before the most recent one"
    )
    account_created: datetime


class DashboardData(BaseModel):
    user: PublicUser
    stats: DashboardStats
