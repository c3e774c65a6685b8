"""Dashboard endpoint: signed-in user plus login history."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.v1.auth import get_auth_service, get_bearer_token
from app.schemas.dashboard import DashboardData
from app.services.auth import AuthService

router = APIRouter()


@router.get("", response_model=DashboardData)
def get_dashboard(
    token: Annotated[str, Depends(get_bearer_token)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> DashboardData:
    """Return the user's public profile, session count, and previous login time."""
    return service.get_dashboard_data(token)
