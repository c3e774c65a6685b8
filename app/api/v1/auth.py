"""Auth endpoints and the bearer-token dependencies shared by protected routes."""

from datetime import timedelta
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.database import get_db
from app.schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    PublicUser,
    SignupRequest,
    SuccessResponse,
    UpdateProfileRequest,
)
from app.services.auth import AuthService
from app.services.gate import AuthContext, require_token
from app.services.sessions import SessionManager
from app.stores.sql import SqlAuthStore

router = APIRouter()
security = HTTPBearer(auto_error=False)


def get_auth_service(db: Annotated[Session, Depends(get_db)]) -> AuthService:
    """Dependency: AuthService bound to this request's DB session."""
    store = SqlAuthStore(db)
    ttl = timedelta(hours=get_settings().SESSION_TTL_HOURS)
    return AuthService(store, SessionManager(store, ttl=ttl))


def get_auth_context(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> AuthContext:
    """Dependency: whatever bearer token the Authorization header carried, if any."""
    return AuthContext(token=credentials.credentials if credentials is not None else None)


def get_bearer_token(
    context: Annotated[AuthContext, Depends(get_auth_context)],
) -> str:
    """Dependency: require a bearer token to be present. Raises 401 if missing."""
    return require_token(context)


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(
    body: SignupRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """
    Create an account and sign it in; returns the user and a bearer token.
    New accounts start unverified, so later logins are refused until verification.
    """
    return service.signup(body.email, body.password, body.first_name, body.last_name)


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """
    Authenticate with email and password; returns the user and a new bearer token.
    Include the token in the Authorization header as: Bearer <token>
    """
    return service.login(body.email, body.password)


@router.post("/logout", response_model=SuccessResponse)
def logout(
    token: Annotated[str, Depends(get_bearer_token)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> SuccessResponse:
    """End the session for the presented token. Succeeds even if it was already gone."""
    service.logout(token)
    return SuccessResponse(success=True)


@router.get("/me", response_model=PublicUser | None)
def get_me(
    token: Annotated[str, Depends(get_bearer_token)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> PublicUser | None:
    """Return the signed-in user, or null when the token is unknown, expired, or the account is inactive."""
    return service.get_current_user(token)


@router.patch("/me", response_model=PublicUser)
def update_me(
    body: UpdateProfileRequest,
    token: Annotated[str, Depends(get_bearer_token)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> PublicUser:
    """Update first and/or last name; omitted fields are unchanged."""
    return service.update_profile(token, first_name=body.first_name, last_name=body.last_name)


@router.post("/password", response_model=SuccessResponse)
def change_password(
    body: ChangePasswordRequest,
    token: Annotated[str, Depends(get_bearer_token)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> SuccessResponse:
    """
    Change the password. Every session of the user is revoked, including the
    one used for this request; log in again with the new password.
    """
    service.change_password(token, body.current_password, body.new_password)
    return SuccessResponse(success=True)
