"""Map typed auth failures onto HTTP responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.errors import AuthError

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the AuthError handler: stable code plus user-safe message, nothing internal."""

    @app.exception_handler(AuthError)
    async def handle_auth_error(request: Request, exc: AuthError) -> JSONResponse:
        log_fn = logger.error if exc.status_code >= 500 else logger.warning
        log_fn(
            "Request failed: method=%s, path=%s, status=%s, code=%s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.code,
        )
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, "code": exc.code},
            headers=headers,
        )
