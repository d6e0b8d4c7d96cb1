"""FastAPI application."""

import logging

from dishka import AsyncContainer
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tracker.config import Settings
from tracker.domain.error import (
    DomainError,
    LastLinkRejectedError,
    NotFoundError,
    ProviderDisabledError,
)
from tracker.interface.api.routes import accounts, auth, health
from tracker.interface.error import InterfaceError, UnauthenticatedError
from tracker.util.di.container import create_container, setup_di
from tracker.util.observability import instrument_fastapi, instrument_httpx

logger = logging.getLogger(__name__)

# Most specific first; anything else is a 400
ERROR_STATUS: list[tuple[type[Exception], int]] = [
    (ProviderDisabledError, status.HTTP_404_NOT_FOUND),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (LastLinkRejectedError, status.HTTP_400_BAD_REQUEST),
    (UnauthenticatedError, status.HTTP_401_UNAUTHORIZED),
]


def error_status(error: Exception) -> int:
    """HTTP status for a domain or interface error."""
    for error_type, code in ERROR_STATUS:
        if isinstance(error, error_type):
            return code
    return status.HTTP_400_BAD_REQUEST


async def handle_error(request: Request, exc: Exception) -> JSONResponse:
    """Render domain and interface errors as ``{"success": false, "error": code}``."""
    code = getattr(exc, "code", "unexpected")
    status_code = error_status(exc)
    logger.info(f"{request.method} {request.url.path} -> {status_code} {code}")
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": code},
    )


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this; tests configure it in
    conftest.py.

    Args:
        container: DI container to use; the production container by default
    """
    settings = Settings()

    instrument_httpx()

    app_instance = FastAPI(
        title="Expense Tracker Auth API",
        description="Sign-in with Google and LINE, and linking of both to one account",
        version="0.1.0",
    )

    instrument_fastapi(app_instance)

    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.api.frontend_url],
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept", "Origin"],
        max_age=600,
    )

    app_instance.add_exception_handler(DomainError, handle_error)
    app_instance.add_exception_handler(InterfaceError, handle_error)

    setup_di(app_instance, container or create_container())

    app_instance.include_router(health.router)
    # Before auth: /auth/linked-accounts must not match /auth/{provider}
    app_instance.include_router(accounts.router)
    app_instance.include_router(auth.router)

    return app_instance


# Create app instance for uvicorn
# Note: Logfire must be configured before this module is imported
app = create_app()
