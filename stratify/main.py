"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from stratify import __version__
from stratify.api.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from stratify.api.routes import (
    assessments,
    assets,
    auth,
    metrics,
    organizations,
    selection,
    users,
)
from stratify.core.config import Settings, get_settings
from stratify.core.errors import (
    BackendError,
    BackendNotConfiguredError,
    ConflictError,
    LoginError,
    NotFoundError,
    OnboardingError,
    PermissionDeniedError,
    ServiceError,
    ValidationError,
)
from stratify.core.structured_logging import configure_logging, log_json
from stratify.schemas.errors import ErrorResponse
from stratify.services.dashboard import DashboardSession
from stratify.services.session_registry import DashboardRegistry

logger = logging.getLogger(__name__)

settings = get_settings()
configure_logging(settings.log_level)

docs_enabled = settings.api_docs_enabled
if docs_enabled is None:
    docs_enabled = settings.environment != "production"

# Most specific first; the first isinstance match wins.
ERROR_STATUS: list[tuple[type[ServiceError], int]] = [
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (LoginError, status.HTTP_401_UNAUTHORIZED),
    (BackendNotConfiguredError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (OnboardingError, status.HTTP_502_BAD_GATEWAY),
    (BackendError, status.HTTP_502_BAD_GATEWAY),
]


def status_for(exc: ServiceError) -> int:
    for error_type, status_code in ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def build_registry(app_settings: Settings) -> DashboardRegistry:
    return DashboardRegistry(
        lambda: DashboardSession(app_settings),
        ttl_seconds=app_settings.session_ttl_seconds,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    app.state.registry = build_registry(settings)
    log_json(
        logger,
        logging.INFO,
        "backend_mode",
        mode="backend" if settings.backend_configured else "mock",
        environment=settings.environment,
    )
    try:
        yield
    finally:
        await app.state.registry.close_all()


app = FastAPI(
    title="Stratify API",
    description="IT asset inventory and portfolio assessment API",
    version=__version__,
    docs_url="/api/docs" if docs_enabled else None,
    redoc_url="/api/redoc" if docs_enabled else None,
    openapi_url="/api/openapi.json" if docs_enabled else None,
    lifespan=lifespan,
)

# Middleware configuration (order matters - applied in reverse order)
# 1. Request logging (outermost - logs all requests)
app.add_middleware(RequestLoggingMiddleware)

# 2. Security headers
app.add_middleware(SecurityHeadersMiddleware)

# 3. CORS; credentials are required for the session cookie
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        log_json(
            logger,
            logging.ERROR,
            "request_failed",
            path=request.url.path,
            error=exc.error_code,
            message=exc.message,
        )
    body = ErrorResponse(error=exc.error_code, message=exc.message, details=exc.details())
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "mode": "backend" if settings.backend_configured else "mock"}


app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(selection.router, prefix="/api/selected-organization", tags=["selection"])
app.include_router(assets.router, prefix="/api/assets", tags=["assets"])
app.include_router(organizations.router, prefix="/api/organizations", tags=["organizations"])
app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(assessments.router, prefix="/api/assessments", tags=["assessments"])
app.include_router(metrics.router, prefix="/api", tags=["metrics"])
