"""FastAPI application factory and configuration.

This module provides the application factory function for creating and
configuring the FastAPI application with middleware, routes, exception
handlers and lifecycle handlers.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from authcore.core.config import Settings, get_settings
from authcore.core.logging import configure_logging, get_logger
from authcore.domain.exceptions import AuthError, ErrorCategory
from authcore.domain.services import AuthService
from authcore.infrastructure.api.middleware import CorrelationIdMiddleware
from authcore.infrastructure.api.routes import auth_router
from authcore.infrastructure.auth import CredentialVerifier, PasswordHashConfig, TokenIssuer
from authcore.infrastructure.cache import create_cache
from authcore.infrastructure.persistence.database import (
    close_database,
    get_db_manager,
    init_database,
)

logger = get_logger(__name__)

CATEGORY_STATUS = {
    ErrorCategory.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorCategory.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorCategory.ALREADY_EXISTS: status.HTTP_409_CONFLICT,
    ErrorCategory.UNKNOWN: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Builds the database, cache and AuthService on startup and releases
    them on shutdown.
    """
    settings = get_settings()
    configure_logging(settings)

    logger.info(
        "Starting authcore",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )

    try:
        await init_database()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        raise

    cache = create_cache(settings)
    app.state.auth_service = AuthService(
        session_factory=get_db_manager().session_factory,
        credential_verifier=CredentialVerifier(PasswordHashConfig.from_settings(settings)),
        token_issuer=TokenIssuer(settings),
        cache=cache,
        settings=settings,
    )
    logger.info("Auth service ready", cache_backend=type(cache).__name__)

    yield

    logger.info("Shutting down authcore")
    await cache.close()
    await close_database()
    logger.info("Database connection closed")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Authentication core: login, signup, logout and password reset",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
        lifespan=lifespan,
    )

    app.add_middleware(CorrelationIdMiddleware)
    register_health_check(app, settings)
    app.include_router(auth_router, prefix=f"{settings.api_prefix}/auth", tags=["auth"])
    register_exception_handlers(app)

    return app


def register_health_check(app: FastAPI, settings: Settings) -> None:
    """Register the health check endpoint."""

    @app.get("/health", tags=["health"])
    async def health_check():
        """Returns 200 if the service is running."""
        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.app_version,
        }


def register_exception_handlers(app: FastAPI) -> None:
    """Map classified errors to HTTP responses."""

    @app.exception_handler(AuthError)
    async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
        status_code = CATEGORY_STATUS[exc.category]
        logger.info(
            "Request rejected",
            path=request.url.path,
            error_kind=exc.kind.value,
            status_code=status_code,
        )
        return JSONResponse(
            status_code=status_code,
            content={"error": exc.kind.value, "message": exc.message},
        )


app = create_app()
