"""FastAPI application entry-point for the Brand Studio API."""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from studio_core.errors import (
    DuplicateResourceError,
    ResourceNotFoundError,
    StudioError,
    UsageLimitExceededError,
)
from studio_core.state.database import is_sqlite_url
from studio_core.state.sqlite_adapter import create_local_tables

from api import __version__
from api.config import APISettings, PlatformEnv, load_api_settings
from api.dependencies import dispose_engine, init_engine
from api.middleware.auth import AuthenticationMiddleware
from api.middleware.logging import RequestLoggingMiddleware
from api.routers import auth, domains, health, onboarding, styleguide, usage

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application startup / shutdown lifecycle.

    On startup:
    - Refuse to run outside dev with development tokens and no ``JWT_SECRET``.
    - Initialise the async database engine.
    - Create database tables if they do not exist (dev or SQLite only;
      other deployments use Alembic migrations).

    On shutdown:
    - Dispose the database engine connection pool.
    """
    settings: APISettings = load_api_settings()

    auth_mode = os.environ.get("AUTH_MODE", "development").lower()
    if (
        settings.platform_env in (PlatformEnv.STAGING, PlatformEnv.PRODUCTION)
        and auth_mode == "development"
        and not os.environ.get("JWT_SECRET")
    ):
        raise RuntimeError(
            f"JWT_SECRET environment variable is required in {settings.platform_env.value} mode. Refusing to start."
        )

    engine = init_engine(settings)
    if settings.platform_env == PlatformEnv.DEV or is_sqlite_url(settings.database_url):
        await create_local_tables(engine)

    if settings.structured_logging:
        from api.middleware.json_formatter import JSONFormatter

        root_logger = logging.getLogger()
        root_logger.handlers.clear()
        handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
        root_logger.addHandler(handler)
        root_logger.setLevel(logging.INFO)
        logger.info("Structured JSON logging enabled")

    yield

    await dispose_engine()
    logger.info("Application shutdown complete")


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def create_app() -> FastAPI:
    """Construct and configure the FastAPI application."""
    settings = load_api_settings()

    app = FastAPI(
        title="Brand Studio API",
        description="Styleguides, onboarding, usage accounting and custom domains.",
        version=__version__,
        lifespan=lifespan,
    )

    # -- Middleware (outermost last) -----------------------------------------

    app.add_middleware(AuthenticationMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=[
            "Authorization",
            "Content-Type",
            "X-Correlation-ID",
            "Accept",
        ],
    )

    # -- Routers -------------------------------------------------------------

    app.include_router(health.router, prefix="/api")
    app.include_router(auth.router, prefix="/api")
    app.include_router(styleguide.router, prefix="/api")
    app.include_router(onboarding.router, prefix="/api")
    app.include_router(usage.router, prefix="/api")
    app.include_router(domains.router, prefix="/api")

    # -- Exception handlers --------------------------------------------------
    # Every error body is ``{"message": str}``.

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _message(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("Validation error on %s: %s", request.url.path, exc.errors())
        return _message(400, "Invalid request")

    # Request bodies are rejected above as RequestValidationError.  A
    # ValueError reaching this point (including pydantic.ValidationError
    # while building a response from stored rows) is a server fault.
    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        logger.error("Invalid data while handling %s: %s", request.url.path, exc, exc_info=True)
        return _message(500, "Internal server error")

    @app.exception_handler(DuplicateResourceError)
    async def duplicate_handler(request: Request, exc: DuplicateResourceError) -> JSONResponse:
        logger.info("Conflict on %s: %s", request.url.path, exc)
        return _message(409, str(exc))

    @app.exception_handler(ResourceNotFoundError)
    async def not_found_handler(request: Request, exc: ResourceNotFoundError) -> JSONResponse:
        return _message(404, str(exc))

    @app.exception_handler(UsageLimitExceededError)
    async def usage_limit_handler(request: Request, exc: UsageLimitExceededError) -> JSONResponse:
        logger.info("Usage limit reached on %s: %s", request.url.path, exc)
        return _message(402, str(exc))

    @app.exception_handler(StudioError)
    async def studio_error_handler(request: Request, exc: StudioError) -> JSONResponse:
        logger.error("Unhandled domain error on %s: %s", request.url.path, exc, exc_info=True)
        return _message(500, "Internal server error")

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.error("Database error: %s", exc, exc_info=True)
        return _message(500, "Internal database error")

    return app


# Module-level application instance used by ``uvicorn api.main:app``.
app = create_app()
