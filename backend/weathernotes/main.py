"""
WeatherNotes — FastAPI Application Factory
===========================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (uvicorn weathernotes.main:app) or the `weathernotes`
       console script.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware: Request ID → Access Log → GZip → Session│
    │                                                     │
    │  Routes:                                            │
    │    pages  (/, /login, /register, /logout)           │
    │    notes  (/app, /submit, /app-edit, /app-update,   │
    │            /app-delete)                             │
    │    health (/health)                                 │
    │                                                     │
    │  Exception Handlers:                                │
    │    auth errors → 303 form │ NotFound → 303 /app     │
    │    DatabaseError → 500 page │ bad form → 400 page   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → config validation → wait for database
    Shutdown: dispose database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import RedirectResponse
from starlette.middleware.sessions import SessionMiddleware

from weathernotes import __version__
from weathernotes.config import settings
from weathernotes.database import dispose_engine, wait_for_database
from weathernotes.dependencies import templates
from weathernotes.exceptions import (
    AuthenticationError,
    DatabaseError,
    DuplicateRegistrationError,
    NotAuthenticatedError,
    NotFoundError,
)
from weathernotes.middleware.logging import RequestLoggingMiddleware
from weathernotes.middleware.request_id import RequestIDMiddleware, request_id_var
from weathernotes.routes import health, notes, pages

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: 2024-01-15T12:00:00 [INFO] weathernotes.services.note_service: ...
    Called once during app startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-query and per-request noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    # httpx logs full URLs at INFO, including the weather API key
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("=" * 60)
    logger.info("WeatherNotes %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Not fatal: the app still serves notes without a weather key
        logger.error("Configuration error: %s", str(e))

    try:
        await wait_for_database()
    except Exception as e:
        logger.error("Database unreachable at startup: %s", str(e))
        logger.error("Pages that need the database will fail until it is reachable.")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("WeatherNotes shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    """
    Id of the current request for log lines and error pages.

    The catch-all handler runs in ServerErrorMiddleware, outside
    RequestIDMiddleware, after the ContextVar has been reset; request.state
    still holds the id there.
    """
    return request_id_var.get("") or getattr(request.state, "request_id", "")


def _error_page(request: Request, status_code: int, message: str):
    return templates.TemplateResponse(
        request,
        "error.html",
        {"message": message, "request_id": _request_id(request)},
        status_code=status_code,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to redirects and error pages.

    Handler map:
        AuthenticationError         → 303 exc.redirect_to (/login or /register)
        DuplicateRegistrationError  → 303 /login
        NotAuthenticatedError       → 303 /login
        NotFoundError               → 303 /app
        RequestValidationError      → 400 error page
        DatabaseError               → 500 error page (generic message)
        Exception                   → 500 error page

    Rendered pages never include stack traces, SQL, or exception context.
    """

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        logger.info(
            "[%s] %s: %s",
            _request_id(request),
            type(exc).__name__,
            exc.message,
        )
        return RedirectResponse(exc.redirect_to, status_code=303)

    @app.exception_handler(DuplicateRegistrationError)
    async def handle_duplicate_registration(request: Request, exc: DuplicateRegistrationError):
        return RedirectResponse("/login", status_code=303)

    @app.exception_handler(NotAuthenticatedError)
    async def handle_not_authenticated(request: Request, exc: NotAuthenticatedError):
        return RedirectResponse("/login", status_code=303)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        logger.warning("[%s] %s", _request_id(request), exc.message)
        return RedirectResponse("/app", status_code=303)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        logger.warning("[%s] Invalid form submission to %s", _request_id(request), request.url.path)
        return _error_page(request, 400, "The submitted form was incomplete or invalid.")

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error(
            "[%s] Database error: %s | Context: %s",
            _request_id(request),
            exc.message,
            exc.context,
        )
        return _error_page(request, 500, exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            _request_id(request),
            str(exc),
            exc_info=True,
        )
        return _error_page(request, 500, "An unexpected error occurred. Please try again.")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Middleware executes in REVERSE order of addition; the session middleware
    is added first so it sits closest to the routes.
    """
    app = FastAPI(
        title="WeatherNotes",
        description="Personal notes with the current weather for your city.",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        max_age=settings.session_max_age,
        https_only=settings.session_https_only,
        same_site="lax",
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(pages.router)
    app.include_router(notes.router)
    app.include_router(health.router)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(
        "weathernotes.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
    )
