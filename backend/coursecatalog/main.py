"""
Course Catalog Backend — FastAPI Application Factory
=====================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn coursecatalog.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────────┐ ┌──────────┐ ┌─────────────────┐  │
    │  │  Rate Limit  │→│ Req ID   │→│  Logging        │  │
    │  └──────────────┘ └──────────┘ └─────────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌──────────────┐ ┌─────────────┐  │
    │  │ /api/syllabi │ │ /api/courses │ │ GET /health │  │
    │  └──────────────┘ └──────────────┘ └─────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ NotFound→404 │ DB/Serial→500│   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, validate settings
    Shutdown: dispose the database engine (closes every pooled connection)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from coursecatalog import __version__
from coursecatalog.config import settings
from coursecatalog.database import dispose_engine
from coursecatalog.exceptions import (
    CourseCatalogError,
    DatabaseError,
    NotFoundError,
    SerializationError,
    ValidationError,
)
from coursecatalog.middleware.logging import RequestLoggingMiddleware
from coursecatalog.middleware.rate_limit import RateLimitMiddleware
from coursecatalog.middleware.request_id import RequestIDMiddleware, request_id_var
from coursecatalog.routes import courses, health, syllabi

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: 2024-09-01T12:00:00 [INFO] coursecatalog.services.course_service: ...
    Called once during app startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging, configuration check.
    Shutdown: dispose the pooled engine so PostgreSQL sees clean disconnects.
    """
    setup_logging()
    logger.info("Course Catalog Backend starting up...")

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: /health will report the database as unreachable
        logger.error("Configuration error: %s", str(e))

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("Course Catalog Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _server_error(rid: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={
            "error": "server_error",
            "message": message,
            "request_id": rid,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and a consistent JSON body.

    Handler hierarchy:
        ValidationError         → 400 bad_request
        NotFoundError           → 404 not_found
        SerializationError      → 500 server_error (own log line)
        DatabaseError           → 500 server_error
        CourseCatalogError      → 500 server_error (catch-all for custom)
        Exception               → 500 internal_server_error

    5xx bodies never include driver messages or SQL; those are logged only.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Bad request: %s", rid, exc.message)
        return JSONResponse(
            status_code=400,
            content={
                "error": "bad_request",
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=404,
            content={
                "error": "not_found",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(SerializationError)
    async def handle_serialization_error(request: Request, exc: SerializationError):
        rid = request_id_var.get("")
        logger.error(
            "[%s] Serialization error preparing response: %s | Context: %s",
            rid,
            exc.message,
            exc.context,
        )
        return _server_error(rid, exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return _server_error(rid, exc.message)

    @app.exception_handler(CourseCatalogError)
    async def handle_catalog_error(request: Request, exc: CourseCatalogError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return _server_error(rid, "An internal error occurred. Please try again later.")

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again later.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="Course Catalog API",
        description=(
            "Read-only course catalog: syllabus links by course number, and course "
            "listings filtered by department, SBC tag and free-text search."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # CORS → RateLimit → RequestID → Logging → GZip → route
    # CORS is outermost so 429s and preflights carry the CORS headers too.

    # Full catalog listings are large JSON arrays
    app.add_middleware(GZipMiddleware, minimum_size=500)

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RateLimitMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(syllabi.router)
    app.include_router(courses.router)
    app.include_router(health.router)

    return app


app = create_app()
