"""
Registros API - FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (uvicorn registros.main:app), by `python -m registros`,
       and by the test suite with per-test settings.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐ ┌──────────┐      │
    │  │  Req ID  │→│  Logging        │→│  CORS    │      │
    │  └──────────┘ └─────────────────┘ └──────────┘      │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────────────────────┐ ┌─────────────┐   │
    │  │ GET/POST/PUT/DELETE registros│ │ GET /health │   │
    │  └──────────────────────────────┘ └─────────────┘   │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ NotFound→404 │ Database→500 │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Open the database and create the `registros` table if missing
    3. Attach the RecordStore to app.state

    Shutdown:
    1. Dispose the database engine (close all connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from registros import __version__
from registros.config import Settings, settings as default_settings
from registros.database import Database
from registros.exceptions import DatabaseError, NotFoundError, ValidationError
from registros.middleware.logging import STORAGE_OPERATION_ATTR, RequestLoggingMiddleware
from registros.middleware.request_id import RequestIDMiddleware, request_id_var
from registros.routes import health, records
from registros.services.record_store import RecordStore

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "An internal error occurred. Please try again later."


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(config: Settings) -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout.
    """
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    if config.log_level != "DEBUG":
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Open the storage adapter on startup and close it on shutdown.

    The RecordStore lives on app.state for the lifetime of the process and
    is handed to route handlers through registros.dependencies.
    """
    config: Settings = app.state.settings

    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging(config)
    logger.info("Registros API %s starting up...", __version__)

    database = Database(config.database_url, echo=config.log_level == "DEBUG")
    await database.create_schema()
    app.state.record_store = RecordStore(database)

    logger.info("Server ready at http://%s:%d", config.backend_host, config.backend_port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Registros API shutting down...")
    await app.state.record_store.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _describe_request_error(exc: RequestValidationError) -> str:
    """Single human-readable line for the first schema violation."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    if first.get("type") == "json_invalid":
        return "Malformed JSON body"
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "path", "query")]
    if not loc:
        return "Request body must be a JSON object"
    return f"{'.'.join(loc)}: {first.get('msg', 'invalid value')}"


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and `{"error": ...}` bodies.

    Handler hierarchy:
        ValidationError         → 400 (message returned verbatim)
        RequestValidationError  → 400 (malformed or mistyped body)
        NotFoundError           → 404
        DatabaseError           → 500 (driver message logged, generic reply)
        Exception (fallback)    → 500
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": _describe_request_error(exc)})

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"error": exc.message})

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error(
            "[%s] Database error in %s %s: %s | Context: %s",
            rid, request.method, request.url.path, exc.message, exc.context,
        )
        # Picked up by the access log line for this request
        setattr(request.state, STORAGE_OPERATION_ATTR, exc.operation)
        message = GENERIC_SERVER_ERROR
        if request.app.state.settings.expose_storage_errors and exc.driver_message:
            message = exc.driver_message
        return JSONResponse(status_code=500, content={"error": message})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(status_code=500, content={"error": GENERIC_SERVER_ERROR})


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(config: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Settings for this instance; defaults to the module singleton
                built from the environment.
    """
    config = config or default_settings

    app = FastAPI(
        title="Registros API",
        description="CRUD over a single table of records stored in SQLite.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = config

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute: RequestID → Logging → CORS
    origins = config.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(records.router)
    app.include_router(health.router)

    return app


# uvicorn expects `registros.main:app` to be importable
app = create_app()
