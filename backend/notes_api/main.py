"""
Notes API — FastAPI Application Factory
========================================

What:  Builds the notes API: middleware, exception handlers, routers, lifespan.
How:   create_app() assembles a fresh FastAPI instance; the module-level `app`
       is the one uvicorn serves, tests build their own.
Who:   Called by uvicorn to start the server (uvicorn notes_api.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌───────────┐ ┌──────┐ ┌──────────┐  │
    │  │ Req ID   │→│  Logging  │→│ GZip │→│   CORS   │  │
    │  └──────────┘ └───────────┘ └──────┘ └──────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌─────────────────────────┐ ┌───────────────────┐ │
    │  │ /api/notes[/{id}]       │ │ /api/healthchecker│ │
    │  └─────────────────────────┘ └───────────────────┘ │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐  │
    │  │ Validation→400 │ NotFound→404 │ Persist→500  │  │
    │  └──────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Check mailer configuration (warn only, the API does not need SMTP)
    3. Log startup complete

    Shutdown:
    1. Dispose database engine (close all connections)
    2. Log shutdown complete
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from notes_api import __version__
from notes_api.config import settings
from notes_api.database import dispose_engine
from notes_api.exceptions import (
    NotesAPIError,
    ValidationError,
    NotFoundError,
    PersistenceError,
)
from notes_api.middleware.request_id import RequestIDMiddleware, request_id_var
from notes_api.middleware.logging import RequestLoggingMiddleware
from notes_api.routes import notes, health

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "An internal error occurred. Please try again later."


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Called once during app startup, before anything else logs. The level
    comes from LOG_LEVEL; chatty third-party loggers are held at WARNING.
    """
    log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Manage application lifecycle: startup and shutdown procedures.

    Code before the yield runs on startup, code after it on shutdown.
    The engine is created lazily by the first request, so startup never
    blocks on the database.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Notes API starting up (version %s)...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # The notes API runs without SMTP; only the mailer needs it
        logger.warning("Mailer configuration incomplete: %s", str(e))

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Notes API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(status_code: int, error: str, message: str, details: Optional[dict] = None) -> JSONResponse:
    """Build the API's error body, tagged with the current request ID."""
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "message": message,
            "details": jsonable_encoder(details or {}),
            "request_id": request_id_var.get(""),
        },
    )


def _request_errors(exc: RequestValidationError) -> List[Dict[str, str]]:
    """FastAPI parse errors in the validator's {"field", "message"} format."""
    errors = []
    for err in exc.errors():
        # loc is ("body", ...) or ("query", "limit"); the first part is the source
        loc = [str(part) for part in err.get("loc", ())]
        errors.append({
            "field": ".".join(loc[1:]) or (loc[0] if loc else "body"),
            "message": err.get("msg", "invalid value"),
        })
    return errors


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler hierarchy:
        ValidationError         → 400 validation_error (field list in details)
        RequestValidationError  → 400 validation_error (unparseable body/query)
        NotFoundError           → 404 not_found
        PersistenceError        → 500 server_error (generic message)
        NotesAPIError (base)    → 500 server_error
        Exception (fallback)    → 500 internal_server_error

    Internal details (SQL, driver messages, stack traces) are logged
    server-side and never put in a response.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return error_response(400, "validation_error", exc.message, exc.context)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Malformed JSON, a missing body or a non-integer query parameter."""
        errors = _request_errors(exc)
        fields = ", ".join(e["field"] for e in errors)
        logger.warning("[%s] Malformed request: %s", request_id_var.get(""), fields)
        return error_response(
            400,
            "validation_error",
            f"Request could not be parsed: {fields}",
            {"errors": errors},
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return error_response(404, "not_found", exc.message, exc.context)

    @app.exception_handler(PersistenceError)
    async def handle_persistence_error(request: Request, exc: PersistenceError):
        """Store failure: opaque message out, full context in the server log."""
        logger.error(
            "[%s] Persistence error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return error_response(500, "server_error", GENERIC_SERVER_ERROR)

    @app.exception_handler(NotesAPIError)
    async def handle_notes_api_error(request: Request, exc: NotesAPIError):
        logger.error(
            "[%s] Unhandled application error: %s | Context: %s",
            request_id_var.get(""), exc.message, exc.context,
        )
        return error_response(500, "server_error", GENERIC_SERVER_ERROR)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Last resort: the stack trace goes to the log, never to the client."""
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True)
        return error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Tests build a fresh instance per test and swap the database session
    through `app.dependency_overrides`.
    """
    app = FastAPI(
        title="Notes API",
        description=(
            "CRUD REST API for notes: create, list with pagination, fetch, "
            "partially update and delete."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → GZip → CORS → routes

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["Content-Type"],
        expose_headers=[             # Headers the browser can read from response
            "X-Request-ID",
            "X-Total-Count",
        ],
    )

    # Small responses are not worth compressing
    app.add_middleware(GZipMiddleware, minimum_size=500)

    app.add_middleware(RequestLoggingMiddleware)

    # Added last so it runs first and the ID is set before logging
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(notes.router)
    app.include_router(health.router)

    return app


# uvicorn expects `notes_api.main:app` to be importable
app = create_app()
