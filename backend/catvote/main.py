"""
CatVote: FastAPI Application Factory
====================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app(store) returns a configured FastAPI app
       bound to an explicitly constructed Store.
Who:   uvicorn (`uvicorn catvote.main:app` or `python -m catvote`) and tests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐ ┌──────────────┐  │
    │  │  Req ID  │→│  Logging        │→│  CORS        │  │
    │  └──────────┘ └─────────────────┘ └──────────────┘  │
    │                                                     │
    │  Routes (/api):                                     │
    │  cats · votes · winner · clear · health             │
    │                                                     │
    │  Exception Handlers:                                │
    │  ValidationError→400 │ DatabaseError→500 │ *→500    │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging (and Sentry when SENTRY_DSN is set)
    2. Create store tables (idempotent). A failure is logged and the server
       keeps running, so /api/health still answers.

    Shutdown:
    1. Dispose the store engine (close pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from catvote import __version__
from catvote.config import settings
from catvote.database import Store
from catvote.exceptions import CatVoteError, DatabaseError, ValidationError
from catvote.middleware.logging import RequestLoggingMiddleware
from catvote.middleware.request_id import RequestIDMiddleware, request_id_var
from catvote.routes import cats, health, maintenance, votes, winner

logger = logging.getLogger(__name__)

# Client-facing messages for schema failures, by path
VALIDATION_MESSAGES = {
    "/api/votes": "Invalid cat_id or vote_type",
    "/api/cats": "Invalid cats data",
}


# ══════════════════════════════════════════════════════════════════════════
# Logging & Error Reporting
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Library chatter stays at WARNING and above
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def setup_error_reporting() -> bool:
    """
    Initialize Sentry when a DSN is configured.

    Returns:
        True if reporting was enabled, False when SENTRY_DSN is empty.
    """
    if not settings.sentry_dsn:
        logger.info("Error reporting disabled (SENTRY_DSN not set)")
        return False

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        release=f"catvote@{__version__}",
        send_default_pii=False,
    )
    logger.info("Error reporting enabled (environment=%s)", settings.environment)
    return True


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    setup_error_reporting()
    logger.info("=" * 60)
    logger.info("CatVote API starting up...")

    store: Store = app.state.store
    try:
        await store.create_tables()
    except (SQLAlchemyError, OSError) as e:
        # Don't exit: the process keeps serving, store-backed routes answer 500
        logger.error("Could not open store %s: %s", store.database_url, str(e))

    logger.info("Server ready at http://%s:%d", settings.host, settings.port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("CatVote API shutting down...")
    await store.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and a single error envelope.

    Handler hierarchy:
        ValidationError         → 400 Bad Request
        RequestValidationError  → 400 Bad Request (schema failures)
        DatabaseError           → 500 Internal Server Error (generic message)
        CatVoteError (base)     → 500 Internal Server Error
        Exception (fallback)    → 500 Internal Server Error

    Responses never include driver messages, SQL or stack traces; those are
    logged server-side with the request ID.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Body/query failed its schema: same 400 envelope as ValidationError."""
        rid = request_id_var.get("")
        errors = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
                "message": err.get("msg", ""),
            }
            for err in exc.errors()
        ]
        message = VALIDATION_MESSAGES.get(request.url.path, "Invalid request")
        logger.warning("[%s] Validation error on %s: %s", rid, request.url.path, errors)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": message,
                "details": {"errors": errors},
                "request_id": rid,
            },
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "An internal error occurred. Please try again later.",
                "request_id": rid,
            },
        )

    @app.exception_handler(CatVoteError)
    async def handle_app_error(request: Request, exc: CatVoteError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "An internal error occurred. Please try again later.",
                "request_id": rid,
            },
        )

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

def create_app(store: Optional[Store] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store: Store handle the handlers will use. Defaults to a Store on
               settings.database_url. Tests pass their own.

    Returns:
        Fully configured FastAPI instance with the store on app.state.store.
    """
    app = FastAPI(
        title="CatVote API",
        description="Vote on cat pictures and see the monthly winner.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.store = store or Store(settings.database_url, echo=settings.log_level == "DEBUG")

    # ── Register Middleware ───────────────────────────────────────────────
    # Executes in reverse order of addition: RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(cats.router)
    app.include_router(votes.router)
    app.include_router(winner.router)
    app.include_router(maintenance.router)
    app.include_router(health.router)

    return app


# uvicorn expects `catvote.main:app` to be importable
app = create_app()
