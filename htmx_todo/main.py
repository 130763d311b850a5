"""
HTMX Todos: FastAPI Application Factory
=========================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() builds the Database handle, registers middleware,
       exception handlers and routers, and returns the app.
Who:   uvicorn (`htmx_todo.main:app`, or `python -m htmx_todo`) and tests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Logging → GZip           │
    │                                                     │
    │  Routes:      GET /   GET|POST /todos               │
    │               POST /todos/toggle/{id}               │
    │               DELETE /todos/{id}   GET /health      │
    │                                                     │
    │  Exception Handlers:                                │
    │    422 request schema │ 400 ValidationError         │
    │    404 NotFoundError  │ 500 DatabaseError / other   │
    │                                                     │
    │  app.state: settings, database                      │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging → create tables (optional) → log ready
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from htmx_todo import __version__
from htmx_todo.config import Settings, settings as default_settings
from htmx_todo.database import Database
from htmx_todo.exceptions import (
    DatabaseError,
    NotFoundError,
    TodoAppError,
    ValidationError,
)
from htmx_todo.middleware.logging import RequestLoggingMiddleware
from htmx_todo.middleware.request_id import (
    REQUEST_ID_HEADER,
    RequestIDMiddleware,
    request_id_var,
)
from htmx_todo.routes import health, pages, todos

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str) -> None:
    """
    Configure the root logger once for the whole process.

    Format: 2026-01-15T12:00:00 [INFO] htmx_todo.access: GET /todos 200 3.1ms htmx [a1b2c3d4] from 127.0.0.1
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our access logger replaces uvicorn's; SQL echo is controlled by the engine
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown around the serving period."""
    app_settings: Settings = app.state.settings
    database: Database = app.state.database

    setup_logging(app_settings.log_level)
    logger.info("HTMX Todos %s starting up...", __version__)

    if app_settings.create_tables_on_startup:
        await database.create_all()

    logger.info(
        "Server ready at http://%s:%d", app_settings.backend_host, app_settings.backend_port
    )

    yield

    logger.info("HTMX Todos shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to status codes and JSON error bodies.

    Handler hierarchy:
        RequestValidationError → 422 (malformed form body, non-numeric id)
        ValidationError        → 400
        NotFoundError          → 404
        DatabaseError          → 500 (generic message, details logged)
        TodoAppError (base)    → 500
        Exception (fallback)   → 500 (traceback logged)

    htmx does not swap 4xx/5xx responses, so the page stays as it was.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Request rejected: %s %s", rid, request.method, request.url.path)
        return JSONResponse(
            status_code=422,
            content={
                "error": "request_validation_error",
                "message": "Request validation failed",
                "details": {"errors": jsonable_encoder(exc.errors())},
                "request_id": rid,
            },
        )

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

    @app.exception_handler(TodoAppError)
    async def handle_app_error(request: Request, exc: TodoAppError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": exc.message,
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
                "message": "An unexpected error occurred.",
                "request_id": rid,
            },
            # Served by ServerErrorMiddleware, outside RequestIDMiddleware
            headers={REQUEST_ID_HEADER: rid},
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to use; defaults to the environment-loaded
                      `htmx_todo.config.settings`.

    Returns:
        Configured FastAPI instance. `app.state.database` holds the one
        Database handle every request session comes from.
    """
    app_settings = app_settings or default_settings

    app = FastAPI(
        title="HTMX Todos",
        description="Server-rendered to-do list returning HTML fragments for htmx.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.database = Database(app_settings)

    # Last added runs first: RequestID → Logging → GZip → routes
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(pages.router)
    app.include_router(todos.router)
    app.include_router(health.router)

    return app


app = create_app()
