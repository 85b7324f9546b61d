"""
TaskTrack Backend - FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() builds the Database handle, registers middleware,
       exception handlers and routers, and returns the app.
Who:   uvicorn (`tasktrack.main:app` or the `tasktrack` console script),
       serverless hosts that import `app`, and the test suite.

Application Architecture:
    ┌──────────────────────────────────────────────────────┐
    │                   FastAPI App                        │
    │                                                      │
    │  Middleware:  Request ID → Logging → CORS            │
    │                                                      │
    │  Routes:                                             │
    │   POST /register   POST /login     GET /health       │
    │   GET|POST /tasks/{user_id}                          │
    │   DELETE|PATCH /tasks/{task_id}                      │
    │                                                      │
    │  Exception Handlers:                                 │
    │   Validation→400  Conflict→400  Auth→401             │
    │   NotFound→404    Database→500  Exception→500        │
    │                                                      │
    │  app.state.db: Database (engine + session factory)   │
    └──────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, optionally create tables (DB_AUTO_CREATE)
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List, Optional, Sequence, Tuple

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from tasktrack import __version__
from tasktrack.config import settings
from tasktrack.database import Database
from tasktrack.exceptions import (
    AuthenticationError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from tasktrack.middleware.logging import RequestLoggingMiddleware
from tasktrack.middleware.request_id import RequestIDMiddleware, request_id_var
from tasktrack.routes import accounts, health, tasks

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure root logging once for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s on stdout,
    level from LOG_LEVEL. Chatty third-party loggers are held at WARNING.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    database: Database = app.state.db
    logger.info("TaskTrack Backend %s starting up...", __version__)

    if settings.db_auto_create:
        await database.create_all()

    logger.info("CORS origins: %s", ", ".join(settings.cors_origins_list) or "(none)")
    logger.info("Server ready on %s:%d", settings.backend_host, settings.backend_port)

    yield

    logger.info("TaskTrack Backend shutting down...")
    await database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def required_body_fields(request: Request) -> List[str]:
    """Required field names of the matched route's body model, in declaration order."""
    route = request.scope.get("route")
    body_field = getattr(route, "body_field", None)
    model = getattr(getattr(body_field, "field_info", None), "annotation", None)
    if isinstance(model, type) and issubclass(model, BaseModel):
        return [name for name, info in model.model_fields.items() if info.is_required()]
    return []


def describe_validation_errors(
    errors: Sequence[Dict[str, Any]],
    body_fields: Sequence[str] = (),
) -> Tuple[Optional[str], str]:
    """
    Turn FastAPI/Pydantic error entries into (field, message).

    Only the first error is reported; the message names the field so the
    client knows what to fix. An error against the body as a whole (absent,
    or not a JSON object) is reported against `body_fields`, the required
    fields of the expected body.
    """
    if not errors:
        return None, "Invalid request"

    first = errors[0]
    kind = first.get("type", "")
    if kind == "json_invalid":
        return None, "Request body is not valid JSON"

    parts: List[str] = [
        str(part) for part in first.get("loc", ()) if part not in ("body", "path", "query")
    ]
    field = ".".join(parts) if parts else None

    if field is None:
        if not body_fields:
            return None, "Request body is required"
        if len(body_fields) == 1:
            return body_fields[0], f"Field '{body_fields[0]}' is required"
        names = ", ".join(f"'{name}'" for name in body_fields)
        return body_fields[0], f"Fields {names} are required"
    if kind == "missing":
        return field, f"Field '{field}' is required"
    return field, f"Field '{field}' is invalid: {first.get('msg', 'invalid value')}"


def _error_body(error: str, message: str, details: Optional[dict] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"error": error, "message": message}
    if details:
        body["details"] = details
    body["request_id"] = request_id_var.get("")
    return body


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to status codes and the ErrorResponse body.

        RequestValidationError  → 400 (FastAPI's default 422 is replaced)
        ValidationError         → 400
        ConflictError           → 400
        AuthenticationError     → 401
        NotFoundError           → 404
        DatabaseError           → 500 (generic message)
        Exception               → 500 (generic message)

    Store and unexpected errors are logged server-side; the response body
    never contains their details.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        field, message = describe_validation_errors(
            exc.errors(), required_body_fields(request)
        )
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), message)
        return JSONResponse(
            status_code=400,
            content=_error_body(
                "validation_error", message, {"field": field} if field else None
            ),
        )

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return JSONResponse(
            status_code=400,
            content=_error_body("validation_error", exc.message, exc.context),
        )

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        return JSONResponse(
            status_code=400,
            content=_error_body("conflict", exc.message),
        )

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        # Same body for every cause; the cause stays in the log
        logger.warning(
            "[%s] Login rejected: %s", request_id_var.get(""), exc.context.get("reason")
        )
        return JSONResponse(
            status_code=401,
            content={"error": "invalid_credentials", "message": exc.message},
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(
            status_code=404,
            content=_error_body("not_found", exc.message),
        )

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "server_error", "An internal error occurred. Please try again later."
            ),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                "internal_server_error",
                "An unexpected error occurred. Please try again later.",
            ),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        database: Store handle to use. Built from settings when omitted;
                  tests pass one bound to a scratch database.
    """
    app = FastAPI(
        title="TaskTrack API",
        description="Task-management backend: user accounts and per-user task lists.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Built here, not in lifespan: hosts that skip ASGI lifespan events still get it
    app.state.db = database or Database()

    # Last added runs first: RequestID → Logging → CORS → routes
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(accounts.router)
    app.include_router(tasks.router)
    app.include_router(health.router)

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn on BACKEND_HOST:PORT."""
    import uvicorn

    uvicorn.run(
        "tasktrack.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


app = create_app()
