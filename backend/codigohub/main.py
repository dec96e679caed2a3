"""
CodigoHub Backend — FastAPI Application Factory
================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   uvicorn (`uvicorn codigohub.main:app`) and the test client.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌──────┐ ┌──────┐        │
    │  │  Req ID  │→│ Logging  │→│ GZip │→│ CORS │        │
    │  └──────────┘ └──────────┘ └──────┘ └──────┘        │
    │                                                     │
    │  Routers:                                           │
    │  codigos · collections · codigo-categorias ·        │
    │  categories · subscriptions · users · health        │
    │                                                     │
    │  Exception Handlers:                                │
    │  VALIDATION→400 │ AUTHENTICATION→401 │ FORBIDDEN→403│
    │  NOT_FOUND→404  │ DUPLICATE→409 │ DELETE/STORAGE→500│
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → configuration check → optional create_all
    Shutdown: dispose the engine (close pooled connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from codigohub import __version__
from codigohub.config import settings
from codigohub.database import create_all, dispose_engine
from codigohub.exceptions import (
    AuthenticationError,
    CodigoHubError,
    DatabaseError,
    DeleteError,
    DuplicateError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from codigohub.middleware.logging import RequestLoggingMiddleware
from codigohub.middleware.request_id import RequestIDMiddleware, request_id_var
from codigohub.routes import (
    categories,
    codigo_categorias,
    codigos,
    collections,
    health,
    subscriptions,
    users,
)
from codigohub.schemas.common import ErrorResponse

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the whole process.

    Format: 2024-01-15T12:00:00 [INFO] codigohub.services.codigo_service: ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers that are chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("CodigoHub Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving; tokens still work with the default secret in development
        logger.error("Configuration error: %s", str(e))

    if settings.db_create_all:
        await create_all()
        logger.info("Database tables ensured from ORM metadata")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("CodigoHub Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(
    status_code: int,
    message: str,
    error: str,
    code: Optional[str],
    details: Optional[dict] = None,
) -> JSONResponse:
    body = ErrorResponse(
        message=message,
        error=error,
        code=code,
        details=details or None,
        request_id=request_id_var.get("") or None,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception classes to status codes and the uniform error body.

    Handler hierarchy:
        ValidationError / RequestValidationError → 400
        AuthenticationError                      → 401
        ForbiddenError                           → 403
        NotFoundError                            → 404
        DuplicateError                           → 409
        DeleteError                              → 500
        DatabaseError                            → 500 (generic message)
        CodigoHubError (base)                    → its status_code
        Exception (fallback)                     → 500

    `message` is what a client can show a user; `error` is the raw string
    from the layer that failed.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(400, "Invalid input data", exc.message, exc.code, exc.context)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
                "message": err.get("msg", ""),
            }
            for err in exc.errors()
        ]
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), errors)
        return _error_response(
            400,
            "Invalid input data",
            "; ".join(f"{e['field']}: {e['message']}" for e in errors),
            ValidationError.code,
            {"errors": errors},
        )

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        return _error_response(401, "Authentication required", exc.message, exc.code)

    @app.exception_handler(ForbiddenError)
    async def handle_forbidden(request: Request, exc: ForbiddenError):
        return _error_response(
            403, "You do not have permission to perform this action", exc.message, exc.code
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, "The requested resource was not found", exc.message, exc.code)

    @app.exception_handler(DuplicateError)
    async def handle_duplicate(request: Request, exc: DuplicateError):
        return _error_response(409, "The resource already exists", exc.message, exc.code)

    @app.exception_handler(DeleteError)
    async def handle_delete_error(request: Request, exc: DeleteError):
        logger.error("[%s] Delete error: %s", request_id_var.get(""), exc.message)
        return _error_response(500, "The resource could not be deleted", exc.message, exc.code)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        # Context stays in the logs, never in the response
        logger.error(
            "[%s] Database error: %s | Context: %s",
            request_id_var.get(""),
            exc.message,
            exc.context,
        )
        return _error_response(
            500, "An internal error occurred. Please try again later.", exc.message, exc.code
        )

    @app.exception_handler(CodigoHubError)
    async def handle_application_error(request: Request, exc: CodigoHubError):
        logger.error("[%s] %s: %s", request_id_var.get(""), type(exc).__name__, exc.message)
        return _error_response(exc.status_code, exc.message, exc.message, exc.code)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error(
            "[%s] Unexpected error: %s",
            request_id_var.get(""),
            str(exc),
            exc_info=True,
        )
        return _error_response(
            500,
            "An unexpected error occurred. Please try again or contact support.",
            str(exc),
            None,
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="CodigoHub API",
        description=(
            "Code snippet sharing: snippets with tags, collections with "
            "public/private visibility, categories and subscriptions."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Executes in reverse order of addition: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(users.router)
    app.include_router(codigos.router)
    app.include_router(collections.router)
    app.include_router(codigo_categorias.router)
    app.include_router(categories.router)
    app.include_router(subscriptions.router)
    app.include_router(health.router)

    return app


# ── Application Instance ─────────────────────────────────────────────────
app = create_app()
