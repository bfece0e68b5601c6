"""checklist - recurring task checklists and compliance tracking for teams."""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from checklist.core.config import DEV_SECRET_KEY, settings
from checklist.core.db_client import close_connection
from checklist.core.errors import (
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    UnauthorizedError,
    classify_error_with_response,
)
from checklist.core.logging import configure_logfire, instrument_fastapi, log_with_context
from checklist.core.schema import init_db
from checklist.interface.checklist_router import router as checklist_router
from checklist.interface.employees_router import router as employees_router


logger = logging.getLogger(__name__)


def validate_startup_configuration() -> None:
    """Refuse to start with configuration that is unsafe for the current environment.

    Raises:
        ValueError: If a production deployment uses the development secret key
    """
    logger.info("startup_validation_begin")

    try:
        settings.require_credential("secret_key", "Session signing")
        if settings.is_production and settings.secret_key == DEV_SECRET_KEY:
            raise ValueError("SECRET_KEY must be changed from the development default in production")

        logger.info("startup_validation_complete", extra={"status": "ok"})

    except ValueError as e:
        logger.error("startup_validation_failed", extra={"error": str(e)})
        print(f"\n❌ Startup validation failed: {e}\n", file=sys.stderr)  # noqa: T201
        sys.exit(1)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager."""
    # Configure logging first so validation logs are captured
    configure_logfire()

    validate_startup_configuration()

    await init_db()
    logger.info("Database initialized")

    yield

    await close_connection()
    logger.info("Database connection closed")


app = FastAPI(
    title="checklist",
    description="Recurring task checklists and compliance tracking",
    version="0.1.0",
    lifespan=lifespan,
)

# Instrument FastAPI with Logfire
instrument_fastapi(app)

# Register routers
app.include_router(checklist_router)
app.include_router(employees_router)


def _route_tag(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "name", None) or request.url.path


def _error_response(exc: Exception) -> JSONResponse:
    error = classify_error_with_response(exc)
    return JSONResponse(content={"error": error.message, "code": error.code}, status_code=error.status_code)


@app.exception_handler(UnauthorizedError)
@app.exception_handler(ForbiddenError)
@app.exception_handler(InvalidInputError)
@app.exception_handler(NotFoundError)
async def checklist_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render a checklist error as ``{"error", "code"}`` with its HTTP status."""
    log_with_context(
        logger,
        "info",
        "request_rejected",
        tag=_route_tag(request),
        error_type=type(exc).__name__,
        error=str(exc),
    )
    return _error_response(exc)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies and parameters are client errors."""
    messages = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"] if part not in ("body", "query", "path"))
        messages.append(f"{field}: {error['msg']}" if field else error["msg"])
    details = "; ".join(messages)
    log_with_context(logger, "info", "request_invalid", tag=_route_tag(request), error=details)
    return _error_response(InvalidInputError(details or "Invalid request"))


@app.exception_handler(Exception)
async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures under the route's tag and hide internals from the caller."""
    logger.exception("[%s] %s", _route_tag(request), type(exc).__name__)
    return _error_response(exc)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(content={"status": "healthy"}, status_code=200)
