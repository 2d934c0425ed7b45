"""Shortify - Main FastAPI Application.

A URL shortening service with:
- Short, unique codes (random with collision retries, or counter-encoded)
- Optional expiration, enforced on every lookup
- Redirects with best-effort access counting
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import settings
from .core.database import get_db
from .core.exceptions import (
    AssignmentExhausted,
    CounterUnavailableError,
    ExpiredError,
    NotFoundError,
)
from .models.url import ErrorResponse
from .utils.clock import utcnow
from .api.routes import health_router, urls_router

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    # Startup
    logger.info(f"Starting {settings.app_title} ({settings.code_strategy} codes)...")
    db = get_db()
    db.init_db()
    logger.info("Database initialized")
    yield
    # Shutdown
    logger.info(f"Shutting down {settings.app_title}...")
    db.close()


# Create FastAPI application
app = FastAPI(
    title=settings.app_title,
    description=settings.app_description,
    version=settings.app_version,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(
    status: int,
    message: str,
    errors: Optional[dict[str, str]] = None,
    headers: Optional[dict[str, str]] = None,
) -> JSONResponse:
    """Build the JSON error envelope."""
    body = ErrorResponse(status=status, message=message, timestamp=utcnow(), errors=errors)
    return JSONResponse(
        status_code=status, content=body.model_dump(mode="json"), headers=headers
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Map request validation failures to 400 with per-field messages."""
    errors = {}
    for error in exc.errors():
        loc = error.get("loc") or ()
        # Malformed JSON reports a character offset instead of a field name
        field = str(loc[-1]) if loc and not isinstance(loc[-1], int) else "body"
        ctx_error = (error.get("ctx") or {}).get("error")
        errors[field] = str(ctx_error) if ctx_error is not None else error["msg"]
    logger.warning(f"Validation failed: {errors}")
    return error_response(400, "Validation failed", errors)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Unmatched routes, disallowed methods and other framework HTTP errors."""
    logger.warning(f"HTTP {exc.status_code} for {request.method} {request.url.path}: {exc.detail}")
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


@app.exception_handler(NotFoundError)
async def not_found_exception_handler(request: Request, exc: NotFoundError):
    """Unknown short code."""
    logger.warning(str(exc))
    return error_response(404, str(exc))


@app.exception_handler(ExpiredError)
async def expired_exception_handler(request: Request, exc: ExpiredError):
    """Short code past its expiration."""
    logger.warning(str(exc))
    return error_response(410, str(exc))


@app.exception_handler(AssignmentExhausted)
async def assignment_exhausted_handler(request: Request, exc: AssignmentExhausted):
    """Code space too crowded for the configured length."""
    logger.error(f"Internal error: {exc}")
    return error_response(500, str(exc))


@app.exception_handler(CounterUnavailableError)
async def counter_unavailable_handler(request: Request, exc: CounterUnavailableError):
    logger.error(f"Counter unavailable: {exc}")
    return error_response(503, "Short code counter unavailable")


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """General exception handler."""
    logger.error(f"Unhandled Exception: {exc}", exc_info=exc)
    return error_response(500, "An unexpected error occurred")


# Include routers
app.include_router(health_router)
app.include_router(urls_router)
