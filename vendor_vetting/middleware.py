"""Application middleware — rate limiting, CORS, logging, error translation."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Any

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from vendor_vetting.config import Settings
from vendor_vetting.errors import VettingError

logger = structlog.get_logger()


def get_limiter(settings: Settings) -> Limiter:
    """Create a rate limiter instance."""
    return Limiter(
        key_func=get_remote_address,
        default_limits=[settings.rate_limit_default],
    )


def configure_cors(app: FastAPI, settings: Settings) -> None:
    """Add CORS middleware to the application."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-RateLimit-Remaining"],
    )


def configure_rate_limiting(app: FastAPI, settings: Settings) -> None:
    """Apply the default rate limit to every route."""
    limiter = get_limiter(settings)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)


async def vetting_error_handler(request: Request, exc: VettingError) -> JSONResponse:
    """Render a workflow failure as a typed JSON error body."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def configure_error_handlers(app: FastAPI) -> None:
    """Translate workflow exceptions into HTTP responses."""
    app.add_exception_handler(VettingError, vetting_error_handler)


async def logging_middleware(request: Request, call_next) -> Response:
    """Structured logging middleware — logs every request."""
    start_time = time.monotonic()
    response = await call_next(request)
    duration_ms = round((time.monotonic() - start_time) * 1000, 2)

    logger.info(
        "http_request",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=duration_ms,
        client_ip=request.client.host if request.client else "unknown",
    )

    return response


def configure_request_logging(app: FastAPI) -> None:
    """Log every request through ``logging_middleware``."""
    app.middleware("http")(logging_middleware)


def configure_structured_logging(settings: Settings) -> None:
    """Configure structlog for JSON or console output."""
    logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan — startup and shutdown handlers."""
    settings = app.state.settings
    configure_structured_logging(settings)

    logger.info(
        "application_starting",
        version=settings.app_version,
        environment=settings.environment,
        storage_backend=settings.storage_backend,
    )

    yield

    logger.info("application_shutting_down")
