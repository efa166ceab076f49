"""Health check endpoints for production monitoring."""

from __future__ import annotations

import time
from collections.abc import Callable

from fastapi import APIRouter, Request

from vendor_vetting.schemas.health import HealthResponse, ServiceHealth

router = APIRouter(tags=["health"])


def _check_service(name: str, check_fn: Callable[[], None]) -> ServiceHealth:
    """Run a health check function and return a ServiceHealth result."""
    start = time.monotonic()
    try:
        check_fn()
        latency = (time.monotonic() - start) * 1000
        return ServiceHealth(
            service=name,
            status="healthy",
            latency_ms=round(latency, 2),
        )
    except Exception as exc:
        latency = (time.monotonic() - start) * 1000
        return ServiceHealth(
            service=name,
            status="unhealthy",
            latency_ms=round(latency, 2),
            details=str(exc)[:200],
        )


def _check_app() -> None:
    """Application self-check; always passes."""


def _health(request: Request, services: list[ServiceHealth], degraded: str) -> HealthResponse:
    settings = request.app.state.settings
    overall = "healthy" if all(s.status == "healthy" for s in services) else degraded
    return HealthResponse(
        status=overall,
        version=settings.app_version,
        environment=settings.environment,
        storage_backend=settings.storage_backend,
        services=services,
    )


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Basic health check — is the application running?"""
    return _health(request, [_check_service("app", _check_app)], degraded="degraded")


@router.get("/health/ready", response_model=HealthResponse)
async def readiness_check(request: Request) -> HealthResponse:
    """Readiness check — can the application reach its storage?"""
    services = [
        _check_service("app", _check_app),
        _check_service("storage", request.app.state.store.check),
    ]
    return _health(request, services, degraded="unhealthy")


@router.get("/health/live")
async def liveness_check() -> dict[str, str]:
    """Liveness probe — is the process alive?"""
    return {"status": "alive"}
