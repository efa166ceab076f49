"""Vendor Vetting — FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from vendor_vetting.config import Settings, get_settings
from vendor_vetting.db import SqlStore
from vendor_vetting.middleware import (
    configure_cors,
    configure_error_handlers,
    configure_rate_limiting,
    configure_request_logging,
    lifespan,
)
from vendor_vetting.routers import assessments, health, public, scoring, vendors
from vendor_vetting.store import AssessmentRepository, data_store


def build_store(settings: Settings) -> AssessmentRepository:
    """Select the repository named by ``storage_backend``."""
    if settings.storage_backend == "database":
        return SqlStore.from_url(settings.database_url)
    return data_store


def create_app(settings: Settings | None = None, store: AssessmentRepository | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="AI vendor risk assessment and approval workflow",
        version=settings.app_version,
        lifespan=lifespan,
    )

    # Store settings and repository on app state
    app.state.settings = settings
    app.state.store = store if store is not None else build_store(settings)

    # Middleware
    configure_cors(app, settings)
    configure_rate_limiting(app, settings)
    configure_request_logging(app)
    configure_error_handlers(app)

    # Routers
    app.include_router(health.router)
    app.include_router(scoring.router)
    app.include_router(vendors.router)
    app.include_router(assessments.router)
    app.include_router(public.router)

    return app


# Default app instance for uvicorn
app = create_app()
