"""Shared test fixtures for the Vendor Vetting test suite."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from helpers import ASSESSOR, FrozenClock, create_request
from vendor_vetting.app import create_app
from vendor_vetting.config import Settings
from vendor_vetting.schemas.assessment import CompletionMethod
from vendor_vetting.schemas.vendor import PricingModel, ProductCategory, Vendor, VendorProduct
from vendor_vetting.services.workflow import AssessmentWorkflow
from vendor_vetting.store import data_store


def _test_settings() -> Settings:
    """Return settings suitable for testing."""
    return Settings(
        environment="development",
        debug=True,
        log_format="console",
        rate_limit_default="1000/minute",
        allowed_origins="http://localhost:3000,http://localhost:5015",
        storage_backend="memory",
    )


@pytest.fixture
def settings():
    """Test settings."""
    return _test_settings()


@pytest.fixture
def app(settings):
    """Create a fresh FastAPI app for testing."""
    return create_app(settings, store=data_store)


@pytest.fixture
def client(app):
    """HTTP test client."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def reset_store():
    """Reset the global data store before each test."""
    data_store.reset()
    yield
    data_store.reset()


@pytest.fixture
def clock():
    """A fixed clock starting 2026-03-15 09:00 UTC."""
    return FrozenClock(datetime(2026, 3, 15, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def workflow(settings, clock):
    """Workflow bound to the global data store and the fixed clock."""
    return AssessmentWorkflow(data_store, settings, clock=clock)


@pytest.fixture
def sample_vendor():
    """Register a vendor with two products."""
    vendor = Vendor(
        id="vendor-1",
        name="Acme AI",
        website="https://acme-ai.example.com",
        description="Enterprise assistant and API provider",
        contact_name="Enterprise Sales",
        contact_email="sales@acme-ai.example.com",
        products=[
            VendorProduct(
                id="product-1",
                vendor_id="vendor-1",
                name="Acme Assistant",
                description="Chat assistant with enterprise controls",
                category=ProductCategory.CHATBOT,
                pricing_model=PricingModel.ENTERPRISE,
            ),
            VendorProduct(
                id="product-2",
                vendor_id="vendor-1",
                name="Acme API",
                category=ProductCategory.CODING,
                pricing_model=PricingModel.PAY_PER_USE,
            ),
        ],
    )
    data_store.add_vendor(vendor)
    return vendor


@pytest.fixture
def draft_assessment(workflow, sample_vendor):
    """An internal assessment in draft."""
    return workflow.create_assessment(create_request(), actor_id=ASSESSOR)


@pytest.fixture
def vendor_assessment(workflow, sample_vendor):
    """A vendor-completed assessment awaiting the vendor."""
    return workflow.create_assessment(
        create_request(method=CompletionMethod.VENDOR, product_id="product-1"),
        actor_id=ASSESSOR,
    )
