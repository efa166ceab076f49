"""Vendor registry endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header

from vendor_vetting.dependencies import get_workflow
from vendor_vetting.schemas.vendor import (
    CreateProductRequest,
    CreateVendorRequest,
    Vendor,
    VendorProduct,
    VendorRegistryStats,
)
from vendor_vetting.services.workflow import AssessmentWorkflow

router = APIRouter(prefix="/api/vendors", tags=["vendors"])


@router.get("", response_model=list[Vendor])
async def list_vendors(workflow: AssessmentWorkflow = Depends(get_workflow)) -> list[Vendor]:
    """All registered vendors."""
    return workflow.list_vendors()


@router.post("", response_model=Vendor, status_code=201)
async def create_vendor(
    request: CreateVendorRequest,
    actor_id: str | None = Header(default=None, alias="X-Actor-Id"),
    workflow: AssessmentWorkflow = Depends(get_workflow),
) -> Vendor:
    """Register a vendor. Names are unique regardless of case."""
    return workflow.create_vendor(request, actor_id=actor_id)


@router.get("/stats", response_model=VendorRegistryStats)
async def get_registry_stats(workflow: AssessmentWorkflow = Depends(get_workflow)) -> VendorRegistryStats:
    """Approved, conditional and pending counts across the registry."""
    return workflow.registry_stats()


@router.get("/{vendor_id}", response_model=Vendor)
async def get_vendor(vendor_id: str, workflow: AssessmentWorkflow = Depends(get_workflow)) -> Vendor:
    """A single vendor with its products."""
    return workflow.get_vendor(vendor_id)


@router.post("/{vendor_id}/products", response_model=VendorProduct, status_code=201)
async def add_product(
    vendor_id: str,
    request: CreateProductRequest,
    workflow: AssessmentWorkflow = Depends(get_workflow),
) -> VendorProduct:
    """Add a product to an existing vendor."""
    return workflow.add_product(vendor_id, request)
