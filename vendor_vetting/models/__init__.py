"""Database models for Vendor Vetting."""

from vendor_vetting.models.base import Base
from vendor_vetting.models.vendor import Vendor, VendorProduct
from vendor_vetting.models.assessment import Assessment

__all__ = [
    "Base",
    "Vendor",
    "VendorProduct",
    "Assessment",
]
