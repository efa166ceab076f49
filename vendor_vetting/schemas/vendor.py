"""Schemas for vendor and product reference records."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class ProductCategory(str, Enum):
    """Kind of AI product offered by a vendor."""

    CHATBOT = "chatbot"
    CODING = "coding"
    WRITING = "writing"
    IMAGE_GENERATION = "image_generation"
    VIDEO_GENERATION = "video_generation"
    AUDIO_TRANSCRIPTION = "audio_transcription"
    DATA_ANALYSIS = "data_analysis"
    AUTOMATION = "automation"
    OTHER = "other"


class PricingModel(str, Enum):
    """How a product is billed."""

    FREE = "free"
    FREEMIUM = "freemium"
    SUBSCRIPTION = "subscription"
    PAY_PER_USE = "pay_per_use"
    ENTERPRISE = "enterprise"


class VendorProduct(BaseModel):
    """A product offered by a vendor."""

    id: str
    vendor_id: str
    name: str
    description: str = ""
    category: ProductCategory = ProductCategory.OTHER
    pricing_model: PricingModel = PricingModel.ENTERPRISE


class Vendor(BaseModel):
    """An AI vendor registered for vetting."""

    id: str
    name: str = Field(..., min_length=2, max_length=100)
    website: str
    description: str = ""
    contact_name: str | None = None
    contact_email: str | None = None
    created_by_id: str | None = None
    created_at: datetime | None = None
    products: list[VendorProduct] = Field(default_factory=list)

    def find_product(self, product_id: str | None) -> VendorProduct | None:
        """Return the product with ``product_id`` or None."""
        if product_id is None:
            return None
        for product in self.products:
            if product.id == product_id:
                return product
        return None


class VendorRegistryStats(BaseModel):
    """Headline numbers for the vendor registry."""

    total_vendors: int
    approved_vendors: int
    conditional_vendors: int
    pending_assessments: int


class CreateProductRequest(BaseModel):
    """Payload for adding a product to a vendor."""

    name: str | None = None
    description: str | None = None
    category: ProductCategory = ProductCategory.OTHER
    pricing_model: PricingModel = PricingModel.ENTERPRISE


class CreateVendorRequest(BaseModel):
    """Payload for registering a vendor, optionally with its products."""

    name: str | None = None
    website: str | None = None
    description: str | None = None
    contact_name: str | None = None
    contact_email: str | None = None
    products: list[CreateProductRequest] = Field(default_factory=list)
