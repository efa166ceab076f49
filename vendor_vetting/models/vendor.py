"""Vendor models — the AI vendors and products being vetted."""

from __future__ import annotations

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from vendor_vetting.models.base import Base


class Vendor(Base):
    """A registered AI vendor."""

    __tablename__ = "vendors"

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    website: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    contact_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_by_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<Vendor {self.name}>"


class VendorProduct(Base):
    """A product offered by a vendor."""

    __tablename__ = "vendor_products"

    vendor_id: Mapped[str] = mapped_column(String(36), ForeignKey("vendors.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    category: Mapped[str] = mapped_column(String(50), nullable=False, default="other")
    pricing_model: Mapped[str] = mapped_column(String(50), nullable=False, default="enterprise")

    def __repr__(self) -> str:
        return f"<VendorProduct {self.name} vendor={self.vendor_id[:8]}>"
