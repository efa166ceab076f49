"""Assessment model — a vendor vetting questionnaire and its outcome."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from vendor_vetting.models.base import Base


class Assessment(Base):
    """A vetting assessment of a vendor or one of its products."""

    __tablename__ = "assessments"

    vendor_id: Mapped[str] = mapped_column(String(36), ForeignKey("vendors.id"), nullable=False, index=True)
    product_id: Mapped[str | None] = mapped_column(String(36), nullable=True)

    assessment_type: Mapped[str] = mapped_column(String(20), nullable=False, default="new_vendor")
    requested_by: Mapped[str] = mapped_column(String(255), nullable=False)
    request_reason: Mapped[str] = mapped_column(Text, nullable=False)
    department: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Answer maps: question id -> {answer, evidence, notes}
    compliance_answers: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    security_answers: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    operational_answers: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    trust_answers: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    compliance_score: Mapped[int] = mapped_column(Integer, default=0)
    security_score: Mapped[int] = mapped_column(Integer, default=0)
    operational_score: Mapped[int] = mapped_column(Integer, default=0)
    trust_score: Mapped[int] = mapped_column(Integer, default=0)
    total_score: Mapped[int] = mapped_column(Integer, default=0)

    verdict: Mapped[str] = mapped_column(String(20), nullable=False, default="pending", index=True)
    verdict_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    conditions: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft", index=True)
    assessed_by_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    assessed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    reviewed_by_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    vendor_token: Mapped[str | None] = mapped_column(String(64), nullable=True, unique=True, index=True)
    vendor_token_expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    vendor_submitted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    created_by_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    def __repr__(self) -> str:
        return f"<Assessment {self.id[:8]} vendor={self.vendor_id[:8]} status={self.status}>"
