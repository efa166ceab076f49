"""Initial schema — vendors, products and assessments.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Vendors
    op.create_table(
        "vendors",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(100), unique=True, nullable=False),
        sa.Column("website", sa.String(500), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("contact_name", sa.String(255), nullable=True),
        sa.Column("contact_email", sa.String(255), nullable=True),
        sa.Column("created_by_id", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # Vendor products
    op.create_table(
        "vendor_products",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("vendor_id", sa.String(36), sa.ForeignKey("vendors.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("category", sa.String(50), nullable=False, server_default="other"),
        sa.Column("pricing_model", sa.String(50), nullable=False, server_default="enterprise"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_vendor_products_vendor_id", "vendor_products", ["vendor_id"])

    # Assessments
    op.create_table(
        "assessments",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("vendor_id", sa.String(36), sa.ForeignKey("vendors.id"), nullable=False),
        sa.Column("product_id", sa.String(36), nullable=True),
        sa.Column("assessment_type", sa.String(20), nullable=False, server_default="new_vendor"),
        sa.Column("requested_by", sa.String(255), nullable=False),
        sa.Column("request_reason", sa.Text, nullable=False),
        sa.Column("department", sa.String(255), nullable=True),
        sa.Column("compliance_answers", sa.JSON, nullable=False),
        sa.Column("security_answers", sa.JSON, nullable=False),
        sa.Column("operational_answers", sa.JSON, nullable=False),
        sa.Column("trust_answers", sa.JSON, nullable=False),
        sa.Column("compliance_score", sa.Integer, server_default="0"),
        sa.Column("security_score", sa.Integer, server_default="0"),
        sa.Column("operational_score", sa.Integer, server_default="0"),
        sa.Column("trust_score", sa.Integer, server_default="0"),
        sa.Column("total_score", sa.Integer, server_default="0"),
        sa.Column("verdict", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("verdict_notes", sa.Text, nullable=True),
        sa.Column("conditions", sa.JSON, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("assessed_by_id", sa.String(255), nullable=True),
        sa.Column("assessed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reviewed_by_id", sa.String(255), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("vendor_token", sa.String(64), nullable=True, unique=True),
        sa.Column("vendor_token_expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("vendor_submitted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by_id", sa.String(255), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("version", sa.Integer, nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_assessments_vendor_id", "assessments", ["vendor_id"])
    op.create_index("ix_assessments_status", "assessments", ["status"])
    op.create_index("ix_assessments_verdict", "assessments", ["verdict"])
    op.create_index("ix_assessments_vendor_token", "assessments", ["vendor_token"])


def downgrade() -> None:
    op.drop_table("assessments")
    op.drop_table("vendor_products")
    op.drop_table("vendors")
