"""Database-backed repository using SQLAlchemy.

``SqlStore`` implements the same operations as the in-memory ``DataStore``.
Assessment saves are compare-and-swap on the ``version`` column, so a
stale write is refused even across processes.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Any

from sqlalchemy import Engine, create_engine, select, text, update
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from vendor_vetting.errors import ConcurrentModificationError
from vendor_vetting.models import Assessment as AssessmentRow
from vendor_vetting.models import Base
from vendor_vetting.models import Vendor as VendorRow
from vendor_vetting.models import VendorProduct as VendorProductRow
from vendor_vetting.schemas.assessment import AnswerSet, Assessment, AssessmentStatus, Verdict
from vendor_vetting.schemas.vendor import Vendor, VendorProduct
from vendor_vetting.store import RecordLocks


def _assessment_values(assessment: Assessment) -> dict[str, Any]:
    answers = assessment.answers.model_dump(mode="json")
    return {
        "vendor_id": assessment.vendor_id,
        "product_id": assessment.product_id,
        "assessment_type": assessment.assessment_type.value,
        "requested_by": assessment.requested_by,
        "request_reason": assessment.request_reason,
        "department": assessment.department,
        "compliance_answers": answers["compliance"],
        "security_answers": answers["security"],
        "operational_answers": answers["operational"],
        "trust_answers": answers["trust"],
        "compliance_score": assessment.compliance_score,
        "security_score": assessment.security_score,
        "operational_score": assessment.operational_score,
        "trust_score": assessment.trust_score,
        "total_score": assessment.total_score,
        "verdict": assessment.verdict.value,
        "verdict_notes": assessment.verdict_notes,
        "conditions": list(assessment.conditions),
        "status": assessment.status.value,
        "assessed_by_id": assessment.assessed_by_id,
        "assessed_at": assessment.assessed_at,
        "reviewed_by_id": assessment.reviewed_by_id,
        "reviewed_at": assessment.reviewed_at,
        "vendor_token": assessment.vendor_token,
        "vendor_token_expires_at": assessment.vendor_token_expires_at,
        "vendor_submitted_at": assessment.vendor_submitted_at,
        "created_by_id": assessment.created_by_id,
        "expires_at": assessment.expires_at,
        "version": assessment.version,
    }


def _assessment_from_row(row: AssessmentRow) -> Assessment:
    return Assessment(
        id=row.id,
        vendor_id=row.vendor_id,
        product_id=row.product_id,
        assessment_type=row.assessment_type,
        requested_by=row.requested_by,
        request_reason=row.request_reason,
        department=row.department,
        answers=AnswerSet(
            compliance=row.compliance_answers or {},
            security=row.security_answers or {},
            operational=row.operational_answers or {},
            trust=row.trust_answers or {},
        ),
        compliance_score=row.compliance_score,
        security_score=row.security_score,
        operational_score=row.operational_score,
        trust_score=row.trust_score,
        total_score=row.total_score,
        verdict=row.verdict,
        verdict_notes=row.verdict_notes,
        conditions=row.conditions or [],
        status=row.status,
        assessed_by_id=row.assessed_by_id,
        assessed_at=row.assessed_at,
        reviewed_by_id=row.reviewed_by_id,
        reviewed_at=row.reviewed_at,
        vendor_token=row.vendor_token,
        vendor_token_expires_at=row.vendor_token_expires_at,
        vendor_submitted_at=row.vendor_submitted_at,
        created_at=row.created_at,
        created_by_id=row.created_by_id,
        expires_at=row.expires_at,
        version=row.version,
    )


def _vendor_from_rows(row: VendorRow, products: list[VendorProductRow]) -> Vendor:
    return Vendor(
        id=row.id,
        name=row.name,
        website=row.website,
        description=row.description,
        contact_name=row.contact_name,
        contact_email=row.contact_email,
        created_by_id=row.created_by_id,
        created_at=row.created_at,
        products=[
            VendorProduct(
                id=p.id,
                vendor_id=p.vendor_id,
                name=p.name,
                description=p.description,
                category=p.category,
                pricing_model=p.pricing_model,
            )
            for p in products
        ],
    )


class SqlStore:
    """Repository backed by a SQL database."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self.session_factory = sessionmaker(engine, expire_on_commit=False)
        self._locks = RecordLocks()

    @classmethod
    def from_url(cls, database_url: str, create_tables: bool = False) -> SqlStore:
        """Build a store for ``database_url``, optionally creating the schema."""
        kwargs: dict[str, Any] = {}
        if database_url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if database_url in ("sqlite://", "sqlite:///:memory:"):
                kwargs["poolclass"] = StaticPool
        store = cls(create_engine(database_url, **kwargs))
        if create_tables:
            store.create_all()
        return store

    def create_all(self) -> None:
        """Create all tables for development and tests; production uses Alembic."""
        Base.metadata.create_all(self.engine)

    def lock(self, record_id: str) -> AbstractContextManager[None]:
        """Serialise writes to one record within this process."""
        return self._locks.hold(record_id)

    def check(self) -> None:
        """Storage health probe."""
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    # ─── Vendors ─────────────────────────────────────────────────────────────

    def add_vendor(self, vendor: Vendor) -> None:
        """Add or update a vendor and its products."""
        with self.session_factory.begin() as session:
            session.merge(VendorRow(
                id=vendor.id,
                name=vendor.name,
                website=vendor.website,
                description=vendor.description,
                contact_name=vendor.contact_name,
                contact_email=vendor.contact_email,
                created_by_id=vendor.created_by_id,
            ))
            for product in vendor.products:
                session.merge(VendorProductRow(
                    id=product.id,
                    vendor_id=vendor.id,
                    name=product.name,
                    description=product.description,
                    category=product.category.value,
                    pricing_model=product.pricing_model.value,
                ))

    def get_vendor(self, vendor_id: str) -> Vendor | None:
        """Get a vendor by id."""
        with self.session_factory() as session:
            row = session.get(VendorRow, vendor_id)
            if row is None:
                return None
            products = session.scalars(
                select(VendorProductRow).where(VendorProductRow.vendor_id == vendor_id)
            ).all()
            return _vendor_from_rows(row, list(products))

    def list_vendors(self) -> list[Vendor]:
        """All vendors ordered by name."""
        with self.session_factory() as session:
            rows = session.scalars(select(VendorRow).order_by(VendorRow.name)).all()
            products = session.scalars(select(VendorProductRow)).all()
            by_vendor: dict[str, list[VendorProductRow]] = {}
            for product in products:
                by_vendor.setdefault(product.vendor_id, []).append(product)
            return [_vendor_from_rows(row, by_vendor.get(row.id, [])) for row in rows]

    # ─── Assessments ─────────────────────────────────────────────────────────

    def get_assessment(self, assessment_id: str) -> Assessment | None:
        """Get an assessment by id."""
        with self.session_factory() as session:
            row = session.get(AssessmentRow, assessment_id)
            return _assessment_from_row(row) if row else None

    def get_assessment_by_token(self, token: str) -> Assessment | None:
        """Get the assessment a vendor self-service token belongs to."""
        with self.session_factory() as session:
            row = session.scalars(
                select(AssessmentRow).where(AssessmentRow.vendor_token == token)
            ).first()
            return _assessment_from_row(row) if row else None

    def add_assessment(self, assessment: Assessment) -> None:
        """Insert a new assessment."""
        with self.session_factory.begin() as session:
            session.add(AssessmentRow(
                id=assessment.id,
                created_at=assessment.created_at,
                **_assessment_values(assessment),
            ))

    def save_assessment(self, assessment: Assessment, expected_version: int) -> None:
        """Update an assessment if its stored version is still ``expected_version``."""
        with self.session_factory.begin() as session:
            result = session.execute(
                update(AssessmentRow)
                .where(AssessmentRow.id == assessment.id)
                .where(AssessmentRow.version == expected_version)
                .values(**_assessment_values(assessment))
            )
            if result.rowcount == 0:
                actual = session.scalar(
                    select(AssessmentRow.version).where(AssessmentRow.id == assessment.id)
                )
                raise ConcurrentModificationError(
                    f"Assessment '{assessment.id}' was modified concurrently",
                    expected_version=expected_version,
                    actual_version=actual,
                )

    def list_assessments(
        self,
        vendor_id: str | None = None,
        status: AssessmentStatus | None = None,
        verdict: Verdict | None = None,
    ) -> list[Assessment]:
        """Assessments matching every filter given, newest first."""
        stmt = select(AssessmentRow)
        if vendor_id:
            stmt = stmt.where(AssessmentRow.vendor_id == vendor_id)
        if status:
            stmt = stmt.where(AssessmentRow.status == status.value)
        if verdict:
            stmt = stmt.where(AssessmentRow.verdict == verdict.value)
        stmt = stmt.order_by(AssessmentRow.created_at.desc())

        with self.session_factory() as session:
            return [_assessment_from_row(row) for row in session.scalars(stmt).all()]
