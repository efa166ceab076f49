"""Assessment lifecycle: the status state machine and its transitions.

Statuses move draft/awaiting_vendor → in_review → awaiting_approval →
complete. Every transition runs under the repository's per-assessment lock
and is saved with a version check, so a transition either applies in full
or not at all.
"""

from __future__ import annotations

import math
import secrets
import uuid
from collections.abc import Callable
from datetime import datetime, timedelta
from urllib.parse import urlparse

import structlog
from dateutil.relativedelta import relativedelta

from vendor_vetting.config import Settings, get_settings
from vendor_vetting.errors import (
    AlreadySubmittedError,
    IncompleteAnswersError,
    InvalidInputError,
    InvalidStateError,
    JustificationTooShortError,
    MissingConditionsError,
    MissingEvidenceError,
    NotFoundError,
    TokenExpiredError,
    VettingError,
)
from vendor_vetting.models.base import utcnow
from vendor_vetting.schemas.assessment import (
    AnswerSet,
    ApproveRequest,
    Assessment,
    AssessmentDetail,
    AssessmentStatus,
    CompletionMethod,
    CreateAssessmentRequest,
    EvidenceCheck,
    PartialAnswerSet,
    PublicAssessmentView,
    ScoreResult,
    Verdict,
)
from vendor_vetting.schemas.vendor import (
    CreateProductRequest,
    CreateVendorRequest,
    Vendor,
    VendorProduct,
    VendorRegistryStats,
)
from vendor_vetting.services.scoring import get_risk_level
from vendor_vetting.services.validation import (
    has_required_evidence,
    is_complete,
    unanswered_questions,
)
from vendor_vetting.services.verdict import score_assessment
from vendor_vetting.store import AssessmentRepository

logger = structlog.get_logger()

EDITABLE_STATUSES = frozenset({
    AssessmentStatus.DRAFT,
    AssessmentStatus.IN_REVIEW,
    AssessmentStatus.AWAITING_APPROVAL,
})
SUBMITTABLE_STATUSES = frozenset({AssessmentStatus.DRAFT, AssessmentStatus.IN_REVIEW})
PENDING_STATUSES = frozenset({
    AssessmentStatus.DRAFT,
    AssessmentStatus.AWAITING_VENDOR,
    AssessmentStatus.IN_REVIEW,
    AssessmentStatus.AWAITING_APPROVAL,
})

MIN_COMPARE = 2
MAX_COMPARE = 5
MIN_VENDOR_NAME = 2
MAX_VENDOR_NAME = 100
VENDOR_REGISTRY_LOCK = "vendor-registry"

Mutation = Callable[[Assessment, datetime], bool | None]


def add_months(value: datetime, months: int) -> datetime:
    """Calendar-aware month arithmetic (Jan 31 + 1 month = Feb 28/29)."""
    return value + relativedelta(months=months)


def _require_text(value: str | None, field: str) -> str:
    if value is None or not value.strip():
        raise InvalidInputError(f"{field.replace('_', ' ').capitalize()} is required", field=field)
    return value.strip()


class AssessmentWorkflow:
    """Runs assessment transitions against a repository.

    Args:
        store: Repository holding vendors and assessments.
        settings: Workflow policy (token validity, justification length, ...).
        clock: Returns the current UTC time; injectable for tests.
    """

    def __init__(
        self,
        store: AssessmentRepository,
        settings: Settings | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.store = store
        self.settings = settings or get_settings()
        self.clock = clock

    # ─── Pure operations ─────────────────────────────────────────────────────

    def score(self, answers: AnswerSet) -> ScoreResult:
        """Scores, verdict and conditions for an answer set."""
        return score_assessment(answers)

    def validate_complete(self, answers: AnswerSet) -> bool:
        return is_complete(answers)

    def validate_evidence(self, answers: AnswerSet) -> EvidenceCheck:
        return has_required_evidence(answers)

    # ─── Queries ─────────────────────────────────────────────────────────────

    def list_vendors(self) -> list[Vendor]:
        return self.store.list_vendors()

    def get_vendor(self, vendor_id: str) -> Vendor:
        vendor = self.store.get_vendor(vendor_id)
        if vendor is None:
            raise NotFoundError(f"Vendor '{vendor_id}' not found")
        return vendor

    def get_assessment(self, assessment_id: str) -> Assessment:
        assessment = self.store.get_assessment(assessment_id)
        if assessment is None:
            raise NotFoundError(f"Assessment '{assessment_id}' not found")
        return assessment

    def list_assessments(
        self,
        vendor_id: str | None = None,
        status: AssessmentStatus | None = None,
        verdict: Verdict | None = None,
    ) -> list[Assessment]:
        return self.store.list_assessments(vendor_id=vendor_id, status=status, verdict=verdict)

    def describe(self, assessment: Assessment) -> AssessmentDetail:
        """Enrich an assessment with vendor names, risk band and expiry info."""
        vendor = self.store.get_vendor(assessment.vendor_id)
        product = vendor.find_product(assessment.product_id) if vendor else None
        now = self.clock()

        days_until_expiry = None
        expiring_soon = False
        if assessment.expires_at is not None:
            remaining = assessment.expires_at - now
            days_until_expiry = math.ceil(remaining.total_seconds() / 86400)
            expiring_soon = assessment.expires_at < now + timedelta(days=self.settings.expiring_soon_days)

        url = None
        if assessment.vendor_token:
            url = f"{self.settings.public_base_url.rstrip('/')}/vendor-assessment/{assessment.vendor_token}"

        return AssessmentDetail(
            **assessment.model_dump(),
            vendor_name=vendor.name if vendor else None,
            product_name=product.name if product else None,
            risk_level=get_risk_level(assessment.total_score),
            days_until_expiry=days_until_expiry,
            is_expiring_soon=expiring_soon,
            vendor_assessment_url=url,
        )

    def compare(self, assessment_ids: list[str]) -> list[AssessmentDetail]:
        """Load 2–5 assessments for side-by-side display."""
        if len(assessment_ids) < MIN_COMPARE:
            raise InvalidInputError(
                f"At least {MIN_COMPARE} assessments are required for comparison",
                field="assessment_ids",
            )
        if len(assessment_ids) > MAX_COMPARE:
            raise InvalidInputError(
                f"Maximum {MAX_COMPARE} assessments can be compared at once",
                field="assessment_ids",
            )

        found = {aid: self.store.get_assessment(aid) for aid in assessment_ids}
        missing = [aid for aid, assessment in found.items() if assessment is None]
        if missing:
            raise NotFoundError("One or more assessments not found", {"missing_ids": missing})
        return [self.describe(found[aid]) for aid in assessment_ids]

    def registry_stats(self) -> VendorRegistryStats:
        """Headline counts for the vendor registry."""
        assessments = self.store.list_assessments()
        completed = [a for a in assessments if a.status == AssessmentStatus.COMPLETE]
        return VendorRegistryStats(
            total_vendors=len(self.list_vendors()),
            approved_vendors=sum(1 for a in completed if a.verdict == Verdict.APPROVED),
            conditional_vendors=sum(1 for a in completed if a.verdict == Verdict.CONDITIONAL),
            pending_assessments=sum(1 for a in assessments if a.status in PENDING_STATUSES),
        )

    def get_public_view(self, token: str) -> PublicAssessmentView:
        """The limited view a vendor gets through a self-service link."""
        assessment = self._load_by_token(token)
        self._check_vendor_access(assessment, token, self.clock())

        vendor = self.store.get_vendor(assessment.vendor_id)
        product = vendor.find_product(assessment.product_id) if vendor else None
        return PublicAssessmentView(
            id=assessment.id,
            vendor_name=vendor.name if vendor else None,
            product_name=product.name if product else None,
            assessment_type=assessment.assessment_type,
            requested_by=assessment.requested_by,
            request_reason=assessment.request_reason,
            answers=assessment.answers,
        )

    # ─── Transitions ─────────────────────────────────────────────────────────

    def create_vendor(self, request: CreateVendorRequest, actor_id: str | None = None) -> Vendor:
        """Register a vendor, with any products supplied alongside it."""
        name = (request.name or "").strip()
        if not MIN_VENDOR_NAME <= len(name) <= MAX_VENDOR_NAME:
            raise InvalidInputError(
                f"Vendor name must be between {MIN_VENDOR_NAME} and {MAX_VENDOR_NAME} characters",
                field="name",
            )
        website = (request.website or "").strip()
        parsed = urlparse(website)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise InvalidInputError("Valid website URL is required", field="website")
        description = _require_text(request.description, "description")

        with self.store.lock(VENDOR_REGISTRY_LOCK):
            if any(v.name.lower() == name.lower() for v in self.store.list_vendors()):
                raise InvalidInputError("A vendor with this name already exists", field="name")

            vendor_id = str(uuid.uuid4())
            vendor = Vendor(
                id=vendor_id,
                name=name,
                website=website,
                description=description,
                contact_name=request.contact_name or None,
                contact_email=request.contact_email or None,
                created_by_id=actor_id,
                created_at=self.clock(),
                products=[self._build_product(vendor_id, p) for p in request.products],
            )
            self.store.add_vendor(vendor)

        logger.info("vendor_created", vendor_id=vendor.id, products=len(vendor.products))
        return vendor

    def add_product(self, vendor_id: str, request: CreateProductRequest) -> VendorProduct:
        """Attach a new product to an existing vendor."""
        with self.store.lock(vendor_id):
            vendor = self.get_vendor(vendor_id)
            product = self._build_product(vendor_id, request)
            vendor.products.append(product)
            self.store.add_vendor(vendor)

        logger.info("vendor_product_added", vendor_id=vendor_id, product_id=product.id)
        return product

    def create_assessment(self, request: CreateAssessmentRequest, actor_id: str | None = None) -> Assessment:
        """Open an assessment in draft, or awaiting_vendor with a fresh token."""
        vendor_id = _require_text(request.vendor_id, "vendor_id")
        requested_by = _require_text(request.requested_by, "requested_by")
        request_reason = _require_text(request.request_reason, "request_reason")

        vendor = self.get_vendor(vendor_id)
        product_id = request.product_id or None
        if product_id is not None and vendor.find_product(product_id) is None:
            raise NotFoundError(f"Product '{product_id}' not found for vendor '{vendor_id}'")

        now = self.clock()
        status = AssessmentStatus.DRAFT
        token = None
        token_expires_at = None
        if request.completion_method in (CompletionMethod.VENDOR, CompletionMethod.HYBRID):
            status = AssessmentStatus.AWAITING_VENDOR
            token = secrets.token_urlsafe(32)
            token_expires_at = now + timedelta(days=self.settings.vendor_token_validity_days)

        assessment = Assessment(
            id=str(uuid.uuid4()),
            vendor_id=vendor_id,
            product_id=product_id,
            assessment_type=request.assessment_type,
            requested_by=requested_by,
            request_reason=request_reason,
            department=request.department or None,
            status=status,
            vendor_token=token,
            vendor_token_expires_at=token_expires_at,
            created_at=now,
            created_by_id=actor_id,
        )
        self.store.add_assessment(assessment)

        logger.info(
            "assessment_created",
            assessment_id=assessment.id,
            vendor_id=vendor_id,
            status=status.value,
            completion_method=request.completion_method.value,
        )
        return assessment

    def save_answers(self, assessment_id: str, answers: PartialAnswerSet) -> Assessment:
        """Save answers from the internal team and refresh derived values."""

        def mutate(assessment: Assessment, now: datetime) -> bool:
            if assessment.status == AssessmentStatus.COMPLETE:
                raise InvalidStateError("Cannot update completed assessment", status=assessment.status.value)
            if assessment.status not in EDITABLE_STATUSES:
                raise InvalidStateError(
                    f"Cannot update answers while assessment is {assessment.status.value}",
                    status=assessment.status.value,
                )
            return self._merge_answers(assessment, answers)

        return self._transition(assessment_id, "assessment_answers_saved", mutate)

    def save_vendor_answers(self, token: str, answers: PartialAnswerSet) -> Assessment:
        """Save answers through a vendor self-service link."""
        assessment_id = self._load_by_token(token).id

        def mutate(assessment: Assessment, now: datetime) -> bool:
            self._check_vendor_access(assessment, token, now)
            if assessment.status != AssessmentStatus.AWAITING_VENDOR:
                raise InvalidStateError(
                    "Assessment is not awaiting a vendor response",
                    status=assessment.status.value,
                )
            return self._merge_answers(assessment, answers)

        return self._transition(assessment_id, "assessment_answers_saved", mutate)

    def submit_for_review(self, assessment_id: str, actor_id: str) -> Assessment:
        """Internal submission: draft/in_review → awaiting_approval."""
        actor_id = _require_text(actor_id, "actor_id")

        def mutate(assessment: Assessment, now: datetime) -> None:
            if assessment.status not in SUBMITTABLE_STATUSES:
                raise InvalidStateError(
                    "Assessment cannot be submitted in current status",
                    status=assessment.status.value,
                )
            self._require_submittable(assessment)
            assessment.apply_scores(score_assessment(assessment.answers))
            assessment.status = AssessmentStatus.AWAITING_APPROVAL
            assessment.assessed_by_id = actor_id
            assessment.assessed_at = now

        return self._transition(assessment_id, "assessment_submitted", mutate)

    def vendor_submit(self, token: str) -> Assessment:
        """Vendor submission: awaiting_vendor → in_review. A token submits once."""
        assessment_id = self._load_by_token(token).id

        def mutate(assessment: Assessment, now: datetime) -> None:
            self._check_vendor_access(assessment, token, now)
            if assessment.status != AssessmentStatus.AWAITING_VENDOR:
                raise InvalidStateError(
                    "Assessment is not awaiting a vendor response",
                    status=assessment.status.value,
                )
            self._require_submittable(assessment)
            assessment.apply_scores(score_assessment(assessment.answers))
            assessment.status = AssessmentStatus.IN_REVIEW
            assessment.vendor_submitted_at = now

        return self._transition(assessment_id, "assessment_vendor_submitted", mutate)

    def approve(self, assessment_id: str, actor_id: str, request: ApproveRequest | None = None) -> Assessment:
        """Ratify or override the computed verdict and complete the assessment.

        Overriding to a different verdict needs a written justification. A
        conditional outcome needs at least one condition, taken from the
        request or else from the computed list.
        """
        actor_id = _require_text(actor_id, "actor_id")
        request = request or ApproveRequest()
        min_length = self.settings.min_justification_length

        def mutate(assessment: Assessment, now: datetime) -> None:
            self._require_awaiting_approval(assessment)

            override = request.override_verdict
            if override == Verdict.PENDING:
                raise InvalidInputError("Pending is not a final verdict", field="override_verdict")
            if override is not None and override != assessment.verdict:
                if len((request.verdict_notes or "").strip()) < min_length:
                    raise JustificationTooShortError(
                        f"Override justification must be at least {min_length} characters",
                        min_length=min_length,
                    )

            final_verdict = override or assessment.verdict
            if final_verdict == Verdict.PENDING:
                raise InvalidStateError("Assessment has no verdict to approve", status=assessment.status.value)

            source = request.conditions if request.conditions is not None else assessment.conditions
            conditions = [c.strip() for c in source if c and c.strip()]
            if final_verdict == Verdict.CONDITIONAL and not conditions:
                raise MissingConditionsError("Conditional approval requires at least one condition")
            if final_verdict != Verdict.CONDITIONAL:
                conditions = []

            assessment.verdict = final_verdict
            assessment.verdict_notes = request.verdict_notes or assessment.verdict_notes
            assessment.conditions = conditions
            assessment.status = AssessmentStatus.COMPLETE
            assessment.reviewed_by_id = actor_id
            assessment.reviewed_at = now
            assessment.expires_at = (
                add_months(now, self.settings.approval_validity_months)
                if final_verdict != Verdict.REJECTED
                else None
            )

        return self._transition(assessment_id, "assessment_approved", mutate)

    def reject(self, assessment_id: str, actor_id: str, verdict_notes: str | None) -> Assessment:
        """Reject the vendor and complete the assessment."""
        actor_id = _require_text(actor_id, "actor_id")
        min_length = self.settings.min_justification_length

        def mutate(assessment: Assessment, now: datetime) -> None:
            self._require_awaiting_approval(assessment)
            if len((verdict_notes or "").strip()) < min_length:
                raise JustificationTooShortError(
                    f"Rejection reason must be at least {min_length} characters",
                    min_length=min_length,
                )

            assessment.verdict = Verdict.REJECTED
            assessment.verdict_notes = verdict_notes
            assessment.conditions = []
            assessment.status = AssessmentStatus.COMPLETE
            assessment.reviewed_by_id = actor_id
            assessment.reviewed_at = now
            assessment.expires_at = None

        return self._transition(assessment_id, "assessment_rejected", mutate)

    # ─── Internals ───────────────────────────────────────────────────────────

    def _transition(self, assessment_id: str, event: str, mutate: Mutation) -> Assessment:
        """Load, mutate a copy and save it under the assessment's lock.

        ``mutate`` raises to refuse the transition and returns False when
        there is nothing to write.
        """
        with self.store.lock(assessment_id):
            current = self.get_assessment(assessment_id)
            updated = current.model_copy(deep=True)
            try:
                changed = mutate(updated, self.clock())
            except VettingError as exc:
                logger.warning(
                    "assessment_transition_refused",
                    assessment_id=assessment_id,
                    transition=event,
                    error=exc.kind,
                    status=current.status.value,
                )
                raise

            if changed is False:
                return current

            updated.version = current.version + 1
            self.store.save_assessment(updated, expected_version=current.version)

        logger.info(
            event,
            assessment_id=assessment_id,
            status=updated.status.value,
            verdict=updated.verdict.value,
            total_score=updated.total_score,
            version=updated.version,
        )
        return updated

    def _load_by_token(self, token: str) -> Assessment:
        assessment = self.store.get_assessment_by_token(token) if token else None
        if assessment is None:
            raise NotFoundError("Assessment not found")
        return assessment

    def _check_vendor_access(self, assessment: Assessment, token: str, now: datetime) -> None:
        if assessment.vendor_token != token:
            raise NotFoundError("Assessment not found")
        expires_at = assessment.vendor_token_expires_at
        if expires_at is not None and expires_at < now:
            raise TokenExpiredError("This assessment link has expired")
        if assessment.vendor_submitted_at is not None:
            raise AlreadySubmittedError("This assessment has already been submitted")

    @staticmethod
    def _require_awaiting_approval(assessment: Assessment) -> None:
        if assessment.status != AssessmentStatus.AWAITING_APPROVAL:
            raise InvalidStateError("Assessment is not awaiting approval", status=assessment.status.value)

    @staticmethod
    def _require_submittable(assessment: Assessment) -> None:
        if not is_complete(assessment.answers):
            raise IncompleteAnswersError(
                "All questions must be answered before submission",
                {"unanswered": unanswered_questions(assessment.answers)},
            )
        evidence = has_required_evidence(assessment.answers)
        if not evidence.valid:
            raise MissingEvidenceError(
                "Evidence is required for all Yes answers",
                missing_evidence=evidence.missing_evidence,
            )

    @staticmethod
    def _merge_answers(assessment: Assessment, answers: PartialAnswerSet) -> bool:
        supplied = answers.supplied()
        if not supplied:
            return False
        for category, category_answers in supplied.items():
            setattr(assessment.answers, category.value, dict(category_answers))
        assessment.apply_scores(score_assessment(assessment.answers))
        return True
