"""Schemas for vendor assessments — answers, scores, lifecycle and API payloads."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from vendor_vetting.schemas.question import Category


class AnswerValue(str, Enum):
    """Possible answers to a vetting question."""

    YES = "yes"
    NO = "no"
    NA = "na"
    UNKNOWN = "unknown"


ANSWER_VALUES = frozenset(a.value for a in AnswerValue)


class Verdict(str, Enum):
    """Governance outcome of an assessment."""

    APPROVED = "approved"
    CONDITIONAL = "conditional"
    REJECTED = "rejected"
    PENDING = "pending"


class AssessmentStatus(str, Enum):
    """Lifecycle states of an assessment."""

    DRAFT = "draft"
    AWAITING_VENDOR = "awaiting_vendor"
    IN_REVIEW = "in_review"
    AWAITING_APPROVAL = "awaiting_approval"
    COMPLETE = "complete"
    EXPIRED = "expired"


class AssessmentType(str, Enum):
    """Why the assessment was requested."""

    NEW_VENDOR = "new_vendor"
    RENEWAL = "renewal"
    EXPEDITED = "expedited"


class CompletionMethod(str, Enum):
    """Who fills in the questionnaire."""

    INTERNAL = "internal"
    VENDOR = "vendor"
    HYBRID = "hybrid"


class QuestionAnswer(BaseModel):
    """An answer to one question, with optional substantiation."""

    answer: AnswerValue | None = None
    evidence: str | None = None
    notes: str | None = None

    @field_validator("answer", mode="before")
    @classmethod
    def _fold_unrecognised(cls, value: object) -> object:
        # Empty or unknown answers read as unanswered
        if isinstance(value, AnswerValue):
            return value
        if isinstance(value, str) and value in ANSWER_VALUES:
            return value
        return None


CategoryAnswers = dict[str, QuestionAnswer]


class AnswerSet(BaseModel):
    """The four category answer maps of an assessment."""

    compliance: CategoryAnswers = Field(default_factory=dict)
    security: CategoryAnswers = Field(default_factory=dict)
    operational: CategoryAnswers = Field(default_factory=dict)
    trust: CategoryAnswers = Field(default_factory=dict)

    def for_category(self, category: Category) -> CategoryAnswers:
        """Return the answer map for ``category``."""
        return getattr(self, category.value)


class PartialAnswerSet(BaseModel):
    """Answer maps to save. Omitted categories are left as they are."""

    compliance: CategoryAnswers | None = None
    security: CategoryAnswers | None = None
    operational: CategoryAnswers | None = None
    trust: CategoryAnswers | None = None

    def supplied(self) -> dict[Category, CategoryAnswers]:
        """Return only the categories present in the payload."""
        return {
            category: getattr(self, category.value)
            for category in Category
            if getattr(self, category.value) is not None
        }


class ScoreResult(BaseModel):
    """Scores, verdict and conditions derived together from one answer set."""

    compliance_score: int = 0
    security_score: int = 0
    operational_score: int = 0
    trust_score: int = 0
    total_score: int = 0
    verdict: Verdict = Verdict.PENDING
    conditions: list[str] = Field(default_factory=list)


class EvidenceCheck(BaseModel):
    """Outcome of the evidence validator."""

    valid: bool
    missing_evidence: list[str] = Field(default_factory=list)


class RiskLevel(BaseModel):
    """Risk band for a total score."""

    level: str = Field(..., description="'low', 'medium', or 'high'")
    label: str


class Assessment(BaseModel):
    """A vendor assessment, the aggregate the lifecycle operates on."""

    id: str
    vendor_id: str
    product_id: str | None = None

    assessment_type: AssessmentType
    requested_by: str
    request_reason: str
    department: str | None = None

    answers: AnswerSet = Field(default_factory=AnswerSet)

    # Derived; written only from a ScoreResult
    compliance_score: int = 0
    security_score: int = 0
    operational_score: int = 0
    trust_score: int = 0
    total_score: int = 0

    verdict: Verdict = Verdict.PENDING
    verdict_notes: str | None = None
    conditions: list[str] = Field(default_factory=list)

    status: AssessmentStatus = AssessmentStatus.DRAFT
    assessed_by_id: str | None = None
    assessed_at: datetime | None = None
    reviewed_by_id: str | None = None
    reviewed_at: datetime | None = None

    vendor_token: str | None = None
    vendor_token_expires_at: datetime | None = None
    vendor_submitted_at: datetime | None = None

    created_at: datetime
    created_by_id: str | None = None
    expires_at: datetime | None = None
    version: int = 1

    @field_validator(
        "assessed_at",
        "reviewed_at",
        "vendor_token_expires_at",
        "vendor_submitted_at",
        "created_at",
        "expires_at",
    )
    @classmethod
    def _ensure_utc(cls, value: datetime | None) -> datetime | None:
        # SQLite hands back naive datetimes
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def apply_scores(self, result: ScoreResult) -> None:
        """Copy derived values from a ScoreResult onto the assessment."""
        self.compliance_score = result.compliance_score
        self.security_score = result.security_score
        self.operational_score = result.operational_score
        self.trust_score = result.trust_score
        self.total_score = result.total_score
        self.verdict = result.verdict
        self.conditions = list(result.conditions)


# ─── Request payloads ────────────────────────────────────────────────────────

class CreateAssessmentRequest(BaseModel):
    """Request to open a new assessment."""

    vendor_id: str
    product_id: str | None = None
    assessment_type: AssessmentType
    requested_by: str
    request_reason: str
    department: str | None = None
    completion_method: CompletionMethod = CompletionMethod.INTERNAL


class ApproveRequest(BaseModel):
    """Reviewer decision ratifying or overriding the computed verdict."""

    override_verdict: Verdict | None = None
    verdict_notes: str | None = None
    conditions: list[str] | None = None


class RejectRequest(BaseModel):
    """Reviewer decision rejecting the vendor."""

    verdict_notes: str = ""


class CompareRequest(BaseModel):
    """Assessments to compare side by side."""

    assessment_ids: list[str]


# ─── Response payloads ───────────────────────────────────────────────────────

class ScoreResponse(ScoreResult):
    """Score result with presentation extras."""

    max_total_score: int
    risk_level: RiskLevel


class CompletenessResponse(BaseModel):
    """Outcome of the completeness validator."""

    complete: bool


class AssessmentDetail(Assessment):
    """An assessment enriched for display."""

    vendor_name: str | None = None
    product_name: str | None = None
    risk_level: RiskLevel | None = None
    days_until_expiry: int | None = None
    is_expiring_soon: bool = False
    vendor_assessment_url: str | None = None


class PublicAssessmentView(BaseModel):
    """What a vendor sees through a self-service link."""

    id: str
    vendor_name: str | None = None
    product_name: str | None = None
    assessment_type: AssessmentType
    requested_by: str
    request_reason: str
    answers: AnswerSet


class VendorSubmitResponse(BaseModel):
    """Acknowledgement returned to a vendor after submission."""

    message: str
    submitted_at: datetime
    status: AssessmentStatus


class CompareResponse(BaseModel):
    """Side-by-side comparison of assessments."""

    assessments: list[AssessmentDetail]
    comparison_generated: datetime
