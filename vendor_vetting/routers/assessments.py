"""Internal assessment workflow endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Query

from vendor_vetting.dependencies import get_workflow
from vendor_vetting.models.base import utcnow
from vendor_vetting.schemas.assessment import (
    ApproveRequest,
    AssessmentDetail,
    AssessmentStatus,
    CompareRequest,
    CompareResponse,
    CreateAssessmentRequest,
    PartialAnswerSet,
    RejectRequest,
    Verdict,
)
from vendor_vetting.services.workflow import AssessmentWorkflow

router = APIRouter(prefix="/api/assessments", tags=["assessments"])


@router.get("", response_model=list[AssessmentDetail])
async def list_assessments(
    vendor_id: str | None = Query(default=None),
    status: AssessmentStatus | None = Query(default=None),
    verdict: Verdict | None = Query(default=None),
    workflow: AssessmentWorkflow = Depends(get_workflow),
) -> list[AssessmentDetail]:
    """List assessments, optionally filtered by vendor, status and verdict."""
    assessments = workflow.list_assessments(vendor_id=vendor_id, status=status, verdict=verdict)
    return [workflow.describe(a) for a in assessments]


@router.post("", response_model=AssessmentDetail, status_code=201)
async def create_assessment(
    request: CreateAssessmentRequest,
    actor_id: str | None = Header(default=None, alias="X-Actor-Id"),
    workflow: AssessmentWorkflow = Depends(get_workflow),
) -> AssessmentDetail:
    """Open an assessment; vendor and hybrid completion issue a self-service link."""
    assessment = workflow.create_assessment(request, actor_id=actor_id)
    return workflow.describe(assessment)


@router.post("/compare", response_model=CompareResponse)
async def compare_assessments(
    request: CompareRequest,
    workflow: AssessmentWorkflow = Depends(get_workflow),
) -> CompareResponse:
    """Compare two to five assessments side by side."""
    return CompareResponse(
        assessments=workflow.compare(request.assessment_ids),
        comparison_generated=utcnow(),
    )


@router.get("/{assessment_id}", response_model=AssessmentDetail)
async def get_assessment(
    assessment_id: str,
    workflow: AssessmentWorkflow = Depends(get_workflow),
) -> AssessmentDetail:
    """Assessment detail with vendor, risk band and expiry information."""
    return workflow.describe(workflow.get_assessment(assessment_id))


@router.put("/{assessment_id}/answers", response_model=AssessmentDetail)
async def save_answers(
    assessment_id: str,
    answers: PartialAnswerSet,
    workflow: AssessmentWorkflow = Depends(get_workflow),
) -> AssessmentDetail:
    """Save progress. Supplied categories replace the stored ones."""
    return workflow.describe(workflow.save_answers(assessment_id, answers))


@router.post("/{assessment_id}/submit", response_model=AssessmentDetail)
async def submit_assessment(
    assessment_id: str,
    actor_id: str = Header(..., alias="X-Actor-Id"),
    workflow: AssessmentWorkflow = Depends(get_workflow),
) -> AssessmentDetail:
    """Submit a completed questionnaire for approval."""
    return workflow.describe(workflow.submit_for_review(assessment_id, actor_id))


@router.post("/{assessment_id}/approve", response_model=AssessmentDetail)
async def approve_assessment(
    assessment_id: str,
    request: ApproveRequest | None = None,
    actor_id: str = Header(..., alias="X-Actor-Id"),
    workflow: AssessmentWorkflow = Depends(get_workflow),
) -> AssessmentDetail:
    """Ratify or override the computed verdict and complete the assessment."""
    return workflow.describe(workflow.approve(assessment_id, actor_id, request))


@router.post("/{assessment_id}/reject", response_model=AssessmentDetail)
async def reject_assessment(
    assessment_id: str,
    request: RejectRequest,
    actor_id: str = Header(..., alias="X-Actor-Id"),
    workflow: AssessmentWorkflow = Depends(get_workflow),
) -> AssessmentDetail:
    """Reject the vendor with a written reason."""
    return workflow.describe(workflow.reject(assessment_id, actor_id, request.verdict_notes))
