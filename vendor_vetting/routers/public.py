"""Vendor self-service endpoints, reached through a token link."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from vendor_vetting.dependencies import get_workflow
from vendor_vetting.schemas.assessment import (
    PartialAnswerSet,
    PublicAssessmentView,
    VendorSubmitResponse,
)
from vendor_vetting.services.workflow import AssessmentWorkflow

router = APIRouter(prefix="/api/public/assessments", tags=["public"])


@router.get("/{token}", response_model=PublicAssessmentView)
async def get_public_assessment(
    token: str,
    workflow: AssessmentWorkflow = Depends(get_workflow),
) -> PublicAssessmentView:
    """The questionnaire as the vendor sees it."""
    return workflow.get_public_view(token)


@router.put("/{token}/answers", response_model=PublicAssessmentView)
async def save_public_answers(
    token: str,
    answers: PartialAnswerSet,
    workflow: AssessmentWorkflow = Depends(get_workflow),
) -> PublicAssessmentView:
    """Auto-save the vendor's answers."""
    workflow.save_vendor_answers(token, answers)
    return workflow.get_public_view(token)


@router.post("/{token}/submit", response_model=VendorSubmitResponse)
async def submit_public_assessment(
    token: str,
    workflow: AssessmentWorkflow = Depends(get_workflow),
) -> VendorSubmitResponse:
    """Submit the vendor's answers for internal review. Works once per link."""
    assessment = workflow.vendor_submit(token)
    return VendorSubmitResponse(
        message=(
            "Thank you for completing the assessment. "
            "The internal team will review your submission."
        ),
        submitted_at=assessment.vendor_submitted_at,
        status=assessment.status,
    )
