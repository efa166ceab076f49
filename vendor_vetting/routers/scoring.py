"""Question catalog and stateless scoring endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from vendor_vetting.dependencies import get_workflow
from vendor_vetting.schemas.assessment import (
    AnswerSet,
    CompletenessResponse,
    EvidenceCheck,
    ScoreResponse,
)
from vendor_vetting.schemas.question import QuestionCatalogResponse
from vendor_vetting.services.questions import MAX_TOTAL_SCORE, build_catalog
from vendor_vetting.services.scoring import get_risk_level
from vendor_vetting.services.workflow import AssessmentWorkflow

router = APIRouter(prefix="/api", tags=["scoring"])


@router.get("/questions", response_model=QuestionCatalogResponse)
async def get_question_catalog() -> QuestionCatalogResponse:
    """The vetting questionnaire, grouped by category."""
    return build_catalog()


@router.post("/scoring/score", response_model=ScoreResponse)
async def score_answers(
    answers: AnswerSet,
    workflow: AssessmentWorkflow = Depends(get_workflow),
) -> ScoreResponse:
    """Score an answer set without storing anything."""
    result = workflow.score(answers)
    return ScoreResponse(
        **result.model_dump(),
        max_total_score=MAX_TOTAL_SCORE,
        risk_level=get_risk_level(result.total_score),
    )


@router.post("/scoring/validate/complete", response_model=CompletenessResponse)
async def validate_complete(
    answers: AnswerSet,
    workflow: AssessmentWorkflow = Depends(get_workflow),
) -> CompletenessResponse:
    """Check that every question has an answer."""
    return CompletenessResponse(complete=workflow.validate_complete(answers))


@router.post("/scoring/validate/evidence", response_model=EvidenceCheck)
async def validate_evidence(
    answers: AnswerSet,
    workflow: AssessmentWorkflow = Depends(get_workflow),
) -> EvidenceCheck:
    """Check that every "yes" answer is substantiated."""
    return workflow.validate_evidence(answers)
