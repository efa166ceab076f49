"""Builders shared across the test modules."""

from __future__ import annotations

from datetime import datetime, timedelta

from vendor_vetting.schemas.assessment import (
    AnswerSet,
    AnswerValue,
    AssessmentType,
    CompletionMethod,
    CreateAssessmentRequest,
    PartialAnswerSet,
    QuestionAnswer,
)
from vendor_vetting.services.questions import CATEGORY_QUESTIONS

REVIEWER = "reviewer-7"
ASSESSOR = "assessor-3"
LONG_NOTE = "Reviewed with security lead; risk accepted."


class FrozenClock:
    """A clock the tests can move forward by hand."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


def build_answers(
    overrides: dict[str, str] | None = None,
    default: str = "yes",
    with_evidence: bool = True,
    skip: set[str] | None = None,
) -> AnswerSet:
    """Answer every catalog question with ``default`` unless overridden or skipped."""
    overrides = overrides or {}
    skip = skip or set()
    maps: dict[str, dict[str, QuestionAnswer]] = {}
    for category, questions in CATEGORY_QUESTIONS.items():
        category_answers = {}
        for question in questions:
            if question.id in skip:
                continue
            value = AnswerValue(overrides.get(question.id, default))
            evidence = f"https://vendor.example.com/docs/{question.id}" if with_evidence else None
            category_answers[question.id] = QuestionAnswer(answer=value, evidence=evidence)
        maps[category.value] = category_answers
    return AnswerSet(**maps)


def answers_json(answers: AnswerSet) -> dict:
    """Serialise an answer set for request bodies."""
    return answers.model_dump(mode="json")


def as_partial(answers: AnswerSet) -> PartialAnswerSet:
    """Every category of ``answers`` as a save payload."""
    return PartialAnswerSet(**answers.model_dump())


def create_request(
    vendor_id: str = "vendor-1",
    method: CompletionMethod = CompletionMethod.INTERNAL,
    **kwargs,
) -> CreateAssessmentRequest:
    """A valid creation request."""
    fields = {
        "vendor_id": vendor_id,
        "assessment_type": AssessmentType.NEW_VENDOR,
        "requested_by": "Dana Field",
        "request_reason": "Marketing wants an AI writing assistant",
        "department": "Marketing",
        "completion_method": method,
    }
    fields.update(kwargs)
    return CreateAssessmentRequest(**fields)


def submit_with(workflow, assessment_id: str, answers: AnswerSet):
    """Save ``answers`` on a draft and submit it for approval."""
    workflow.save_answers(assessment_id, as_partial(answers))
    return workflow.submit_for_review(assessment_id, ASSESSOR)
