"""Verdict Engine — turns scores and critical answers into a governance verdict."""

from __future__ import annotations

from vendor_vetting.schemas.assessment import AnswerSet, AnswerValue, ScoreResult, Verdict
from vendor_vetting.schemas.question import Category
from vendor_vetting.services.scoring import answer_value, compute_all_scores, is_yes

APPROVED_THRESHOLD = 9
CONDITIONAL_THRESHOLD = 5

# A "no" to any of these rejects the vendor whatever the total score
HARD_FAIL_QUESTIONS: tuple[tuple[Category, str], ...] = (
    (Category.COMPLIANCE, "comp-2"),  # reuses customer data for training
    (Category.SECURITY, "sec-1"),  # no SOC 2 / ISO 27001 certification
)

# Evaluated in this order; the order of the returned conditions follows it.
CONDITION_RULES: tuple[tuple[Category, str, str], ...] = (
    (
        Category.COMPLIANCE,
        "comp-1",
        "Obtain written confirmation of data residency before deployment",
    ),
    (
        Category.SECURITY,
        "sec-2",
        "Implement MFA for all user accounts before rollout",
    ),
    (
        Category.OPERATIONAL,
        "ops-1",
        "Negotiate SLA terms before enterprise deployment",
    ),
    (
        Category.TRUST,
        "trust-2",
        "Request vendor's AI ethics documentation before final approval",
    ),
)


def has_hard_failure(answers: AnswerSet) -> bool:
    """True when a critical question is answered "no"."""
    return any(
        answer_value(answers.for_category(category).get(question_id)) == AnswerValue.NO.value
        for category, question_id in HARD_FAIL_QUESTIONS
    )


def determine_verdict(total_score: int, answers: AnswerSet) -> Verdict:
    """Derive the verdict: hard failures first, then score thresholds."""
    if has_hard_failure(answers):
        return Verdict.REJECTED

    if total_score >= APPROVED_THRESHOLD:
        return Verdict.APPROVED
    if total_score >= CONDITIONAL_THRESHOLD:
        return Verdict.CONDITIONAL
    return Verdict.REJECTED


def generate_conditions(answers: AnswerSet) -> list[str]:
    """Remediation conditions for every guard question not answered "yes"."""
    return [
        condition
        for category, question_id, condition in CONDITION_RULES
        if not is_yes(answers.for_category(category).get(question_id))
    ]


def score_assessment(answers: AnswerSet) -> ScoreResult:
    """Compute scores, verdict and conditions together.

    This is the only place derived assessment values are produced. Conditions
    are attached only to a conditional verdict.
    """
    scores = compute_all_scores(answers)
    verdict = determine_verdict(scores["total_score"], answers)
    conditions = generate_conditions(answers) if verdict == Verdict.CONDITIONAL else []

    return ScoreResult(**scores, verdict=verdict, conditions=conditions)
