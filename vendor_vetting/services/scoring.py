"""Scoring Engine — category and total scores from an answer set.

Only a "yes" answer earns points; each earns its question's weight.
Everything else, including missing or malformed entries, scores zero.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from vendor_vetting.schemas.assessment import AnswerSet, AnswerValue, RiskLevel
from vendor_vetting.schemas.question import Category, Question
from vendor_vetting.services.questions import get_questions

# Risk bands share the verdict thresholds
LOW_RISK_THRESHOLD = 9
MEDIUM_RISK_THRESHOLD = 5


def answer_value(entry: Any) -> str | None:
    """Extract the answer value from an answer entry, or None if it has none.

    Accepts QuestionAnswer models and plain mappings so that loosely typed
    input degrades to "unanswered" instead of raising.
    """
    if entry is None:
        return None
    if isinstance(entry, Mapping):
        value = entry.get("answer")
    else:
        value = getattr(entry, "answer", None)
    if isinstance(value, AnswerValue):
        return value.value
    if isinstance(value, str):
        return value
    return None


def is_yes(entry: Any) -> bool:
    """True only for an answer of exactly "yes"."""
    return answer_value(entry) == AnswerValue.YES.value


def compute_category_score(answers: Mapping[str, Any] | None, questions: Iterable[Question]) -> int:
    """Sum the weights of the questions answered "yes".

    Keys in ``answers`` that are not in ``questions`` are ignored.
    """
    if not isinstance(answers, Mapping):
        return 0
    return sum(q.weight for q in questions if is_yes(answers.get(q.id)))


def compute_all_scores(answers: AnswerSet) -> dict[str, int]:
    """Score every category and the total.

    Returns:
        Dict with ``compliance_score``, ``security_score``,
        ``operational_score``, ``trust_score`` and ``total_score``.
    """
    scores = {
        f"{category.value}_score": compute_category_score(
            answers.for_category(category), get_questions(category)
        )
        for category in Category
    }
    scores["total_score"] = sum(scores.values())
    return scores


def get_risk_level(total_score: int) -> RiskLevel:
    """Map a total score onto its risk band."""
    if total_score >= LOW_RISK_THRESHOLD:
        return RiskLevel(level="low", label="Low Risk")
    if total_score >= MEDIUM_RISK_THRESHOLD:
        return RiskLevel(level="medium", label="Medium Risk")
    return RiskLevel(level="high", label="High Risk")
