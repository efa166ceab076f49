"""Completeness and evidence validators gating submission."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from vendor_vetting.schemas.assessment import AnswerSet, EvidenceCheck
from vendor_vetting.services.questions import all_questions
from vendor_vetting.services.scoring import answer_value, is_yes


def _has_text(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def _field(entry: Any, name: str) -> Any:
    if isinstance(entry, Mapping):
        return entry.get(name)
    return getattr(entry, name, None)


def is_complete(answers: AnswerSet) -> bool:
    """True when every catalog question has a non-empty answer."""
    return all(
        bool(answer_value(answers.for_category(category).get(question.id)))
        for category, question in all_questions()
    )


def unanswered_questions(answers: AnswerSet) -> list[str]:
    """Ids of catalog questions without an answer, in catalog order."""
    return [
        question.id
        for category, question in all_questions()
        if not answer_value(answers.for_category(category).get(question.id))
    ]


def has_required_evidence(answers: AnswerSet) -> EvidenceCheck:
    """Check that every "yes" answer carries evidence or a note."""
    missing = []
    for category, question in all_questions():
        entry = answers.for_category(category).get(question.id)
        if not is_yes(entry):
            continue
        if not (_has_text(_field(entry, "evidence")) or _has_text(_field(entry, "notes"))):
            missing.append(question.id)

    return EvidenceCheck(valid=not missing, missing_evidence=missing)
