"""Vetting question catalog — the fixed questionnaire every vendor is scored against."""

from __future__ import annotations

from vendor_vetting.schemas.question import (
    Category,
    CategoryCatalog,
    Importance,
    Question,
    QuestionCatalogResponse,
)

CATALOG_VERSION = "1.0"

COMPLIANCE_QUESTIONS: tuple[Question, ...] = (
    Question(
        id="comp-1",
        question="Does the vendor disclose where data is stored (region/country)?",
        importance=Importance.CRITICAL,
        red_flag="Unknown data residency creates GDPR/regulatory compliance risks",
        evidence_type="Link to data residency documentation or privacy policy",
    ),
    Question(
        id="comp-2",
        question="Does the vendor confirm they do NOT retain or reuse customer data for model training?",
        importance=Importance.CRITICAL,
        red_flag="Data used for training = potential IP leakage and privacy violations",
        evidence_type="Link to data usage policy or enterprise agreement terms",
    ),
    Question(
        id="comp-3",
        question="Does the vendor demonstrate compliance with GDPR/CCPA/relevant data protection laws?",
        importance=Importance.CRITICAL,
        red_flag="No documented compliance creates legal liability",
        evidence_type="Link to compliance certifications, DPA, or privacy documentation",
    ),
)

SECURITY_QUESTIONS: tuple[Question, ...] = (
    Question(
        id="sec-1",
        question="Does the vendor hold SOC 2 Type II or ISO 27001 certification?",
        importance=Importance.CRITICAL,
        red_flag="No security certification = unverified security controls",
        evidence_type="Link to certification or audit report summary",
    ),
    Question(
        id="sec-2",
        question="Does the vendor support SSO and/or MFA for user authentication?",
        importance=Importance.HIGH,
        red_flag="Weak authentication increases account compromise risk",
        evidence_type="Link to authentication documentation or feature page",
    ),
    Question(
        id="sec-3",
        question="Does the vendor encrypt data in transit (TLS) and at rest (AES-256 or equivalent)?",
        importance=Importance.CRITICAL,
        red_flag="Unencrypted data creates exposure during transmission and storage",
        evidence_type="Link to security whitepaper or documentation",
    ),
)

OPERATIONAL_QUESTIONS: tuple[Question, ...] = (
    Question(
        id="ops-1",
        question="Does the vendor provide uptime guarantees (SLAs) of 99.5% or higher?",
        importance=Importance.HIGH,
        red_flag="No SLA = unpredictable reliability, business continuity risk",
        evidence_type="Link to SLA documentation or service terms",
    ),
    Question(
        id="ops-2",
        question="Does the vendor offer customer support with defined response times?",
        importance=Importance.MEDIUM,
        red_flag="No support = you're on your own when issues arise",
        evidence_type="Link to support documentation or plans",
    ),
    Question(
        id="ops-3",
        question="Does the vendor disclose API rate limits, usage caps, or fallback procedures?",
        importance=Importance.MEDIUM,
        red_flag="Unknown limits can cause unexpected service disruptions",
        evidence_type="Link to API documentation or fair use policy",
    ),
)

TRUST_QUESTIONS: tuple[Question, ...] = (
    Question(
        id="trust-1",
        question="Does the vendor disclose how their AI models are trained (data sources, methodology)?",
        importance=Importance.MEDIUM,
        red_flag="Opaque training creates bias, IP, and ethical concerns",
        evidence_type="Link to model card, documentation, or public statements",
    ),
    Question(
        id="trust-2",
        question="Does the vendor publish an AI Ethics Statement or Responsible AI policy?",
        importance=Importance.MEDIUM,
        red_flag="No ethics commitment may indicate immature governance",
        evidence_type="Link to ethics policy or responsible AI page",
    ),
)

CATEGORY_QUESTIONS: dict[Category, tuple[Question, ...]] = {
    Category.COMPLIANCE: COMPLIANCE_QUESTIONS,
    Category.SECURITY: SECURITY_QUESTIONS,
    Category.OPERATIONAL: OPERATIONAL_QUESTIONS,
    Category.TRUST: TRUST_QUESTIONS,
}

CATEGORY_NAMES: dict[Category, str] = {
    Category.COMPLIANCE: "Data & Compliance",
    Category.SECURITY: "Security",
    Category.OPERATIONAL: "Operational",
    Category.TRUST: "Trust & Transparency",
}


def get_questions(category: Category) -> tuple[Question, ...]:
    """Return the ordered questions of a category."""
    return CATEGORY_QUESTIONS[category]


def category_max_score(category: Category) -> int:
    """Maximum achievable score for a category (sum of weights)."""
    return sum(q.weight for q in CATEGORY_QUESTIONS[category])


def all_questions() -> list[tuple[Category, Question]]:
    """Every question in catalog order, paired with its category."""
    return [
        (category, question)
        for category in Category
        for question in CATEGORY_QUESTIONS[category]
    ]


def all_question_ids() -> list[str]:
    """Every question id in catalog order."""
    return [question.id for _, question in all_questions()]


MAX_TOTAL_SCORE = sum(category_max_score(c) for c in Category)


def build_catalog() -> QuestionCatalogResponse:
    """Return the catalog in its API shape."""
    return QuestionCatalogResponse(
        version=CATALOG_VERSION,
        max_total_score=MAX_TOTAL_SCORE,
        categories=[
            CategoryCatalog(
                category=category,
                name=CATEGORY_NAMES[category],
                max_score=category_max_score(category),
                questions=list(CATEGORY_QUESTIONS[category]),
            )
            for category in Category
        ],
    )
