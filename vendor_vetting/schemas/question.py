"""Schemas for the vetting question catalog."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Category(str, Enum):
    """The four fixed question groupings, in scoring order."""

    COMPLIANCE = "compliance"
    SECURITY = "security"
    OPERATIONAL = "operational"
    TRUST = "trust"


class Importance(str, Enum):
    """How much a question matters to the overall risk picture."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"


class Question(BaseModel):
    """An immutable catalog entry."""

    model_config = ConfigDict(frozen=True)

    id: str
    question: str
    importance: Importance
    red_flag: str
    evidence_type: str
    weight: int = Field(default=1, ge=0)


class CategoryCatalog(BaseModel):
    """One category of the catalog with its questions and maximum score."""

    category: Category
    name: str
    max_score: int
    questions: list[Question]


class QuestionCatalogResponse(BaseModel):
    """The full catalog as served to clients."""

    version: str
    max_total_score: int
    categories: list[CategoryCatalog]
