"""Keyword-based assignment of survey questions to thematic categories."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import AbstractSet, Dict, Iterable, List, Sequence

from src.reporting import config
from src.reporting.categories import CategoryDefinition


@dataclass(slots=True)
class CategoryMembership:
    """Questions selected for one category."""

    description: str
    questions: List[str] = field(default_factory=list)


def question_columns(
    headers: Iterable[str], excluded: AbstractSet[str] = config.EXCLUDED_COLUMNS
) -> List[str]:
    """Return the survey question headers (identity columns removed), in order."""
    return [h for h in headers if h not in excluded]


def _matches(question: str, keywords: Sequence[str]) -> bool:
    text = question.lower()
    return any(k.lower() in text for k in keywords)


def classify_questions(
    questions: Sequence[str], categories: Iterable[CategoryDefinition]
) -> Dict[str, CategoryMembership]:
    """Map each category name to the questions containing one of its keywords.

    Membership is not exclusive: a question can land in several categories,
    or in none (it is then simply absent from every list).
    """

    return {
        category.name: CategoryMembership(
            description=category.description,
            questions=[q for q in questions if _matches(q, category.keywords)],
        )
        for category in categories
    }
