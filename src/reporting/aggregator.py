"""Aggregate survey rows into per-question, per-category and per-segment stats.

All functions are read-only over the row sequence and never raise on sparse
data: a question, category or segment without usable answers degrades to a
zero mean or an empty ranking.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from src.reporting import config
from src.reporting.classifier import CategoryMembership
from src.reporting.coercion import mean, numeric_answers
from src.reporting.levels import determine_level
from src.reporting.models import (
    CategoryStat,
    DistributionEntry,
    QuestionStat,
    SegmentBreakdown,
)

logger = logging.getLogger(__name__)

Row = Mapping[str, Any]


def _answers(rows: Iterable[Row], question: str) -> List[float]:
    return numeric_answers(row.get(question) for row in rows)


def _segment_value(row: Row, column: str) -> str | None:
    value = row.get(column)
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def short_label(question: str, limit: int = config.QUESTION_LABEL_MAX) -> str:
    """First *limit* characters of *question*, ellipsis appended when cut."""
    if len(question) <= limit:
        return question
    return question[:limit] + config.ELLIPSIS


def segment_label(question: str, limit: int = config.SEGMENT_LABEL_MAX) -> str:
    """Like :func:`short_label` but the result, ellipsis included, fits *limit*."""
    if len(question) <= limit:
        return question
    return question[: limit - len(config.ELLIPSIS)] + config.ELLIPSIS


def _ranked(stats: List[QuestionStat]) -> List[QuestionStat]:
    # sorted() is stable: ties keep column order
    return sorted(stats, key=lambda s: s.mean, reverse=True)


# ---------------------------------------------------------------------------
# Per-question
# ---------------------------------------------------------------------------


def question_means(rows: Sequence[Row], questions: Sequence[str]) -> Dict[str, float]:
    """Mean of the coercible answers for each question (0 when none)."""
    return {q: mean(_answers(rows, q)) for q in questions}


def question_stats(rows: Sequence[Row], questions: Sequence[str]) -> List[QuestionStat]:
    """Per-question stats ordered from highest (worst) to lowest mean."""
    means = question_means(rows, questions)
    stats = [
        QuestionStat(
            question=q,
            question_short=short_label(q),
            mean=m,
            level=determine_level(m),
        )
        for q, m in means.items()
    ]
    return _ranked(stats)


def top_critical(stats: Sequence[QuestionStat], n: int = config.TOP_N) -> List[QuestionStat]:
    """The *n* highest-mean questions of an already ranked list."""
    return _ranked(list(stats))[:n]


def overall_mean(means: Mapping[str, float]) -> float:
    """Mean of the per-question means (not of the pooled answers)."""
    return mean(means.values())


# ---------------------------------------------------------------------------
# Per-category
# ---------------------------------------------------------------------------


def category_stats(
    rows: Sequence[Row], membership: Mapping[str, CategoryMembership]
) -> List[CategoryStat]:
    """Pooled mean of every individual answer given to a category's questions.

    Pooling weights each answer equally, so a question answered by more
    respondents weighs more than in a mean of question means.
    """

    result: List[CategoryStat] = []
    for name, member in membership.items():
        pooled: List[float] = []
        for question in member.questions:
            pooled.extend(_answers(rows, question))
        category_mean = mean(pooled)
        result.append(
            CategoryStat(
                category=name,
                description=member.description,
                mean=category_mean,
                level=determine_level(category_mean),
                questions=list(member.questions),
            )
        )
    return result


# ---------------------------------------------------------------------------
# Per-segment (department / role)
# ---------------------------------------------------------------------------


def group_rows(rows: Sequence[Row], column: str) -> Dict[str, List[Row]]:
    """Rows grouped by their *column* value, in order of first appearance.

    Rows where the value is absent or blank belong to no group.
    """
    groups: Dict[str, List[Row]] = defaultdict(list)
    for row in rows:
        key = _segment_value(row, column)
        if key is None:
            continue
        groups[key].append(row)
    return dict(groups)


def distribution(rows: Sequence[Row], column: str) -> List[DistributionEntry]:
    """Respondent count per distinct *column* value."""
    return [
        DistributionEntry(name=name, count=len(members))
        for name, members in group_rows(rows, column).items()
    ]


def worst_questions(
    rows: Sequence[Row], questions: Sequence[str], n: int = config.TOP_N
) -> List[QuestionStat]:
    """The *n* highest-mean questions among *rows*.

    Questions nobody in *rows* answered are left out of the ranking.
    """
    stats: List[QuestionStat] = []
    for question in questions:
        answers = _answers(rows, question)
        if not answers:
            continue
        m = mean(answers)
        stats.append(
            QuestionStat(
                question=question,
                question_short=segment_label(question),
                mean=m,
                level=determine_level(m),
            )
        )
    return _ranked(stats)[:n]


def segment_breakdown(
    rows: Sequence[Row],
    column: str,
    questions: Sequence[str],
    n: int = config.TOP_N,
) -> Dict[str, SegmentBreakdown]:
    """Worst *n* questions for every distinct value of *column*."""
    breakdown = {
        name: SegmentBreakdown(
            respondent_count=len(members),
            worst=worst_questions(members, questions, n),
        )
        for name, members in group_rows(rows, column).items()
    }
    if not breakdown:
        logger.debug("No segment values found in column %r", column)
    return breakdown
