"""Assemble aggregate results into a :class:`Report`.

``process_workbook`` is the pipeline entry point: spreadsheet bytes and a
filename in, a fully populated report out. Nothing here touches storage; the
caller decides whether and where to persist the result.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from src.ingest.parser import ParsedSheet, parse_workbook
from src.reporting import aggregator, config
from src.reporting.categories import CategoryDefinition, load_categories
from src.reporting.classifier import classify_questions, question_columns
from src.reporting.models import Report

logger = logging.getLogger(__name__)


def _timestamp(generated_at: Optional[datetime]) -> str:
    moment = generated_at or datetime.now(tz=timezone.utc)
    return moment.isoformat()


def assemble(
    rows: Sequence[Mapping[str, Any]],
    questions: Sequence[str],
    source_filename: str,
    *,
    generated_at: Optional[datetime] = None,
    categories: Optional[Iterable[CategoryDefinition]] = None,
) -> Report:
    """Compute every aggregate for *rows* and package them as a report.

    Deterministic for identical inputs apart from ``generated_at``.
    """

    table = load_categories() if categories is None else categories
    membership = classify_questions(questions, table)

    per_question = aggregator.question_stats(rows, questions)
    means = {stat.question: stat.mean for stat in per_question}

    return Report(
        total_respondents=len(rows),
        per_question=per_question,
        critical_questions=aggregator.top_critical(per_question, config.TOP_N),
        categories=aggregator.category_stats(rows, membership),
        department_distribution=aggregator.distribution(rows, config.DEPARTMENT_COLUMN),
        role_distribution=aggregator.distribution(rows, config.ROLE_COLUMN),
        worst_by_department=aggregator.segment_breakdown(
            rows, config.DEPARTMENT_COLUMN, questions, config.TOP_N
        ),
        worst_by_role=aggregator.segment_breakdown(
            rows, config.ROLE_COLUMN, questions, config.TOP_N
        ),
        overall_mean=aggregator.overall_mean(means),
        generated_at=_timestamp(generated_at),
        source_filename=source_filename,
        raw_rows=[dict(row) for row in rows],
        questions=list(questions),
    )


def build_report(
    parsed: ParsedSheet,
    source_filename: str,
    *,
    generated_at: Optional[datetime] = None,
    categories: Optional[Iterable[CategoryDefinition]] = None,
) -> Report:
    """Build a report from an already parsed sheet."""
    questions = question_columns(parsed.headers)
    return assemble(
        parsed.rows,
        questions,
        source_filename,
        generated_at=generated_at,
        categories=categories,
    )


def process_workbook(
    payload: bytes,
    source_filename: str,
    *,
    generated_at: Optional[datetime] = None,
    categories: Optional[Iterable[CategoryDefinition]] = None,
) -> Report:
    """Parse *payload* and return its report.

    Raises
    ------
    ParseError
        If the payload cannot be read as a spreadsheet.
    EmptyDatasetError
        If the sheet has no data rows.
    """

    parsed = parse_workbook(payload)
    report = build_report(
        parsed, source_filename, generated_at=generated_at, categories=categories
    )
    logger.info(
        "Processed %s: %d respondents, %d questions, overall mean %.2f",
        source_filename,
        report.total_respondents,
        len(report.questions),
        report.overall_mean,
    )
    return report


def rebuild_report(
    report: Report,
    *,
    generated_at: Optional[datetime] = None,
    categories: Optional[Iterable[CategoryDefinition]] = None,
) -> Report:
    """Re-derive every aggregate of *report* from its retained raw rows.

    The spreadsheet question order is reused so rankings break ties the same
    way; the source file is not needed.
    """

    questions: List[str] = list(report.questions) or [q.question for q in report.per_question]
    rows: List[Dict[str, Any]] = [dict(row) for row in report.raw_rows]
    return assemble(
        rows,
        questions,
        report.source_filename,
        generated_at=generated_at,
        categories=categories,
    )
