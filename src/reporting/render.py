"""Render survey reports as Markdown using Jinja2 templates."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from jinja2 import Environment, FileSystemLoader

from src.reporting.models import Report

logger = logging.getLogger(__name__)

_TEMPLATE_DIR = Path(__file__).parent / "templates"

# Markdown output: HTML escaping would mangle apostrophes and accents.
_env = Environment(
    loader=FileSystemLoader(str(_TEMPLATE_DIR)),
    autoescape=False,
    trim_blocks=True,
    lstrip_blocks=True,
)


def _context(report: Report) -> Dict[str, Any]:
    data = report.to_dict()
    return {
        "source_filename": report.source_filename or "unnamed",
        "date": report.generated_at[:10],
        "total_respondents": report.total_respondents,
        "overall_mean": report.overall_mean,
        "overall_level": report.overall_level.value,
        "critical_questions": data["criticalQuestions"],
        "categories": data["categories"],
        "worst_by_department": data["worstByDepartment"],
        "worst_by_role": data["worstByRole"],
    }


def render_report(report: Report) -> str:
    """Render a Markdown summary of *report*."""
    template = _env.get_template("report.md.j2")
    text = template.render(**_context(report))
    logger.debug("Rendered report for %s (len=%d)", report.source_filename, len(text))
    return text
