"""Data structures for the survey report.

Every model serialises to the camelCase JSON document consumed by the
dashboard UI and persisted by the report store, and can be rebuilt from it.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List

from src.exceptions import InvalidReportError
from src.reporting.levels import RiskLevel, determine_level

__all__ = [
    "QuestionStat",
    "CategoryStat",
    "DistributionEntry",
    "SegmentBreakdown",
    "Report",
    "dumps_report",
    "loads_report",
]


@dataclass(slots=True)
class QuestionStat:
    """Mean answer and risk level of a single question."""

    question: str
    question_short: str
    mean: float
    level: RiskLevel

    def to_dict(self) -> Dict[str, Any]:
        return {
            "question": self.question,
            "questionShort": self.question_short,
            "mean": self.mean,
            "level": self.level.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QuestionStat":
        return cls(
            question=data["question"],
            question_short=data.get("questionShort", data["question"]),
            mean=float(data["mean"]),
            level=RiskLevel(data["level"]),
        )


@dataclass(slots=True)
class CategoryStat:
    """Pooled mean of every answer given to the questions of one category."""

    category: str
    description: str
    mean: float
    level: RiskLevel
    questions: List[str] = field(default_factory=list)

    @property
    def question_count(self) -> int:
        return len(self.questions)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "description": self.description,
            "mean": self.mean,
            "level": self.level.value,
            "questionCount": self.question_count,
            "questions": list(self.questions),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CategoryStat":
        return cls(
            category=data["category"],
            description=data.get("description", ""),
            mean=float(data["mean"]),
            level=RiskLevel(data["level"]),
            questions=list(data.get("questions", [])),
        )


@dataclass(slots=True)
class DistributionEntry:
    """Respondent count for one department or role."""

    name: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "count": self.count}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DistributionEntry":
        return cls(name=data["name"], count=int(data["count"]))


@dataclass(slots=True)
class SegmentBreakdown:
    """Worst-scoring questions among the respondents of one segment."""

    respondent_count: int
    worst: List[QuestionStat] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "respondentCount": self.respondent_count,
            "worst": [q.to_dict() for q in self.worst],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SegmentBreakdown":
        return cls(
            respondent_count=int(data["respondentCount"]),
            worst=[QuestionStat.from_dict(q) for q in data.get("worst", [])],
        )


@dataclass(slots=True)
class Report:
    """Aggregated survey results plus the rows they were computed from."""

    total_respondents: int
    per_question: List[QuestionStat]
    critical_questions: List[QuestionStat]
    categories: List[CategoryStat]
    department_distribution: List[DistributionEntry]
    role_distribution: List[DistributionEntry]
    worst_by_department: Dict[str, SegmentBreakdown]
    worst_by_role: Dict[str, SegmentBreakdown]
    overall_mean: float
    generated_at: str  # ISO-8601, UTC
    source_filename: str
    raw_rows: List[Dict[str, Any]] = field(default_factory=list)
    # Question headers in spreadsheet column order
    questions: List[str] = field(default_factory=list)

    @property
    def overall_level(self) -> RiskLevel:
        return determine_level(self.overall_mean)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalRespondents": self.total_respondents,
            "perQuestion": [q.to_dict() for q in self.per_question],
            "criticalQuestions": [q.to_dict() for q in self.critical_questions],
            "categories": [c.to_dict() for c in self.categories],
            "departmentDistribution": [d.to_dict() for d in self.department_distribution],
            "roleDistribution": [d.to_dict() for d in self.role_distribution],
            "worstByDepartment": {
                name: seg.to_dict() for name, seg in self.worst_by_department.items()
            },
            "worstByRole": {name: seg.to_dict() for name, seg in self.worst_by_role.items()},
            "overallMean": self.overall_mean,
            "generatedAt": self.generated_at,
            "sourceFilename": self.source_filename,
            "rawRows": [dict(row) for row in self.raw_rows],
            "questionOrder": list(self.questions),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Report":
        missing = [
            key
            for key in ("totalRespondents", "overallMean", "perQuestion")
            if key not in data
        ]
        if missing:
            raise InvalidReportError(
                f"Report document is missing required fields: {', '.join(missing)}"
            )

        try:
            per_question = [QuestionStat.from_dict(q) for q in data["perQuestion"]]
            return cls(
                total_respondents=int(data["totalRespondents"]),
                per_question=per_question,
                critical_questions=[
                    QuestionStat.from_dict(q) for q in data.get("criticalQuestions", [])
                ],
                categories=[CategoryStat.from_dict(c) for c in data.get("categories", [])],
                department_distribution=[
                    DistributionEntry.from_dict(d)
                    for d in data.get("departmentDistribution", [])
                ],
                role_distribution=[
                    DistributionEntry.from_dict(d) for d in data.get("roleDistribution", [])
                ],
                worst_by_department={
                    name: SegmentBreakdown.from_dict(seg)
                    for name, seg in data.get("worstByDepartment", {}).items()
                },
                worst_by_role={
                    name: SegmentBreakdown.from_dict(seg)
                    for name, seg in data.get("worstByRole", {}).items()
                },
                overall_mean=float(data["overallMean"]),
                generated_at=data.get("generatedAt", ""),
                source_filename=data.get("sourceFilename", ""),
                raw_rows=[dict(row) for row in data.get("rawRows", [])],
                questions=list(
                    data.get("questionOrder") or [q.question for q in per_question]
                ),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidReportError(f"Malformed report document: {exc}") from exc


def dumps_report(report: Report, *, indent: int | None = 2) -> str:
    """Serialise *report* to its JSON document."""
    return json.dumps(report.to_dict(), ensure_ascii=False, indent=indent)


def loads_report(text: str | bytes) -> Report:
    """Parse a JSON document produced by :func:`dumps_report`.

    Raises
    ------
    InvalidReportError
        If the text is not JSON or lacks the required report fields.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidReportError("Report document is not valid JSON") from exc
    if not isinstance(data, dict):
        raise InvalidReportError("Report document must be a JSON object")
    return Report.from_dict(data)
