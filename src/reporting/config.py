"""Configuration constants for the reporting pipeline."""
from __future__ import annotations

import os
from typing import FrozenSet


def _split_env(name: str) -> list[str]:
    raw = os.getenv(name, "")
    return [part.strip() for part in raw.split("|") if part.strip()]


# Number of questions listed as critical / worst per segment
TOP_N: int = int(os.getenv("REPORT_TOP_N", "5"))

# Question labels in the global list are cut to this many characters
QUESTION_LABEL_MAX: int = int(os.getenv("REPORT_QUESTION_LABEL_MAX", "50"))

# Segment breakdown labels never exceed this many characters (ellipsis included)
SEGMENT_LABEL_MAX: int = int(os.getenv("REPORT_SEGMENT_LABEL_MAX", "60"))

ELLIPSIS: str = "..."

# Grouping columns as exported by the survey form
DEPARTMENT_COLUMN: str = os.getenv("SURVEY_DEPARTMENT_COLUMN", "Qual seu setor?")
ROLE_COLUMN: str = os.getenv("SURVEY_ROLE_COLUMN", "Qual sua função?")

# Identity / metadata columns that are never survey questions
EXCLUDED_COLUMNS: FrozenSet[str] = frozenset(
    [
        "ID",
        "Hora de início",
        "Hora de conclusão",
        "Email",
        "Nome",
        "Hora da última modificação",
        DEPARTMENT_COLUMN,
        ROLE_COLUMN,
        *_split_env("SURVEY_EXCLUDED_COLUMNS"),
    ]
)

# Optional override for the category table (JSON)
CATEGORIES_FILE: str | None = os.getenv("SURVEY_CATEGORIES_FILE") or None

# Key under which the latest report is kept in the report store
CURRENT_REPORT_KEY: str = os.getenv("REPORT_STORE_KEY", "dashboard-data")
