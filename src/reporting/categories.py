"""Static thematic category table.

The table lives in ``data/categories.json`` (name, description, keywords) so
it can be edited without touching aggregation code. Set
``SURVEY_CATEGORIES_FILE`` to point at an alternative table.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from src.reporting import config

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES_PATH = Path(__file__).parent / "data" / "categories.json"


@dataclass(frozen=True, slots=True)
class CategoryDefinition:
    """One thematic category and the keywords that select its questions."""

    name: str
    description: str
    keywords: Tuple[str, ...]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CategoryDefinition":
        return cls(
            name=str(data["name"]),
            description=str(data.get("description", "")),
            keywords=tuple(str(k) for k in data.get("keywords", [])),
        )


@lru_cache(maxsize=None)
def _load(path: str) -> Tuple[CategoryDefinition, ...]:
    with open(path, encoding="utf-8") as fh:
        raw: List[Dict[str, Any]] = json.load(fh)
    categories = tuple(CategoryDefinition.from_dict(item) for item in raw)
    logger.debug("Loaded %d categories from %s", len(categories), path)
    return categories


def load_categories(path: Optional[str | Path] = None) -> Tuple[CategoryDefinition, ...]:
    """Return the category table, reading it from disk once per path."""
    resolved = path or config.CATEGORIES_FILE or DEFAULT_CATEGORIES_PATH
    return _load(str(resolved))
