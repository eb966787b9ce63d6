"""Pattern and label rules driving the row cleaning heuristics.

All literals tied to the upstream markup (icon labels, UI chrome text, the
regular expressions used to pick out subfields) live here so they can be
updated from a JSON file without touching the cleaning code.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Literal, Tuple

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

DEFAULT_NOISE_LABELS: Tuple[str, ...] = (
    "Search term",
    "query_statsExplore",
    "More actions",
    "Active",
    "trending_up",
    "checklistSelect",
    "more_vert",
)


class CleaningRules(BaseModel):
    """Configuration for splitting, classifying and filtering row fields."""

    model_config = ConfigDict(frozen=True)

    # Field splitting
    split_mode: Literal["quoted", "simple"] = "quoted"

    # Search volume
    volume_keyword: str = "searches"
    volume_markers: Tuple[str, ...] = ("K+", "M+")
    volume_pattern: re.Pattern = Field(
        default=re.compile(r"(\d+[KM]?\+?)\s*searches?", re.IGNORECASE)
    )

    # Elapsed time
    time_keyword: str = "ago"
    time_pattern: re.Pattern = Field(
        default=re.compile(r"(\d+\s*(?:hours?|h|minutes?|m)\s*ago)", re.IGNORECASE)
    )

    # Growth percentage: raw blob first, then per-field fallbacks in order
    growth_raw_pattern: re.Pattern = Field(default=re.compile(r"(\d{1,3}(?:,\d{3})*%)"))
    growth_field_patterns: Tuple[re.Pattern, ...] = Field(
        default=(
            re.compile(r"arrow_upward(\d{1,3}(?:,\d{3})*%)"),
            re.compile(r"(\d{1,3}(?:,\d{3})*%)"),
            re.compile(r"(\d+(?:,\d+)*%)"),
        )
    )

    # Related searches
    noise_labels: Tuple[str, ...] = DEFAULT_NOISE_LABELS
    excluded_substrings: Tuple[str, ...] = ("searches", "%", "ago")
    min_related_length: int = 3
    max_related: int = Field(default=5, ge=0)
    related_pattern: re.Pattern = Field(default=re.compile(r"^[a-zA-Z\s]+$"))
    strip_trend_name: bool = True


DEFAULT_RULES = CleaningRules()


def load_rules(path: str | Path) -> CleaningRules:
    """Load rule overrides from a JSON mapping of rule name to value.

    Keys missing from the file keep their defaults. Pattern values are plain
    regular expression strings; use inline flags such as ``(?i)`` for case
    insensitive matching.
    """
    with open(path, "r", encoding="utf-8") as f:
        overrides = json.load(f)
    logger.debug("Loaded cleaning rule overrides for %s", sorted(overrides))
    return CleaningRules.model_validate(overrides)


__all__ = ["CleaningRules", "DEFAULT_NOISE_LABELS", "DEFAULT_RULES", "load_rules"]
