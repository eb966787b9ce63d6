"""Locate the scalar subfields of a trend row.

Each extractor scans the full field list on its own; none of them consumes
fields, so the order in which they run does not matter. Failures are always
reported as an empty string.
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Sequence, Tuple

from .rules import DEFAULT_RULES, CleaningRules

logger = logging.getLogger(__name__)

_DIGIT = re.compile(r"\d")


def _first_group(pattern: re.Pattern, text: str) -> str:
    match = pattern.search(text)
    return match.group(1) if match else ""


def extract_trend_name(fields: Sequence[str]) -> str:
    return fields[0] if fields else ""


def find_volume_field(
    fields: Sequence[str], rules: CleaningRules = DEFAULT_RULES
) -> Optional[str]:
    """Return the first field that looks like a ``200K+ searches`` label."""
    for field in fields:
        if rules.volume_keyword not in field:
            continue
        if any(marker in field for marker in rules.volume_markers) or _DIGIT.search(field):
            return field
    return None


def extract_search_volume(
    fields: Sequence[str], rules: CleaningRules = DEFAULT_RULES
) -> str:
    field = find_volume_field(fields, rules)
    if field is None:
        return ""
    return _first_group(rules.volume_pattern, field)


def find_time_field(
    fields: Sequence[str], rules: CleaningRules = DEFAULT_RULES
) -> Optional[str]:
    for field in fields:
        if rules.time_keyword in field:
            return field
    return None


def extract_time_ago(fields: Sequence[str], rules: CleaningRules = DEFAULT_RULES) -> str:
    """Extract an elapsed time phrase such as ``20h ago``.

    When the time pattern does not match, the whole qualifying field is
    returned with a leading middle dot removed.
    """
    field = find_time_field(fields, rules)
    if field is None:
        return ""
    value = _first_group(rules.time_pattern, field)
    if value:
        return value
    logger.debug("Time pattern missed, falling back to field %r", field)
    return re.sub(r"^·", "", field).strip()


def match_growth_percentage(
    fields: Sequence[str], raw: str, rules: CleaningRules = DEFAULT_RULES
) -> Tuple[str, str]:
    """Return ``(percentage, source)`` where source is ``raw``, ``field`` or ``""``.

    The raw blob is searched first because a grouped value such as
    ``1,000%`` is often cut in two when the blob is split on commas.
    """
    value = _first_group(rules.growth_raw_pattern, raw)
    if value:
        return value, "raw"

    for field in fields:
        if "%" not in field or not _DIGIT.search(field):
            continue
        for pattern in rules.growth_field_patterns:
            value = _first_group(pattern, field)
            if value:
                return value, "field"
        # only the first qualifying field is considered
        return "", ""
    return "", ""


def extract_growth_percentage(
    fields: Sequence[str], raw: str, rules: CleaningRules = DEFAULT_RULES
) -> str:
    return match_growth_percentage(fields, raw, rules)[0]


__all__ = [
    "extract_trend_name",
    "find_volume_field",
    "extract_search_volume",
    "find_time_field",
    "extract_time_ago",
    "match_growth_percentage",
    "extract_growth_percentage",
]
