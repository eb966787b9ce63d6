"""Related search extraction: drop UI chrome and duplicate fragments."""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional, Sequence

from .rules import DEFAULT_RULES, CleaningRules

logger = logging.getLogger(__name__)

_EDGE_DOTS = re.compile(r"^·+|·+$")


def clean_candidate(field: str) -> str:
    """Strip leading/trailing middle dots and surrounding whitespace."""
    return _EDGE_DOTS.sub("", field).strip()


def _contains_trend_name(text: str, trend_name: str) -> bool:
    return bool(trend_name) and trend_name in text


def strip_trend_name(text: str, trend_name: str) -> str:
    """Remove whole-word occurrences of ``trend_name`` from ``text``.

    ``"Fed"`` is removed from ``"Fed rate cut"`` but not from
    ``"Federal reserve"``.
    """
    if not trend_name:
        return text
    stripped = re.sub(rf"(?<!\w){re.escape(trend_name)}(?!\w)", " ", text)
    return re.sub(r"\s+", " ", stripped).strip()


def admit_candidate(
    text: str, trend_name: str, rules: CleaningRules = DEFAULT_RULES
) -> Optional[str]:
    """Return the admitted form of ``text`` or ``None`` if it is noise.

    With ``rules.strip_trend_name`` a candidate such as
    ``"brett james plane crash"`` is reduced to ``"plane crash"`` before the
    remaining checks run; otherwise it is rejected. A trend name embedded in
    another word is never cut out, so such candidates are rejected.
    """
    if rules.strip_trend_name:
        text = strip_trend_name(text, trend_name)

    if len(text) <= rules.min_related_length:
        return None
    if any(label in text for label in rules.noise_labels):
        return None
    if _contains_trend_name(text, trend_name):
        return None
    if any(part in text for part in rules.excluded_substrings):
        return None
    if not rules.related_pattern.match(text):
        return None
    return text


def collect_candidates(
    fields: Sequence[str], trend_name: str, rules: CleaningRules = DEFAULT_RULES
) -> List[str]:
    """Return every admitted candidate, first occurrence order, no duplicates."""
    seen: Dict[str, None] = {}
    for field in fields:
        admitted = admit_candidate(clean_candidate(field), trend_name, rules)
        if admitted is not None and admitted not in seen:
            seen[admitted] = None
    return list(seen)


def extract_related_searches(
    fields: Sequence[str], trend_name: str, rules: CleaningRules = DEFAULT_RULES
) -> List[str]:
    candidates = collect_candidates(fields, trend_name, rules)
    if len(candidates) > rules.max_related:
        logger.debug(
            "Truncating %s related searches to %s", len(candidates), rules.max_related
        )
    return candidates[: rules.max_related]


__all__ = [
    "clean_candidate",
    "admit_candidate",
    "strip_trend_name",
    "collect_candidates",
    "extract_related_searches",
]
