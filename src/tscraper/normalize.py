"""Trend record model and the row cleaning pipeline."""

from __future__ import annotations

import logging
from typing import Iterable, List, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from .classifier import (
    extract_search_volume,
    extract_time_ago,
    extract_trend_name,
    find_time_field,
    find_volume_field,
    match_growth_percentage,
)
from .related import collect_candidates
from .rules import DEFAULT_RULES, CleaningRules
from .splitter import split_fields

logger = logging.getLogger(__name__)

RawRow = Union[str, Sequence[str]]


class TrendRecord(BaseModel):
    """Normalized representation of one trending item."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    trend_name: str = Field(default="", alias="trendName")
    search_volume: str = Field(default="", alias="searchVolume")
    time_ago: str = Field(default="", alias="timeAgo")
    growth_percentage: str = Field(default="", alias="growthPercentage")
    related_searches: Tuple[str, ...] = Field(default=(), alias="relatedSearches")


class CleaningTrace(BaseModel):
    """Intermediate values recorded while cleaning a single row."""

    model_config = ConfigDict(frozen=True)

    raw: str
    fields: Tuple[str, ...]
    volume_field: str = ""
    time_field: str = ""
    growth_source: str = ""
    candidates: Tuple[str, ...] = ()


def join_row(row: RawRow) -> str:
    """Return ``row`` as a single blob, joining fragment lists with commas."""
    if isinstance(row, str):
        return row
    return ",".join(row)


def _clean(raw: str, rules: CleaningRules) -> Tuple[TrendRecord, CleaningTrace]:
    fields = split_fields(raw, rules.split_mode)
    trend_name = extract_trend_name(fields)
    growth, growth_source = match_growth_percentage(fields, raw, rules)
    candidates = collect_candidates(fields, trend_name, rules)

    record = TrendRecord(
        trend_name=trend_name,
        search_volume=extract_search_volume(fields, rules),
        time_ago=extract_time_ago(fields, rules),
        growth_percentage=growth,
        related_searches=tuple(candidates[: rules.max_related]),
    )
    trace = CleaningTrace(
        raw=raw,
        fields=tuple(fields),
        volume_field=find_volume_field(fields, rules) or "",
        time_field=find_time_field(fields, rules) or "",
        growth_source=growth_source,
        candidates=tuple(candidates),
    )
    logger.debug(
        "Cleaned row trend=%r volume=%r time=%r growth=%r related=%s fields=%s",
        record.trend_name,
        record.search_volume,
        record.time_ago,
        record.growth_percentage,
        list(record.related_searches),
        len(fields),
    )
    return record, trace


def clean_trend_data(
    raw: RawRow,
    rules: CleaningRules | None = None,
    trace: bool = False,
) -> Union[TrendRecord, Tuple[TrendRecord, CleaningTrace]]:
    """Transform one raw row into a :class:`TrendRecord`.

    Parameters
    ----------
    raw:
        Either the comma-joined text of a row or the list of text fragments
        scraped from its cells.
    rules:
        Cleaning rules; defaults to :data:`~tscraper.rules.DEFAULT_RULES`.
    trace:
        When true, return ``(record, trace)`` with the intermediate field list
        and the fields each extractor picked.
    """
    record, row_trace = _clean(join_row(raw), rules or DEFAULT_RULES)
    if trace:
        return record, row_trace
    return record


def clean_trend_rows(
    rows: Iterable[RawRow], rules: CleaningRules | None = None
) -> List[TrendRecord]:
    """Clean every row in order; degenerate rows still produce a record."""
    rules = rules or DEFAULT_RULES
    records = [_clean(join_row(row), rules)[0] for row in rows]
    logger.debug("Cleaned %s rows", len(records))
    return records


__all__ = [
    "CleaningTrace",
    "RawRow",
    "TrendRecord",
    "clean_trend_data",
    "clean_trend_rows",
    "join_row",
]
