"""High-level scraping pipeline."""

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import List

from .browser import fetch_page_html
from .config import Settings, settings as default_settings
from .csv_writer import trending_filename, write_csv
from .normalize import TrendRecord, clean_trend_rows
from .parser import extract_row_fragments
from .rules import DEFAULT_RULES, CleaningRules, load_rules
from .writers import to_json, to_sqlite

logger = logging.getLogger(__name__)

_SUFFIXES = {"csv": ".csv", "json": ".json", "sqlite": ".db"}


def rules_from_settings(cfg: Settings) -> CleaningRules:
    if cfg.CLEANING_RULES_PATH:
        return load_rules(cfg.CLEANING_RULES_PATH)
    return DEFAULT_RULES


def save_records(
    records: List[TrendRecord], cfg: Settings, now: datetime | None = None
) -> Path:
    """Write ``records`` to ``OUTPUT_DIR`` in the configured format."""
    fmt = cfg.OUTPUT_FORMAT
    path = Path(cfg.OUTPUT_DIR) / trending_filename(now, suffix=_SUFFIXES[fmt])
    if fmt == "json":
        return to_json(records, path)
    if fmt == "sqlite":
        return to_sqlite(records, path, "trends")
    return write_csv(records, path)


async def run_pipeline(cfg: Settings | None = None) -> Path:
    """Fetch the trends page, clean every row and save the records."""
    cfg = cfg or default_settings
    html = await fetch_page_html(cfg.TRENDS_URL, cfg)
    rows = extract_row_fragments(html)
    records = clean_trend_rows(rows, rules_from_settings(cfg))
    path = save_records(records, cfg)
    logger.info("Data saved to: %s (%s trends)", path, len(records))
    return path


def run(cfg: Settings | None = None) -> Path:
    """Synchronous wrapper around ``run_pipeline``."""
    return asyncio.run(run_pipeline(cfg))
