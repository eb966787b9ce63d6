"""CSV serialization of trend records and the matching reader."""

from __future__ import annotations

import csv
import io
import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, List

from .normalize import TrendRecord

logger = logging.getLogger(__name__)

# Header labels in column order
FIELDS = ["Trend Name", "Search Volume", "Time Ago", "Growth %", "Related Searches"]

RELATED_SEPARATOR = "; "


def ensure_parent(path: Path) -> None:
    """Ensure the parent directory of ``path`` exists."""
    path.parent.mkdir(parents=True, exist_ok=True)


def trending_filename(
    now: datetime | None = None, prefix: str = "trending_topics", suffix: str = ".csv"
) -> str:
    """Return ``<prefix>_YYYY-MM-DD_HH-MM-SS<suffix>`` for ``now``."""
    now = now or datetime.now()
    return f"{prefix}_{now.strftime('%Y-%m-%d_%H-%M-%S')}{suffix}"


def _cells(record: TrendRecord) -> List[str]:
    return [
        record.trend_name,
        record.search_volume,
        record.time_ago,
        record.growth_percentage,
        RELATED_SEPARATOR.join(record.related_searches),
    ]


def records_to_csv(records: Iterable[TrendRecord]) -> str:
    """Serialize ``records`` to CSV text.

    The header line is bare; every data cell is double quoted, with embedded
    quotes doubled. An empty input produces the header line only.
    """
    buf = io.StringIO()
    buf.write(",".join(FIELDS) + "\n")
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for record in records:
        writer.writerow(_cells(record))
    return buf.getvalue()


def write_csv(records: Iterable[TrendRecord], path: Path) -> Path:
    """Write ``records`` to ``path`` as UTF-8 CSV and return the path."""
    path = Path(path)
    records = list(records)
    ensure_parent(path)
    path.write_text(records_to_csv(records), encoding="utf-8", newline="")
    logger.info("Wrote %s rows to %s", len(records), path)
    return path


def _split_related(cell: str) -> List[str]:
    return [s.strip() for s in cell.split(";") if s.strip()]


def _naive_rows(text: str) -> Iterable[List[str]]:
    for line in text.split("\n")[1:]:
        if not line.strip():
            continue
        cells = line.split(",")
        yield [cell.strip().removeprefix('"').removesuffix('"').strip() for cell in cells]


def parse_trend_csv(text: str, naive: bool = False) -> List[TrendRecord]:
    """Rebuild records from CSV text produced by :func:`records_to_csv`.

    ``naive`` splits each line on every comma and strips wrapping quotes, the
    way older consumers read the file; values containing commas (``1,000%``)
    do not survive that mode. The default uses a quote-aware reader.
    Lines without a trend name are skipped.
    """
    if naive:
        rows: Iterable[List[str]] = _naive_rows(text)
    else:
        reader = csv.reader(io.StringIO(text))
        next(reader, None)
        rows = reader

    records: List[TrendRecord] = []
    for cells in rows:
        cells = list(cells) + [""] * (len(FIELDS) - len(cells))
        name, volume, time_ago, growth, related = cells[: len(FIELDS)]
        if not name:
            continue
        records.append(
            TrendRecord(
                trend_name=name,
                search_volume=volume,
                time_ago=time_ago,
                growth_percentage=growth,
                related_searches=tuple(_split_related(related)),
            )
        )
    return records


def read_trend_csv(path: Path, naive: bool = False) -> List[TrendRecord]:
    """Read a trends CSV file from ``path``."""
    with Path(path).open("r", newline="", encoding="utf-8") as f:
        return parse_trend_csv(f.read(), naive=naive)


__all__ = [
    "FIELDS",
    "RELATED_SEPARATOR",
    "ensure_parent",
    "parse_trend_csv",
    "read_trend_csv",
    "records_to_csv",
    "trending_filename",
    "write_csv",
]
