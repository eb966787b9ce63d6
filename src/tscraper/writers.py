"""Output helpers for writing trend records to non-CSV sinks."""

from pathlib import Path
from typing import Any, Iterable, List

import orjson
import pandas as pd
from sqlite_utils import Database

from .csv_writer import RELATED_SEPARATOR, ensure_parent
from .normalize import TrendRecord


def to_json_bytes(items: Iterable[Any]) -> bytes:
    """Serialize pydantic models (by alias) or plain objects to indented JSON."""
    data = [
        item.model_dump(by_alias=True, mode="json") if hasattr(item, "model_dump") else item
        for item in items
    ]
    return orjson.dumps(data, option=orjson.OPT_INDENT_2)


def to_json(items: Iterable[Any], path: Path) -> Path:
    """Write ``items`` to ``path`` as a JSON array."""
    path = Path(path)
    ensure_parent(path)
    path.write_bytes(to_json_bytes(items))
    return path


def to_dataframe(records: Iterable[TrendRecord]) -> pd.DataFrame:
    """Build a DataFrame with one row per record; related searches are joined."""
    rows: List[dict] = []
    for record in records:
        row = record.model_dump()
        row["related_searches"] = RELATED_SEPARATOR.join(record.related_searches)
        rows.append(row)
    return pd.DataFrame(
        rows,
        columns=[
            "trend_name",
            "search_volume",
            "time_ago",
            "growth_percentage",
            "related_searches",
        ],
    )


def to_sqlite(records: Iterable[TrendRecord], db_path: Path, table: str) -> Path:
    """Append records to a SQLite database table."""
    db_path = Path(db_path)
    ensure_parent(db_path)
    df = to_dataframe(records)
    db = Database(str(db_path))
    db[table].insert_all(df.to_dict(orient="records"))
    return db_path
