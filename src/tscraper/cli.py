"""Command-line interface for scraping and cleaning trending topics."""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from pathlib import Path
from typing import List, Optional

import orjson
import typer

from .config import settings
from .csv_writer import read_trend_csv, trending_filename, write_csv
from .evaluator import evaluate_topics, summarize
from .normalize import RawRow, clean_trend_data, clean_trend_rows
from .pipeline import rules_from_settings, run

app = typer.Typer(name="tscraper", help="Scrape and clean trending topics")

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("csv", "json", "sqlite")


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(levelname)s:%(name)s:%(message)s",
    )


def load_raw_rows(path: Path) -> List[RawRow]:
    """Load raw rows from a JSON array or a text file with one blob per line.

    JSON entries may be strings (pre-joined blobs) or lists of fragments.
    """
    data = Path(path).read_bytes()
    if path.suffix.lower() == ".json":
        rows = orjson.loads(data)
        if not isinstance(rows, list):
            raise typer.BadParameter(f"{path} must contain a JSON array")
        for i, row in enumerate(rows):
            if isinstance(row, str):
                continue
            if not isinstance(row, list) or not all(isinstance(f, str) for f in row):
                raise typer.BadParameter(
                    f"{path}: row {i} must be a string or a list of strings"
                )
        return rows
    return [line for line in data.decode("utf-8").splitlines() if line.strip()]


@app.command()
def scrape(
    url: str = typer.Option(settings.TRENDS_URL, "--url", help="Trends page URL"),
    out_dir: Path = typer.Option(settings.OUTPUT_DIR, "--out-dir", help="Output directory"),
    fmt: str = typer.Option(settings.OUTPUT_FORMAT, "--format", help="csv, json or sqlite"),
    headless: bool = typer.Option(settings.HEADLESS, "--headless/--headed", help="Browser mode"),
    rules: Optional[Path] = typer.Option(settings.CLEANING_RULES_PATH, "--rules", help="Cleaning rules JSON"),
    log_level: str = typer.Option(settings.LOG_LEVEL, "--log-level", help="Logging level"),
) -> None:
    """Load the trends page, clean its rows and save them."""
    _setup_logging(log_level)
    if fmt not in OUTPUT_FORMATS:
        raise typer.BadParameter(f"--format must be one of {', '.join(OUTPUT_FORMATS)}")
    cfg = settings.model_copy(
        update={
            "TRENDS_URL": url,
            "OUTPUT_DIR": out_dir,
            "OUTPUT_FORMAT": fmt,
            "HEADLESS": headless,
            "CLEANING_RULES_PATH": rules,
        }
    )
    path = run(cfg)
    typer.echo(f"Data saved to: {path}")


@app.command()
def clean(
    rows: Path = typer.Option(..., "--rows", help="Raw rows (.json array or one blob per line)"),
    out: Optional[Path] = typer.Option(None, "--out", help="Output CSV path"),
    rules: Optional[Path] = typer.Option(settings.CLEANING_RULES_PATH, "--rules", help="Cleaning rules JSON"),
    trace: bool = typer.Option(False, "--trace", help="Print intermediate fields for each row"),
    log_level: str = typer.Option(settings.LOG_LEVEL, "--log-level", help="Logging level"),
) -> None:
    """Clean previously scraped raw rows into a trends CSV."""
    _setup_logging(log_level)
    cleaning_rules = rules_from_settings(settings.model_copy(update={"CLEANING_RULES_PATH": rules}))
    raw_rows = load_raw_rows(rows)
    if trace:
        records = []
        for raw in raw_rows:
            record, row_trace = clean_trend_data(raw, cleaning_rules, trace=True)
            typer.echo(row_trace.model_dump_json())
            records.append(record)
    else:
        records = clean_trend_rows(raw_rows, cleaning_rules)
    out = out or Path(settings.OUTPUT_DIR) / trending_filename()
    write_csv(records, out)
    logger.info("Cleaned %s rows into %s", len(records), out)
    typer.echo(f"Data saved to: {out}")


@app.command()
def evaluate(
    csv_path: Path = typer.Option(..., "--csv", help="Trends CSV to classify"),
    out_dir: Path = typer.Option(settings.OUTPUT_DIR, "--out-dir", help="Output directory"),
    domains: Optional[Path] = typer.Option(settings.DOMAINS_PATH, "--domains", help="Domains JSON"),
    log_level: str = typer.Option(settings.LOG_LEVEL, "--log-level", help="Logging level"),
) -> None:
    """Classify each trend of a CSV against the domains of interest."""
    _setup_logging(log_level)
    if not settings.GEMINI_API_KEY:
        typer.echo("Please set GEMINI_API_KEY environment variable", err=True)
        raise typer.Exit(code=1)
    cfg = settings.model_copy(update={"OUTPUT_DIR": out_dir, "DOMAINS_PATH": domains})
    results, path = asyncio.run(evaluate_topics(csv_path, cfg))
    typer.echo(f"Evaluation complete! Results saved to: {path}")
    typer.echo(f"Processed {len(results)} trends")
    for classification, count in summarize(results).items():
        typer.echo(f"  {classification}: {count} trends")


@app.command("validate-csv")
def validate_csv(
    csv_path: Path = typer.Option(..., "--csv", help="Trends CSV path"),
    log_level: str = typer.Option(settings.LOG_LEVEL, "--log-level", help="Logging level"),
) -> None:
    """Print basic quality-control stats for a trends CSV."""
    _setup_logging(log_level)
    records = read_trend_csv(csv_path)
    total = len(records)
    typer.echo(f"Total rows: {total}")
    if total == 0:
        return

    present = {
        "Search volume": sum(1 for r in records if r.search_volume),
        "Time ago": sum(1 for r in records if r.time_ago),
        "Growth": sum(1 for r in records if r.growth_percentage),
        "Related searches": sum(1 for r in records if r.related_searches),
    }
    for label, count in present.items():
        typer.echo(f"{label} present: {count / total * 100:.1f}%")

    related: Counter[str] = Counter()
    for r in records:
        related.update(r.related_searches)
    if related:
        typer.echo("Top related searches:")
        for term, count in related.most_common(10):
            typer.echo(f"- {term}: {count}")

    empty = [r.trend_name for r in records if not (r.search_volume or r.time_ago)]
    if empty:
        typer.echo(f"Missing volume and time: {len(empty)} rows")
        for name in empty[:5]:
            typer.echo(f"  - {name}")
    else:
        typer.echo("No rows missing volume and time")


if __name__ == "__main__":
    app()
