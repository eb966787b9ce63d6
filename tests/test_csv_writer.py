from datetime import datetime

from tscraper.csv_writer import (
    parse_trend_csv,
    read_trend_csv,
    records_to_csv,
    trending_filename,
    write_csv,
)
from tscraper.normalize import TrendRecord

HEADER = "Trend Name,Search Volume,Time Ago,Growth %,Related Searches\n"


def _records():
    return [
        TrendRecord(
            trend_name="brett james",
            search_volume="200K+",
            time_ago="20h ago",
            growth_percentage="1,000%",
            related_searches=("plane crash", "songs"),
        ),
        TrendRecord(trend_name="heat vs knicks", search_volume="50K+", time_ago="50m ago"),
    ]


def test_empty_input_is_header_only():
    assert records_to_csv([]) == HEADER


def test_rows_are_quoted():
    text = records_to_csv(_records())
    lines = text.split("\n")
    assert lines[0] + "\n" == HEADER
    assert lines[1] == '"brett james","200K+","20h ago","1,000%","plane crash; songs"'
    assert lines[2] == '"heat vs knicks","50K+","50m ago","",""'
    assert text.endswith("\n")


def test_embedded_quotes_are_escaped():
    text = records_to_csv([TrendRecord(trend_name='say "hi"')])
    assert '"say ""hi"""' in text
    assert parse_trend_csv(text)[0].trend_name == 'say "hi"'


def test_quote_aware_reader_recovers_records():
    assert parse_trend_csv(records_to_csv(_records())) == _records()


def test_naive_reader_recovers_scalars_without_commas():
    records = [
        TrendRecord(
            trend_name="heat vs knicks",
            search_volume="50K+",
            time_ago="50m ago",
            growth_percentage="400%",
            related_searches=("knicks score", "heat roster"),
        )
    ]
    parsed = parse_trend_csv(records_to_csv(records), naive=True)
    assert parsed == records


def test_rows_without_name_are_skipped():
    text = HEADER + '"","1K+","","",""\n\n'
    assert parse_trend_csv(text) == []
    assert parse_trend_csv(text, naive=True) == []


def test_trending_filename():
    now = datetime(2024, 3, 7, 9, 5, 1)
    assert trending_filename(now) == "trending_topics_2024-03-07_09-05-01.csv"
    assert trending_filename(now, "trend_evaluations", ".json") == (
        "trend_evaluations_2024-03-07_09-05-01.json"
    )


def test_write_and_read_csv(tmp_path):
    path = tmp_path / "nested" / "trends.csv"
    write_csv(_records(), path)
    assert path.read_text(encoding="utf-8").startswith(HEADER)
    assert read_trend_csv(path) == _records()
