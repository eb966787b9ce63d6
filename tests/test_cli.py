import json

from typer.testing import CliRunner

from tscraper import cli
from tscraper.cli import app
from tscraper.csv_writer import read_trend_csv, records_to_csv
from tscraper.normalize import TrendRecord

runner = CliRunner()

SCENARIO_A = (
    '"brett james","200K+ searches·trending_upActive·20h ago",'
    '"200K+arrow_upward1,000%","brett james plane crash","Search term"'
)


def test_clean_json_rows(tmp_path):
    rows = tmp_path / "rows.json"
    rows.write_text(
        json.dumps([SCENARIO_A, [], ["heat vs knicks", "50K+ searches", "·50m ago"]]),
        encoding="utf-8",
    )
    out = tmp_path / "trends.csv"
    result = runner.invoke(app, ["clean", "--rows", str(rows), "--out", str(out), "--log-level", "WARNING"])
    assert result.exit_code == 0, result.output
    assert f"Data saved to: {out}" in result.output
    # the empty row has no trend name and is skipped when reading back
    records = read_trend_csv(out)
    assert [r.trend_name for r in records] == ["brett james", "heat vs knicks"]
    assert out.read_text(encoding="utf-8").count("\n") == 4


def test_clean_text_rows_with_trace(tmp_path):
    rows = tmp_path / "rows.txt"
    rows.write_text(SCENARIO_A + "\n\n", encoding="utf-8")
    out = tmp_path / "trends.csv"
    result = runner.invoke(app, ["clean", "--rows", str(rows), "--out", str(out), "--trace", "--log-level", "WARNING"])
    assert result.exit_code == 0, result.output
    trace = json.loads(result.output.splitlines()[0])
    assert trace["growth_source"] == "raw"
    assert trace["candidates"] == ["plane crash"]


def test_validate_csv(tmp_path):
    path = tmp_path / "trends.csv"
    path.write_text(
        records_to_csv(
            [
                TrendRecord(
                    trend_name="brett james",
                    search_volume="200K+",
                    time_ago="20h ago",
                    growth_percentage="1,000%",
                    related_searches=("plane crash", "songs"),
                ),
                TrendRecord(trend_name="heat vs knicks", related_searches=("plane crash",)),
            ]
        ),
        encoding="utf-8",
    )
    result = runner.invoke(app, ["validate-csv", "--csv", str(path)])
    assert result.exit_code == 0, result.output
    assert "Total rows: 2" in result.output
    assert "Search volume present: 50.0%" in result.output
    assert "Related searches present: 100.0%" in result.output
    assert "- plane crash: 2" in result.output
    assert "Missing volume and time: 1 rows" in result.output


def test_evaluate_requires_api_key(tmp_path, monkeypatch):
    monkeypatch.setattr(cli.settings, "GEMINI_API_KEY", None)
    path = tmp_path / "trends.csv"
    path.write_text(records_to_csv([]), encoding="utf-8")
    result = runner.invoke(app, ["evaluate", "--csv", str(path)])
    assert result.exit_code == 1


def test_clean_rejects_malformed_json_rows(tmp_path):
    rows = tmp_path / "rows.json"
    rows.write_text(json.dumps([SCENARIO_A, {"trend": "x"}]), encoding="utf-8")
    out = tmp_path / "trends.csv"
    result = runner.invoke(app, ["clean", "--rows", str(rows), "--out", str(out)])
    assert result.exit_code != 0
    assert not out.exists()

    rows.write_text(json.dumps([["brett james", 200]]), encoding="utf-8")
    result = runner.invoke(app, ["clean", "--rows", str(rows), "--out", str(out)])
    assert result.exit_code != 0
    assert not out.exists()


def test_load_raw_rows_accepts_strings_and_fragment_lists(tmp_path):
    rows = tmp_path / "rows.json"
    rows.write_text(json.dumps([SCENARIO_A, [], ["a", "b"]]), encoding="utf-8")
    assert cli.load_raw_rows(rows) == [SCENARIO_A, [], ["a", "b"]]
