import re

from tscraper.classifier import (
    extract_growth_percentage,
    extract_search_volume,
    extract_time_ago,
    extract_trend_name,
    match_growth_percentage,
)
from tscraper.rules import CleaningRules
from tscraper.splitter import split_fields


def test_trend_name_is_first_field():
    assert extract_trend_name(["brett james", "200K+ searches"]) == "brett james"
    assert extract_trend_name([]) == ""


def test_search_volume():
    fields = ["x", "Active", "200K+ searches·trending_upActive·20h ago"]
    assert extract_search_volume(fields) == "200K+"
    assert extract_search_volume(["x", "2M+ Searches"]) == ""
    assert extract_search_volume(["x", "1M+ searches"]) == "1M+"
    assert extract_search_volume(["x", "500 searches"]) == "500"


def test_search_volume_missing():
    assert extract_search_volume(["x", "no volume here"]) == ""
    # qualifies on "K+" but the pattern needs digits
    assert extract_search_volume(["x", "K+ searches"]) == ""


def test_time_ago_hours_and_minutes():
    assert extract_time_ago(["x", "·20h ago"]) == "20h ago"
    assert extract_time_ago(["x", "·50m ago"]) == "50m ago"
    assert extract_time_ago(["x", "started 3 hours ago"]) == "3 hours ago"
    assert extract_time_ago(["x", "12 minutes ago"]) == "12 minutes ago"


def test_time_ago_falls_back_to_field():
    assert extract_time_ago(["x", "·a while ago "]) == "a while ago"
    assert extract_time_ago(["x", "y"]) == ""


def test_growth_found_in_raw_blob_when_split_across_fields():
    raw = "brett james,arrow_upward1,000%"
    fields = split_fields(raw)
    assert fields[-1] == "000%"
    assert match_growth_percentage(fields, raw) == ("1,000%", "raw")


def test_growth_missing():
    raw = '"brett james","200K+ searches"'
    assert extract_growth_percentage(split_fields(raw), raw) == ""


def test_growth_field_fallbacks():
    rules = CleaningRules(growth_raw_pattern=re.compile(r"(NEVER)"))
    assert match_growth_percentage(["x", "200K+arrow_upward1,000%"], "", rules) == (
        "1,000%",
        "field",
    )
    assert extract_growth_percentage(["x", "up 50%"], "", rules) == "50%"
    assert extract_growth_percentage(["x", "no digits %"], "", rules) == ""
