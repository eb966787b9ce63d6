from tscraper.related import (
    admit_candidate,
    clean_candidate,
    extract_related_searches,
    strip_trend_name,
)
from tscraper.rules import DEFAULT_NOISE_LABELS, CleaningRules


def test_clean_candidate_strips_dots():
    assert clean_candidate("··plane crash· ") == "plane crash"


def test_noise_and_excluded_fields_are_dropped():
    fields = [
        "Search term",
        "trending_upActive",
        "more_vertMore actions",
        "200K+ searches",
        "1,000%",
        "20 hours ago",
        "abc",
        "songs 2024",
        "plane-crash",
        "taylor swift",
    ]
    assert extract_related_searches(fields, "brett james") == ["taylor swift"]


def test_trend_name_is_stripped_from_candidates():
    fields = ["brett james", "brett james plane crash", "brett james songs"]
    assert extract_related_searches(fields, "brett james") == ["plane crash", "songs"]


def test_trend_name_candidates_rejected_in_strict_mode():
    rules = CleaningRules(strip_trend_name=False)
    fields = ["brett james", "brett james plane crash", "plane crash"]
    assert extract_related_searches(fields, "brett james", rules) == ["plane crash"]


def test_empty_trend_name_does_not_reject_everything():
    assert extract_related_searches(["", "hello world"], "") == ["hello world"]


def test_duplicates_keep_first_occurrence():
    fields = ["songs", "plane crash", "·songs·", "plane crash", "tour dates"]
    assert extract_related_searches(fields, "x") == ["songs", "plane crash", "tour dates"]


def test_truncated_to_max_related():
    fields = ["alpha one", "beta two", "gamma three", "delta four", "epsilon five", "zeta six"]
    assert extract_related_searches(fields, "x") == fields[:5]
    rules = CleaningRules(max_related=2)
    assert extract_related_searches(fields, "x", rules) == fields[:2]


def test_custom_noise_labels():
    rules = CleaningRules(noise_labels=("Sponsored",))
    assert admit_candidate("Sponsored link", "x", rules) is None
    assert admit_candidate("Active users", "x", rules) == "Active users"
    assert admit_candidate("Active users", "x") is None


def test_no_result_contains_noise_label():
    fields = [label + " extra" for label in DEFAULT_NOISE_LABELS] + ["real term"]
    result = extract_related_searches(fields, "x")
    assert result == ["real term"]
    assert not any(label in term for term in result for label in DEFAULT_NOISE_LABELS)


def test_trend_name_inside_a_word_is_not_stripped():
    fields = ["Fed", "Federal reserve", "Fed rate cut", "chair maintenance"]
    assert extract_related_searches(fields, "Fed") == ["rate cut", "chair maintenance"]


def test_short_trend_name_rejects_words_containing_it():
    assert extract_related_searches(["ai", "chair maintenance"], "ai") == []
    assert extract_related_searches(["ai", "ai tools", "chair maintenance"], "ai") == ["tools"]


def test_strip_trend_name_matches_whole_words_only():
    assert strip_trend_name("plane crash brett james", "brett james") == "plane crash"
    assert strip_trend_name("Federal reserve", "Fed") == "Federal reserve"
    assert strip_trend_name("c++ jobs", "c++") == "jobs"
    assert strip_trend_name("anything", "") == "anything"
