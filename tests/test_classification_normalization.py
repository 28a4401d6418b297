import random

from image_labeler.core.models import ClassificationCandidate, RankedResult
from image_labeler.vision.normalizer import (
    format_results,
    normalize_percentages,
    parse_result_line,
    rank_for_display,
)


def _percentages(results: list[RankedResult]) -> list[int]:
    return [r.percentage for r in results]


def test_shortfall_goes_to_largest() -> None:
    results = normalize_percentages([("cat", 0.42), ("dog", 0.31), ("fox", 0.20)])
    assert [r.label for r in results] == ["cat", "dog", "fox"]
    assert _percentages(results) == [49, 31, 20]


def test_tie_adjusts_first_largest_in_input_order() -> None:
    results = normalize_percentages([("a", 0.333), ("b", 0.333), ("b2", 0.334)])
    assert _percentages(results) == [34, 33, 33]


def test_excess_is_subtracted_from_largest() -> None:
    results = normalize_percentages([("x", 0.6), ("y", 0.5)])
    assert _percentages(results) == [50, 50]


def test_half_rounds_away_from_zero() -> None:
    results = normalize_percentages([("a", 0.125), ("b", 0.875)])
    # 12.5 -> 13, 87.5 -> 88, excess of 1 removed from the largest
    assert _percentages(results) == [13, 87]


def test_empty_input_yields_empty_output() -> None:
    assert normalize_percentages([]) == []


def test_all_zero_confidences_give_first_label_everything() -> None:
    results = normalize_percentages([("low", 0.001), ("lower", 0.002), ("lowest", 0.0)])
    assert _percentages(results) == [100, 0, 0]


def test_single_candidate_becomes_one_hundred() -> None:
    results = normalize_percentages([ClassificationCandidate(label="only", confidence=0.37)])
    assert results == [RankedResult(label="only", percentage=100)]


def test_sum_is_always_one_hundred() -> None:
    rng = random.Random(7)
    for _ in range(200):
        size = rng.randint(1, 12)
        weights = [rng.random() for _ in range(size)]
        total = sum(weights)
        candidates = [(f"l{i}", w / total) for i, w in enumerate(weights)]
        results = normalize_percentages(candidates)
        assert len(results) == size
        assert [r.label for r in results] == [label for label, _ in candidates]
        assert sum(_percentages(results)) == 100


def test_normalizing_normalized_percentages_is_stable() -> None:
    first = normalize_percentages([("cat", 0.42), ("dog", 0.31), ("fox", 0.20)])
    assert _percentages(first) == [49, 31, 20]
    again = normalize_percentages([(r.label, r.percentage / 100) for r in first])
    assert _percentages(again) == _percentages(first)


def test_rank_for_display_filters_sorts_and_truncates() -> None:
    results = [
        RankedResult(label="c", percentage=10),
        RankedResult(label="a", percentage=60),
        RankedResult(label="zero", percentage=0),
        RankedResult(label="b", percentage=25),
        RankedResult(label="d", percentage=5),
    ]
    assert [r.label for r in rank_for_display(results)] == ["a", "b", "c"]
    assert [r.label for r in rank_for_display(results, limit=None)] == ["a", "b", "c", "d"]
    assert rank_for_display(results, limit=0) == []


def test_format_and_parse_result_lines() -> None:
    results = [RankedResult(label="tabby cat", percentage=72), RankedResult(label="dog", percentage=28)]
    text = format_results(results)
    assert text == "tabby cat (72%)\ndog (28%)"
    assert [parse_result_line(line) for line in text.split("\n")] == results
    assert parse_result_line("cat (big) (40%)") == RankedResult(label="cat (big)", percentage=40)
    assert parse_result_line("Error: boom") is None
    assert parse_result_line("cat (x%)") is None
    assert parse_result_line(" (10%)") is None
