import logging

import pytest

from okr.services.levels import classify, round_half_up
from okr.services.scoring import (
    DepartmentInput,
    KeyResultInput,
    MetricType,
    ObjectiveInput,
    ScoreResult,
    Thresholds,
    WeightedScore,
    aggregate,
    empty_result,
    score_department,
    score_division,
    score_key_result,
    score_objective,
    score_result,
)

SALES_THRESHOLDS = Thresholds(below=50, meets=65, good=95, very_good=100, exceptional=200)
DEFECT_THRESHOLDS = Thresholds(below=10, meets=8, good=6, very_good=4, exceptional=2)


def higher(actual, thresholds=SALES_THRESHOLDS, weight=0):
    return KeyResultInput(MetricType.HIGHER_BETTER, actual, thresholds, weight, name="sales")


def lower(actual, thresholds=DEFECT_THRESHOLDS, weight=0):
    return KeyResultInput(MetricType.LOWER_BETTER, actual, thresholds, weight, name="defects")


def qualitative(grade, weight=0):
    return KeyResultInput(MetricType.QUALITATIVE, grade, weight=weight, name="quality")


def test_actual_on_lowest_threshold_scores_bottom_level(levels):
    assert score_key_result(higher("50"), levels) == ScoreResult(0.0, "below", "#d9534f", 0.0)


def test_actual_between_thresholds_is_interpolated(levels):
    result = score_key_result(higher("97.5"), levels)
    assert result.score == 0.63
    assert result.level == "good"
    assert result.percentage == 63.0


def test_actual_on_top_threshold_scores_top_level_exactly(levels):
    assert score_key_result(higher("200"), levels).score == 1.0
    assert score_key_result(higher("200"), levels).level == "exceptional"
    assert score_key_result(higher("5000"), levels).score == 1.0


def test_actual_on_intermediate_threshold_scores_that_level(levels):
    assert score_key_result(higher("100"), levels).score == 0.75
    assert score_key_result(higher("65"), levels).score == 0.25


def test_actual_below_every_threshold_scores_lowest(levels):
    assert score_key_result(higher("10"), levels).score == 0.0


def test_lower_better_metrics(levels):
    assert score_key_result(lower("2"), levels).score == 1.0
    assert score_key_result(lower("0.5"), levels).score == 1.0
    assert score_key_result(lower("5"), levels).score == 0.63
    assert score_key_result(lower("8"), levels).score == 0.25
    assert score_key_result(lower("12"), levels).score == 0.0


def test_missing_thresholds_get_direction_aware_defaults(levels):
    assert Thresholds().resolved(MetricType.HIGHER_BETTER) == (0.0, 25.0, 50.0, 75.0, 100.0)
    assert Thresholds().resolved(MetricType.LOWER_BETTER) == (100.0, 75.0, 50.0, 25.0, 0.0)
    assert Thresholds(good=10).resolved(MetricType.LOWER_BETTER)[2] == 10
    assert score_key_result(higher("60", Thresholds()), levels).score == 0.6
    assert score_key_result(lower("0", Thresholds()), levels).score == 1.0


def test_non_numeric_actual_value_is_scored_as_zero_with_warning(levels, caplog):
    with caplog.at_level(logging.WARNING, logger="okr.services.scoring"):
        result = score_key_result(higher("abc"), levels)
    assert result.score == 0.0
    assert "Invalid actual value" in caplog.text


def test_non_finite_actual_value_is_scored_as_zero(levels, caplog):
    with caplog.at_level(logging.WARNING, logger="okr.services.scoring"):
        assert score_key_result(higher("nan", Thresholds()), levels).score == 0.0
    assert "Non-finite" in caplog.text


def test_blank_actual_value_is_zero(levels):
    assert score_key_result(higher(None, Thresholds()), levels).score == 0.0
    assert score_key_result(higher("  ", Thresholds()), levels).score == 0.0


def test_scoring_is_pure(levels):
    kr = higher("97.5")
    assert score_key_result(kr, levels) == score_key_result(kr, levels)


def test_qualitative_grades_pick_levels_directly(levels):
    assert score_key_result(qualitative("C"), levels) == ScoreResult(0.5, "good", "#5cb85c", 50.0)
    assert score_key_result(qualitative("a"), levels).score == 1.0
    assert score_key_result(qualitative(" B "), levels).level == "very_good"


def test_qualitative_missing_or_unknown_grade_is_lowest(levels):
    assert score_key_result(qualitative(None), levels).level == "below"
    assert score_key_result(qualitative("Z"), levels).score == 0.0


def test_qualitative_on_three_levels_maps_c_to_middle(three_levels):
    result = score_key_result(qualitative("C"), three_levels)
    assert result.level == "mid"
    assert result.score == 0.5


def test_quantitative_on_three_levels_shares_top_index(three_levels):
    assert score_key_result(higher("12.5", Thresholds()), three_levels).score == 0.25
    assert score_key_result(higher("12.5", Thresholds()), three_levels).level == "low"
    assert score_key_result(higher("60", Thresholds()), three_levels).level == "high"


def test_quantitative_on_legacy_scale(legacy_levels):
    result = score_key_result(higher("97.5"), legacy_levels)
    assert result.score == 4.63
    assert result.level == "good"
    assert score_key_result(higher("1"), legacy_levels).score == 3.0


def test_aggregate_is_weighted_mean(levels):
    result = aggregate([WeightedScore(0.2, 1), WeightedScore(0.8, 3)], levels)
    assert result.score == 0.65
    assert result.level == "good"


@pytest.mark.parametrize(
    "s1,w1,s2,w2",
    [(0.1, 10, 0.9, 90), (0.33, 1, 0.66, 2), (0.0, 5, 1.0, 5), (0.45, 60, 0.8, 40)],
)
def test_aggregate_matches_weighted_average_formula(levels, s1, w1, s2, w2):
    expected = (s1 * w1 + s2 * w2) / (w1 + w2)
    result = aggregate([WeightedScore(s1, w1), WeightedScore(s2, w2)], levels)
    assert result.score == pytest.approx(expected, abs=0.005)


def test_aggregate_without_weights_uses_plain_mean(levels):
    result = aggregate([WeightedScore(0.2, 0), WeightedScore(0.6, 0)], levels)
    assert result.score == 0.4
    assert result.level == "meets"


def test_empty_aggregate_returns_lowest_level(levels, legacy_levels, three_levels):
    assert aggregate([], levels) == ScoreResult(0.0, "below", "#d9534f", 0.0)
    assert aggregate([], legacy_levels) == ScoreResult(3.0, "below", "#d9534f", 0.0)
    assert aggregate([], three_levels) == empty_result(three_levels)
    assert empty_result(three_levels).color == "#aa0000"


@pytest.mark.parametrize("score", [0.0, 0.33, 0.5, 0.74, 1.0])
def test_single_child_aggregate_classifies_like_the_score(levels, score):
    result = aggregate([WeightedScore(score, 1)], levels)
    assert (result.level, result.color, result.percentage) == tuple(classify(round_half_up(score), levels))


def test_objective_score_weights_key_results(levels):
    result = score_objective([higher("200", weight=60), qualitative("C", weight=40)], levels)
    assert result.score == 0.8
    assert result.level == "very_good"
    assert score_objective([], levels) == empty_result(levels)


def test_department_skips_objectives_without_key_results(levels):
    objectives = [
        ObjectiveInput(key_results=[higher("200", weight=100)], weight=None),
        ObjectiveInput(key_results=[], weight=90),
        ObjectiveInput(key_results=[qualitative("C", weight=100)], weight=0),
    ]
    assert score_department(objectives, levels).score == 0.75


def test_department_mixes_explicit_and_default_weights(levels):
    objectives = [
        ObjectiveInput(key_results=[higher("200", weight=100)], weight=30),
        ObjectiveInput(key_results=[qualitative("C", weight=100)], weight=None),
    ]
    # the unweighted objective gets 100 / 2 = 50
    assert score_department(objectives, levels).score == 0.69


def test_department_without_scoreable_objectives_is_empty(levels):
    assert score_department([ObjectiveInput(key_results=[])], levels) == empty_result(levels)
    assert score_department([], levels) == empty_result(levels)


def test_division_averages_scoreable_departments(levels):
    departments = [
        DepartmentInput(objectives=[ObjectiveInput(key_results=[higher("200")])]),
        DepartmentInput(objectives=[ObjectiveInput(key_results=[qualitative("C")])]),
        DepartmentInput(objectives=[]),
    ]
    result = score_division(departments, levels)
    assert result.score == 0.75
    assert result.level == "very_good"
    assert score_division([DepartmentInput()], levels) == empty_result(levels)


def test_division_uses_precomputed_department_scores(levels):
    departments = [
        DepartmentInput(objectives=[ObjectiveInput(key_results=[higher("200")])]),
        DepartmentInput(objectives=[]),
    ]
    precomputed = [score_result(0.4, levels), empty_result(levels)]
    assert score_division(departments, levels, precomputed).score == 0.4


def test_division_respects_department_weights(levels):
    departments = [
        DepartmentInput(objectives=[ObjectiveInput(key_results=[higher("200")])], weight=75),
        DepartmentInput(objectives=[ObjectiveInput(key_results=[qualitative("E")])], weight=25),
    ]
    assert score_division(departments, levels).score == 0.75
