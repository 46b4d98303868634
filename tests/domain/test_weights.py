"""Tests for weight normalisation, merging and equality."""

from types import MappingProxyType

import pytest

from job_match_analysis.domain.weights import (
    MAX_WEIGHT,
    MIN_WEIGHT,
    WeightModel,
    WeightSet,
    clamp_weight,
    merge_weight_sets,
    round_half_up,
    sanitize_custom_criteria,
    sanitize_weight_input,
    weight_percentages,
    weights_equal,
)


class TestClampWeight:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (1, 1.0),
            (2.346, 2.35),
            (0.05, MIN_WEIGHT),
            (7, MAX_WEIGHT),
            ("1.5", 1.5),
            (" 2 ", 2.0),
        ],
    )
    def test_clamps_and_rounds_numeric_input(self, raw: object, expected: float) -> None:
        assert clamp_weight(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [None, 0, -1, "", "abc", True, float("nan"), float("inf"), [1], {"a": 1}],
    )
    def test_rejects_unusable_input(self, raw: object) -> None:
        assert clamp_weight(raw) is None

    @pytest.mark.parametrize("raw", [0.01, 0.1, 0.125, 1, 2.999, 3, 42.5])
    def test_is_idempotent(self, raw: float) -> None:
        once = clamp_weight(raw)

        assert clamp_weight(once) == once


def test_round_half_up_rounds_halves_away_from_zero() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(0.125, 2) == 0.13
    assert round_half_up(33.25, 1) == 33.3


def test_sanitize_custom_criteria_trims_names_and_drops_bad_entries() -> None:
    cleaned = sanitize_custom_criteria({" remote ": 2, "": 1, "salary": "x", "travel": 0})

    assert cleaned == {"remote": 2.0}


def test_sanitize_custom_criteria_returns_none_when_nothing_survives() -> None:
    assert sanitize_custom_criteria({"salary": -1}) is None
    assert sanitize_custom_criteria(["remote"]) is None


class TestWeightSetEquality:
    def test_custom_criteria_key_order_is_ignored(self) -> None:
        a = WeightSet(custom_criteria=MappingProxyType({"remote": 2.0, "salary": 1.5}))
        b = WeightSet(custom_criteria=MappingProxyType({"salary": 1.5, "remote": 2.0}))

        assert weights_equal(a, b)
        assert a == b
        assert hash(a) == hash(b)

    def test_fifth_decimal_place_is_ignored(self) -> None:
        assert weights_equal(WeightSet(skills=1.00001), WeightSet(skills=1.0))

    def test_fourth_decimal_place_matters(self) -> None:
        assert not weights_equal(WeightSet(skills=1.001), WeightSet(skills=1.0))

    def test_none_only_equals_none(self) -> None:
        assert weights_equal(None, None)
        assert not weights_equal(WeightSet(), None)

    def test_empty_custom_criteria_normalise_to_none(self) -> None:
        assert WeightSet(custom_criteria=MappingProxyType({})).custom_criteria is None


def test_sanitize_weight_input_falls_back_per_field() -> None:
    defaults = WeightSet(skills=1.5)

    result = sanitize_weight_input({"experience": "2", "education": -4}, defaults=defaults)

    assert result == WeightSet(skills=1.5, experience=2.0)


def test_sanitize_weight_input_returns_none_without_usable_fields() -> None:
    assert sanitize_weight_input({"skills": 0, "education": "n/a"}, defaults=WeightSet()) is None
    assert sanitize_weight_input("skills=2", defaults=WeightSet()) is None


def test_sanitize_weight_input_accepts_snake_case_custom_criteria() -> None:
    result = sanitize_weight_input({"custom_criteria": {"remote": 2}}, defaults=WeightSet())

    assert result is not None
    assert result.custom_criteria == {"remote": 2.0}


class TestMergeWeightSets:
    def test_merge_without_sources_is_identity(self) -> None:
        defaults = WeightSet(skills=1.2, requirements=0.8)

        assert merge_weight_sets(defaults, None, None) == defaults

    def test_all_non_positive_sources_fall_back_to_defaults(self) -> None:
        defaults = WeightSet()
        zeros = {"skills": 0, "experience": 0, "education": 0, "requirements": 0}
        negatives = {"skills": -1, "experience": -2, "education": -3, "requirements": -4}

        assert merge_weight_sets(defaults, zeros, negatives) == defaults

    def test_override_wins_over_preference(self) -> None:
        merged = merge_weight_sets(
            WeightSet(),
            {"skills": 2, "education": 0.5},
            {"skills": 3},
        )

        assert merged == WeightSet(skills=3.0, education=0.5)

    def test_invalid_field_falls_back_to_default(self) -> None:
        merged = merge_weight_sets(WeightSet(experience=1.5), {"skills": 2, "experience": -1})

        assert merged == WeightSet(skills=2.0, experience=1.5)

    def test_custom_criteria_merge_key_by_key(self) -> None:
        merged = merge_weight_sets(
            WeightSet(),
            {"customCriteria": {"remote": 2, "salary": 1}},
            {"customCriteria": {"salary": 3}},
        )

        assert merged.custom_criteria == {"remote": 2.0, "salary": 3.0}

    def test_out_of_range_values_are_clamped(self) -> None:
        merged = merge_weight_sets(WeightSet(), {"skills": 10, "education": 0.01})

        assert merged.skills == MAX_WEIGHT
        assert merged.education == MIN_WEIGHT


def test_weight_percentages_include_custom_criteria() -> None:
    weights = WeightSet(skills=2.0, custom_criteria=MappingProxyType({"remote": 1.0}))

    percentages = weight_percentages(weights)

    assert percentages == {
        "skills": 33.3,
        "experience": 16.7,
        "education": 16.7,
        "requirements": 16.7,
        "remote": 16.7,
    }


class TestWeightModel:
    def test_injected_defaults_are_used(self) -> None:
        model = WeightModel(defaults=WeightSet(skills=2.0))

        assert model.merge() == WeightSet(skills=2.0)

    def test_resolve_applies_preference_then_override(self) -> None:
        model = WeightModel()

        resolved = model.resolve(WeightSet(skills=2.0, education=0.5), {"education": 1.5})

        assert resolved == WeightSet(skills=2.0, education=1.5)

    def test_resolve_falls_through_unusable_override(self) -> None:
        model = WeightModel()
        preference = WeightSet(experience=2.5)

        assert model.resolve(preference, {"skills": "lots"}) == preference
        assert model.resolve(preference, None) == preference

    def test_resolve_without_preference_or_override_is_defaults(self) -> None:
        model = WeightModel(defaults=WeightSet(requirements=0.5))

        assert model.resolve(None, None) == WeightSet(requirements=0.5)
