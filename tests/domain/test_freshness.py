"""Tests for cache HIT/MISS decisions."""

from datetime import timedelta

import pytest

from job_match_analysis.domain.analysis import INTERVIEW_INSIGHTS, JOB_MATCH, SKILLS_GAP
from job_match_analysis.domain.freshness import FreshnessWindows, decide_cache
from job_match_analysis.domain.weights import WeightSet
from tests.support.builders import FIXED_NOW, job_match_record, skills_gap_record

WINDOWS = FreshnessWindows()


def _decide_job_match(
    age: timedelta,
    *,
    stored: WeightSet | None = None,
    requested: WeightSet | None = None,
    force_refresh: bool = False,
):
    record = job_match_record("job-1", 70, analysis_date=FIXED_NOW - age, weights=stored)
    return decide_cache(
        kind=JOB_MATCH,
        latest=record,
        requested_weights=WeightSet() if requested is None else requested,
        force_refresh=force_refresh,
        now=FIXED_NOW,
        windows=WINDOWS,
    )


def test_record_one_second_inside_window_is_a_hit() -> None:
    decision = _decide_job_match(timedelta(hours=23, minutes=59, seconds=59))

    assert decision.is_hit
    assert decision.reason is None


def test_record_exactly_at_window_is_a_miss() -> None:
    decision = _decide_job_match(timedelta(hours=24))

    assert not decision.is_hit
    assert decision.reason == "expired"
    assert decision.age == timedelta(hours=24)


def test_changed_weights_force_a_miss() -> None:
    decision = _decide_job_match(
        timedelta(minutes=1),
        stored=WeightSet(skills=1.0),
        requested=WeightSet(skills=2.0),
    )

    assert not decision.is_hit
    assert decision.reason == "weights-changed"


def test_force_refresh_overrides_fresh_identical_record() -> None:
    decision = _decide_job_match(timedelta(seconds=1), force_refresh=True)

    assert not decision.is_hit
    assert decision.reason == "forced"


def test_missing_record_is_a_miss() -> None:
    decision = decide_cache(
        kind=JOB_MATCH,
        latest=None,
        requested_weights=WeightSet(),
        force_refresh=False,
        now=FIXED_NOW,
        windows=WINDOWS,
    )

    assert decision.reason == "no-record"


def test_expiry_short_circuits_weight_comparison() -> None:
    decision = _decide_job_match(
        timedelta(days=2),
        stored=WeightSet(skills=1.0),
        requested=WeightSet(skills=3.0),
    )

    assert decision.reason == "expired"


def test_skills_gap_ignores_weights() -> None:
    record = skills_gap_record("job-1", 40, analysis_date=FIXED_NOW - timedelta(hours=2))

    decision = decide_cache(
        kind=SKILLS_GAP,
        latest=record,
        requested_weights=WeightSet(skills=3.0),
        force_refresh=False,
        now=FIXED_NOW,
        windows=WINDOWS,
    )

    assert decision.is_hit


@pytest.mark.parametrize(
    ("kind", "expected"),
    [
        (JOB_MATCH, timedelta(hours=24)),
        (SKILLS_GAP, timedelta(hours=24)),
        (INTERVIEW_INSIGHTS, timedelta(days=7)),
    ],
)
def test_default_windows_per_kind(kind: str, expected: timedelta) -> None:
    assert WINDOWS.for_kind(kind) == expected  # type: ignore[arg-type]


def test_unknown_kind_window_raises() -> None:
    with pytest.raises(ValueError, match="Unknown analysis kind"):
        WINDOWS.for_kind("cover-letter")  # type: ignore[arg-type]
