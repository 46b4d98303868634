"""Cache-validity rules for stored analyses.

A stored analysis is reused (HIT) only when it is younger than the kind's
freshness window and, for job-match, was computed under the weights being
requested now. Configuration staleness short-circuits time staleness.

Usage example:
    from datetime import UTC, datetime

    from job_match_analysis.domain.freshness import FreshnessWindows, decide_cache

    decision = decide_cache(
        kind="job-match",
        latest=None,
        requested_weights=None,
        force_refresh=False,
        now=datetime.now(UTC),
        windows=FreshnessWindows(),
    )
    assert decision.reason == "no-record"
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Literal

from .analysis import INTERVIEW_INSIGHTS, JOB_MATCH, SKILLS_GAP, AnalysisKind, AnalysisRecord
from .weights import WeightSet, weights_equal

CacheOutcome = Literal["hit", "miss"]
MissReason = Literal["forced", "no-record", "expired", "weights-changed"]


@dataclass(frozen=True)
class FreshnessWindows:
    """Maximum reuse age per analysis kind."""

    job_match: timedelta = timedelta(hours=24)
    skills_gap: timedelta = timedelta(hours=24)
    interview_insights: timedelta = timedelta(days=7)

    def for_kind(self, kind: AnalysisKind) -> timedelta:
        if kind == JOB_MATCH:
            return self.job_match
        if kind == SKILLS_GAP:
            return self.skills_gap
        if kind == INTERVIEW_INSIGHTS:
            return self.interview_insights
        raise ValueError(f"Unknown analysis kind: {kind}")


@dataclass(frozen=True)
class CacheDecision:
    outcome: CacheOutcome
    reason: MissReason | None = None
    age: timedelta | None = None

    @property
    def is_hit(self) -> bool:
        return self.outcome == "hit"


def _miss(reason: MissReason, age: timedelta | None = None) -> CacheDecision:
    return CacheDecision(outcome="miss", reason=reason, age=age)


def decide_cache(
    *,
    kind: AnalysisKind,
    latest: AnalysisRecord | None,
    requested_weights: WeightSet | None,
    force_refresh: bool,
    now: datetime,
    windows: FreshnessWindows,
) -> CacheDecision:
    """Decide whether ``latest`` can be served instead of calling the oracle."""
    if force_refresh:
        return _miss("forced")
    if latest is None:
        return _miss("no-record")

    age = now - latest.analysis_date
    if age >= windows.for_kind(kind):
        return _miss("expired", age)

    if kind == JOB_MATCH and requested_weights is not None:
        if not weights_equal(requested_weights, latest.weights_used):
            return _miss("weights-changed", age)

    return CacheDecision(outcome="hit", age=age)
