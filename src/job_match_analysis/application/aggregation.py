"""Roll stored analyses up into history, comparison, progress and trend views.

All builders are read-only over the store and never fail on zero records:
they return an explicitly empty view instead.
"""

from __future__ import annotations

import math
from collections import Counter
from datetime import timedelta

from ..domain.analysis import (
    JOB_MATCH,
    SKILLS_GAP,
    AnalysisHistory,
    AnalysisRecord,
    JobMatchResult,
    SkillsGapResult,
)
from ..domain.weights import round_half_up
from ..observability import get_logger
from ..protocols import AnalysisStore, JobDirectory
from .inputs import clamp_limit, require_identifier, require_owned_job
from .views import (
    CommonSkill,
    ComparisonRow,
    CurrentGapSummary,
    HistoryEntry,
    HistoryView,
    JobSummary,
    ProgressMetrics,
    ProgressSnapshot,
    ProgressView,
    SkillCounts,
    TrendJobRow,
    TrendsView,
)

logger = get_logger("job_match_analysis.application.aggregation")

HISTORY_DEFAULT_LIMIT = 20
COMPARISON_DEFAULT_LIMIT = 10
TOP_SKILLS_LIMIT = 10


def _job_match(record: AnalysisRecord) -> JobMatchResult:
    if not isinstance(record.result, JobMatchResult):
        raise TypeError(f"Expected a job-match record, got {record.kind}")
    return record.result


def _skills_gap(record: AnalysisRecord) -> SkillsGapResult:
    if not isinstance(record.result, SkillsGapResult):
        raise TypeError(f"Expected a skills-gap record, got {record.kind}")
    return record.result


# ---------------------------------------------------------------------------
# Job-match history
# ---------------------------------------------------------------------------


def build_history_view(
    *,
    store: AnalysisStore,
    jobs: JobDirectory,
    job_id: object,
    user_id: object,
    limit: int | None = None,
) -> HistoryView:
    """Return up to ``limit`` job-match analyses for one job, newest first."""
    posting = require_owned_job(jobs, job_id, user_id)
    job_key, user_key = posting.id, posting.user_id

    page_size = clamp_limit(limit, default=HISTORY_DEFAULT_LIMIT)
    history = store.list_history(JOB_MATCH, job_key, user_key, limit=page_size)
    entries: list[HistoryEntry] = []
    for record in history.limited(page_size):
        result = _job_match(record)
        entries.append(
            HistoryEntry(
                id=record.id,
                analysis_date=record.analysis_date,
                overall_match_score=result.overall_score,
                category_scores=result.category_scores,
                strengths=result.strengths,
                gaps=result.gaps,
                weights_used=record.weights_used,
            )
        )
    return HistoryView(job=JobSummary.from_posting(posting), entries=tuple(entries))


# ---------------------------------------------------------------------------
# Job-match comparison
# ---------------------------------------------------------------------------


def build_comparison(
    *,
    store: AnalysisStore,
    jobs: JobDirectory,
    user_id: object,
    status: str | None = None,
    limit: int | None = None,
    min_score: float | None = None,
) -> list[ComparisonRow]:
    """Rank the caller's jobs by their latest job-match score.

    Jobs without an analysis or scoring below ``min_score`` are dropped.
    """
    user_key = require_identifier("user_id", user_id)
    page_size = clamp_limit(limit, default=COMPARISON_DEFAULT_LIMIT)
    floor = 0.0 if min_score is None or not math.isfinite(min_score) else min_score
    status_filter = status.strip() if status and status.strip() else None

    latest_by_job = {
        record.job_id: record for record in store.list_for_user(JOB_MATCH, user_key)
    }
    rows: list[ComparisonRow] = []
    for posting in jobs.list_jobs(user_key, status=status_filter):
        record = latest_by_job.get(posting.id)
        if record is None:
            continue
        score = _job_match(record).overall_score
        if score < floor:
            continue
        rows.append(
            ComparisonRow(
                job_id=posting.id,
                title=posting.title,
                company=posting.company,
                status=posting.status,
                latest_score=score,
                analysis_date=record.analysis_date,
                weights_used=record.weights_used,
            )
        )

    rows.sort(key=lambda row: row.latest_score, reverse=True)
    return rows[:page_size]


# ---------------------------------------------------------------------------
# Skills-gap progress
# ---------------------------------------------------------------------------


def _progress_metrics(history: AnalysisHistory) -> ProgressMetrics | None:
    latest = history.latest
    earliest = history.earliest
    if latest is None or earliest is None:
        return None
    latest_score = _skills_gap(latest).overall_gap_score
    first_score = _skills_gap(earliest).overall_gap_score
    span = latest.analysis_date - earliest.analysis_date
    return ProgressMetrics(
        first_score=first_score,
        latest_score=latest_score,
        score_improvement=round(latest_score - first_score, 2),
        total_snapshots=len(history),
        time_span_days=max(0, span // timedelta(days=1)),
    )


def build_progress_view(
    *,
    store: AnalysisStore,
    jobs: JobDirectory,
    job_id: object,
    user_id: object,
) -> ProgressView:
    """Combine the current skills-gap analysis with its snapshot history.

    The current row and the history are read separately; a concurrent write
    can make them briefly disagree.
    """
    posting = require_owned_job(jobs, job_id, user_id)
    job_key, user_key = posting.id, posting.user_id

    current_record = store.get_latest(SKILLS_GAP, job_key, user_key)
    history = store.list_history(SKILLS_GAP, job_key, user_key)

    current = None
    if current_record is not None:
        current_result = _skills_gap(current_record)
        current = CurrentGapSummary(
            overall_gap_score=current_result.overall_gap_score,
            analysis_date=current_record.analysis_date,
            counts=SkillCounts.of(current_result),
        )

    snapshots = tuple(
        ProgressSnapshot(
            id=record.id,
            overall_gap_score=_skills_gap(record).overall_gap_score,
            snapshot_date=record.analysis_date,
            counts=SkillCounts.of(_skills_gap(record)),
        )
        for record in history
    )
    return ProgressView(
        job_id=posting.id,
        job_title=posting.title,
        company_name=posting.company,
        current=current,
        history=snapshots,
        metrics=_progress_metrics(history),
    )


# ---------------------------------------------------------------------------
# Skills-gap trends
# ---------------------------------------------------------------------------


class _SkillTally:
    """Occurrence counts plus the distinct labels seen per skill name."""

    def __init__(self) -> None:
        self.counts: Counter[str] = Counter()
        self.labels: dict[str, dict[str, None]] = {}

    def add(self, skill_name: str, label: str) -> None:
        self.counts[skill_name] += 1
        seen = self.labels.setdefault(skill_name, {})
        if label:
            seen.setdefault(label, None)

    def top(self, *, total_jobs: int, label_key: str) -> tuple[CommonSkill, ...]:
        ranked = sorted(self.counts.items(), key=lambda item: (-item[1], item[0]))
        return tuple(
            CommonSkill(
                skill_name=name,
                frequency=count,
                percentage=int(round_half_up(count / total_jobs * 100)),
                labels=tuple(self.labels.get(name, {})),
                label_key=label_key,
            )
            for name, count in ranked[:TOP_SKILLS_LIMIT]
        )


def build_trends_view(
    *,
    store: AnalysisStore,
    jobs: JobDirectory,
    user_id: object,
) -> TrendsView:
    """Summarise recurring skill gaps across all of the caller's jobs.

    Analyses whose job no longer belongs to the caller are ignored.
    """
    user_key = require_identifier("user_id", user_id)
    postings = {posting.id: posting for posting in jobs.list_jobs(user_key)}
    records = [
        record
        for record in store.list_for_user(SKILLS_GAP, user_key)
        if record.job_id in postings
    ]
    if not records:
        return TrendsView()

    records.sort(key=lambda record: record.analysis_date, reverse=True)
    missing = _SkillTally()
    weak = _SkillTally()
    frequency: Counter[str] = Counter()
    rows: list[TrendJobRow] = []
    for record in records:
        result = _skills_gap(record)
        for shortfall in result.missing_skills:
            missing.add(shortfall.skill_name, shortfall.importance)
            frequency[shortfall.skill_name] += 1
        for weak_skill in result.weak_skills:
            weak.add(weak_skill.skill_name, weak_skill.improvement_priority)
            frequency[weak_skill.skill_name] += 1
        posting = postings[record.job_id]
        rows.append(
            TrendJobRow(
                job_id=posting.id,
                job_title=posting.title,
                company_name=posting.company,
                industry=posting.industry,
                overall_gap_score=result.overall_gap_score,
                analysis_date=record.analysis_date,
                counts=SkillCounts.of(result),
            )
        )

    total_jobs = len(records)
    mean = sum(_skills_gap(record).overall_gap_score for record in records) / total_jobs
    logger.info("Built skills-gap trends for user %s over %s jobs", user_key, total_jobs)
    return TrendsView(
        total_jobs=total_jobs,
        average_gap_score=int(round_half_up(mean)),
        jobs=tuple(rows),
        common_missing_skills=missing.top(total_jobs=total_jobs, label_key="importance"),
        common_weak_skills=weak.top(total_jobs=total_jobs, label_key="priority"),
        skill_frequency=dict(frequency),
    )
