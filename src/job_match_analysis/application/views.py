"""Read-side views returned by the engine.

Views are derived from stored records on every call and never persisted.
Each view renders the camelCase payload callers (an HTTP layer, the CLI's
``--json`` output) expect via ``to_payload()``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType

from ..domain.analysis import (
    AnalysisKind,
    AnalysisResult,
    CategoryScores,
    Gap,
    JobPosting,
    SkillsGapResult,
    Strength,
)
from ..domain.weights import WeightSet
from ..infrastructure.io import result_to_payload


def format_timestamp(value: datetime) -> str:
    """ISO 8601 in UTC with a ``Z`` suffix and millisecond precision."""
    utc = value.astimezone(UTC) if value.tzinfo else value.replace(tzinfo=UTC)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _weights_payload(weights: WeightSet | None) -> dict[str, object]:
    return {} if weights is None else {"weightsUsed": weights.to_payload()}


# ---------------------------------------------------------------------------
# Compute
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AnalysisOutcome:
    """Result of ``get_or_compute``: the analysis plus how it was obtained."""

    record_id: str
    kind: AnalysisKind
    job_id: str
    result: AnalysisResult
    cached: bool
    analysis_date: datetime
    weights_used: WeightSet | None = None

    def to_payload(self) -> dict[str, object]:
        return {
            "id": self.record_id,
            "kind": self.kind,
            "jobId": self.job_id,
            "result": result_to_payload(self.result),
            "cached": self.cached,
            "analysisDate": format_timestamp(self.analysis_date),
            **_weights_payload(self.weights_used),
        }


@dataclass(frozen=True)
class PreferencesView:
    weights: WeightSet
    default_weights: WeightSet
    is_custom: bool

    def to_payload(self) -> dict[str, object]:
        return {
            "weights": self.weights.to_payload(),
            "defaultWeights": self.default_weights.to_payload(),
            "isCustom": self.is_custom,
        }


# ---------------------------------------------------------------------------
# Job-match history and comparison
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class JobSummary:
    id: str
    title: str
    company: str
    status: str | None = None
    industry: str = ""

    @classmethod
    def from_posting(cls, posting: JobPosting) -> JobSummary:
        return cls(
            id=posting.id,
            title=posting.title,
            company=posting.company,
            status=posting.status,
            industry=posting.industry,
        )

    def to_payload(self) -> dict[str, object]:
        return {
            "id": self.id,
            "title": self.title,
            "company": self.company,
            "status": self.status,
            "industry": self.industry,
        }


@dataclass(frozen=True)
class HistoryEntry:
    id: str
    analysis_date: datetime
    overall_match_score: float
    category_scores: CategoryScores
    strengths: tuple[Strength, ...]
    gaps: tuple[Gap, ...]
    weights_used: WeightSet | None = None

    def to_payload(self) -> dict[str, object]:
        scores = self.category_scores
        return {
            "id": self.id,
            "analysisDate": format_timestamp(self.analysis_date),
            "overallMatchScore": self.overall_match_score,
            "categoryScores": {
                "skills": scores.skills,
                "experience": scores.experience,
                "education": scores.education,
                "requirements": scores.requirements,
            },
            "strengths": [
                {
                    "category": strength.category,
                    "description": strength.description,
                    "evidence": list(strength.evidence),
                }
                for strength in self.strengths
            ],
            "gaps": [
                {
                    "category": gap.category,
                    "description": gap.description,
                    "impact": gap.impact,
                    "suggestions": list(gap.suggestions),
                }
                for gap in self.gaps
            ],
            **_weights_payload(self.weights_used),
        }


@dataclass(frozen=True)
class HistoryView:
    job: JobSummary
    entries: tuple[HistoryEntry, ...] = ()

    def to_payload(self) -> dict[str, object]:
        return {
            "job": self.job.to_payload(),
            "entries": [entry.to_payload() for entry in self.entries],
        }


@dataclass(frozen=True)
class ComparisonRow:
    job_id: str
    title: str
    company: str
    status: str | None
    latest_score: float
    analysis_date: datetime
    weights_used: WeightSet | None = None

    def to_payload(self) -> dict[str, object]:
        return {
            "jobId": self.job_id,
            "title": self.title,
            "company": self.company,
            "status": self.status,
            "latestScore": self.latest_score,
            "analysisDate": format_timestamp(self.analysis_date),
            **_weights_payload(self.weights_used),
        }


# ---------------------------------------------------------------------------
# Skills-gap progress and trends
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SkillCounts:
    matched: int = 0
    missing: int = 0
    weak: int = 0

    @classmethod
    def of(cls, result: SkillsGapResult) -> SkillCounts:
        return cls(
            matched=len(result.matched_skills),
            missing=len(result.missing_skills),
            weak=len(result.weak_skills),
        )

    def to_payload(self) -> dict[str, object]:
        return {
            "matchedSkillsCount": self.matched,
            "missingSkillsCount": self.missing,
            "weakSkillsCount": self.weak,
        }


@dataclass(frozen=True)
class CurrentGapSummary:
    overall_gap_score: float
    analysis_date: datetime
    counts: SkillCounts

    def to_payload(self) -> dict[str, object]:
        return {
            "overallGapScore": self.overall_gap_score,
            "analysisDate": format_timestamp(self.analysis_date),
            **self.counts.to_payload(),
        }


@dataclass(frozen=True)
class ProgressSnapshot:
    id: str
    overall_gap_score: float
    snapshot_date: datetime
    counts: SkillCounts

    def to_payload(self) -> dict[str, object]:
        return {
            "id": self.id,
            "overallGapScore": self.overall_gap_score,
            "snapshotDate": format_timestamp(self.snapshot_date),
            **self.counts.to_payload(),
        }


@dataclass(frozen=True)
class ProgressMetrics:
    first_score: float
    latest_score: float
    score_improvement: float
    total_snapshots: int
    time_span_days: int

    def to_payload(self) -> dict[str, object]:
        return {
            "firstScore": self.first_score,
            "latestScore": self.latest_score,
            "scoreImprovement": self.score_improvement,
            "totalSnapshots": self.total_snapshots,
            "timeSpanDays": self.time_span_days,
        }


@dataclass(frozen=True)
class ProgressView:
    """Skills-gap progress for one job. History is newest first."""

    job_id: str
    job_title: str
    company_name: str
    current: CurrentGapSummary | None
    history: tuple[ProgressSnapshot, ...]
    metrics: ProgressMetrics | None

    def to_payload(self) -> dict[str, object]:
        return {
            "jobId": self.job_id,
            "jobTitle": self.job_title,
            "companyName": self.company_name,
            "currentAnalysis": None if self.current is None else self.current.to_payload(),
            "history": [snapshot.to_payload() for snapshot in self.history],
            "progressMetrics": None if self.metrics is None else self.metrics.to_payload(),
        }


@dataclass(frozen=True)
class TrendJobRow:
    job_id: str
    job_title: str
    company_name: str
    industry: str
    overall_gap_score: float
    analysis_date: datetime
    counts: SkillCounts

    def to_payload(self) -> dict[str, object]:
        return {
            "jobId": self.job_id,
            "jobTitle": self.job_title,
            "companyName": self.company_name,
            "industry": self.industry,
            "overallGapScore": self.overall_gap_score,
            "analysisDate": format_timestamp(self.analysis_date),
            **self.counts.to_payload(),
        }


@dataclass(frozen=True)
class CommonSkill:
    """A skill name recurring across analyses, with the distinct labels seen for it.

    ``labels`` are importance labels for missing skills and improvement
    priorities for weak skills; ``label_key`` names them in the payload.
    """

    skill_name: str
    frequency: int
    percentage: int
    labels: tuple[str, ...]
    label_key: str

    def to_payload(self) -> dict[str, object]:
        return {
            "skillName": self.skill_name,
            "frequency": self.frequency,
            "percentage": self.percentage,
            self.label_key: list(self.labels),
        }


@dataclass(frozen=True)
class TrendsView:
    total_jobs: int = 0
    average_gap_score: int = 0
    jobs: tuple[TrendJobRow, ...] = ()
    common_missing_skills: tuple[CommonSkill, ...] = ()
    common_weak_skills: tuple[CommonSkill, ...] = ()
    skill_frequency: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))

    def to_payload(self) -> dict[str, object]:
        return {
            "totalJobs": self.total_jobs,
            "averageGapScore": self.average_gap_score,
            "jobs": [job.to_payload() for job in self.jobs],
            "commonMissingSkills": [skill.to_payload() for skill in self.common_missing_skills],
            "commonWeakSkills": [skill.to_payload() for skill in self.common_weak_skills],
            "skillFrequency": dict(self.skill_frequency),
        }
