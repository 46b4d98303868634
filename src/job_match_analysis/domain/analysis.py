"""Domain model for stored analyses.

Analysis results form a tagged union keyed by analysis kind. Records wrap a
result with its identity, timestamp and (for job-match) the weights that
produced it. ``AnalysisHistory`` fixes the ordering contract for history reads:
entries are always newest first.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import ClassVar, Literal

from .weights import WeightSet

AnalysisKind = Literal["job-match", "skills-gap", "interview-insights"]

JOB_MATCH: AnalysisKind = "job-match"
SKILLS_GAP: AnalysisKind = "skills-gap"
INTERVIEW_INSIGHTS: AnalysisKind = "interview-insights"
ANALYSIS_KINDS: tuple[AnalysisKind, ...] = (JOB_MATCH, SKILLS_GAP, INTERVIEW_INSIGHTS)

# Ranking used when a single "top" gap has to be chosen.
IMPACT_RANK = {"high": 0, "medium": 1, "low": 2}


# ---------------------------------------------------------------------------
# Job-match results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CategoryScores:
    """Per-category match scores (0-100)."""

    skills: float = 0.0
    experience: float = 0.0
    education: float = 0.0
    requirements: float = 0.0


@dataclass(frozen=True)
class Strength:
    category: str
    description: str
    evidence: tuple[str, ...] = ()


@dataclass(frozen=True)
class Gap:
    category: str
    description: str
    impact: str
    suggestions: tuple[str, ...] = ()


@dataclass(frozen=True)
class ImprovementSuggestion:
    type: str
    title: str
    description: str
    priority: str


@dataclass(frozen=True)
class MatchedSkill:
    skill_name: str
    relevance: float


@dataclass(frozen=True)
class MissingSkill:
    skill_name: str
    importance: float


@dataclass(frozen=True)
class JobMatchResult:
    """Oracle output for a job-match analysis."""

    kind: ClassVar[AnalysisKind] = JOB_MATCH

    overall_score: float
    category_scores: CategoryScores
    strengths: tuple[Strength, ...] = ()
    gaps: tuple[Gap, ...] = ()
    improvement_suggestions: tuple[ImprovementSuggestion, ...] = ()
    matched_skills: tuple[MatchedSkill, ...] = ()
    missing_skills: tuple[MissingSkill, ...] = ()

    @property
    def score(self) -> float:
        return self.overall_score

    def top_strength(self) -> Strength | None:
        """Strengths arrive ranked by the oracle; the first is the strongest."""
        return self.strengths[0] if self.strengths else None

    def top_gap(self) -> Gap | None:
        """Return the highest-impact gap, keeping oracle order on ties."""
        if not self.gaps:
            return None
        unranked = len(IMPACT_RANK)
        return min(self.gaps, key=lambda gap: IMPACT_RANK.get(gap.impact.lower(), unranked))


# ---------------------------------------------------------------------------
# Skills-gap results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SkillMatch:
    skill_name: str
    user_proficiency: str
    job_requirement: str
    match_strength: str


@dataclass(frozen=True)
class SkillShortfall:
    """A skill the job needs that the candidate does not list."""

    skill_name: str
    importance: str
    impact: float
    estimated_learning_time: str


@dataclass(frozen=True)
class WeakSkill:
    skill_name: str
    current_proficiency: str
    recommended_proficiency: str
    improvement_priority: str


@dataclass(frozen=True)
class LearningStep:
    skill_name: str
    priority: int
    reason: str
    estimated_time: str


@dataclass(frozen=True)
class SkillsGapResult:
    """Oracle output for a skills-gap analysis."""

    kind: ClassVar[AnalysisKind] = SKILLS_GAP

    overall_gap_score: float
    matched_skills: tuple[SkillMatch, ...] = ()
    missing_skills: tuple[SkillShortfall, ...] = ()
    weak_skills: tuple[WeakSkill, ...] = ()
    learning_resources: tuple[MappingProxyType[str, object], ...] = ()
    prioritized_learning_path: tuple[LearningStep, ...] = ()

    @property
    def score(self) -> float:
        return self.overall_gap_score


# ---------------------------------------------------------------------------
# Interview insights
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InterviewInsightsResult:
    """Opaque interview-preparation payload; not weight-parameterised."""

    kind: ClassVar[AnalysisKind] = INTERVIEW_INSIGHTS

    payload: MappingProxyType[str, object] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @property
    def score(self) -> float | None:
        return None


AnalysisResult = JobMatchResult | SkillsGapResult | InterviewInsightsResult


# ---------------------------------------------------------------------------
# Inputs owned by the CRUD side of the system
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class JobPosting:
    id: str
    user_id: str
    title: str
    company: str = ""
    status: str | None = None
    industry: str = ""
    description: str = ""


@dataclass(frozen=True)
class ProfileSkill:
    skill_name: str
    proficiency_level: str = ""


@dataclass(frozen=True)
class ProfileExperience:
    position_title: str
    company_name: str = ""
    description: str = ""


@dataclass(frozen=True)
class ProfileEducation:
    degree_type: str
    major: str = ""


@dataclass(frozen=True)
class CandidateProfile:
    """Candidate data sent to the scoring oracle."""

    user_id: str
    skills: tuple[ProfileSkill, ...] = ()
    experience: tuple[ProfileExperience, ...] = ()
    education: tuple[ProfileEducation, ...] = ()


@dataclass(frozen=True)
class ScoringRequest:
    """Normalised input handed to the scoring oracle."""

    kind: AnalysisKind
    profile: CandidateProfile
    posting: JobPosting
    weights: WeightSet | None = None


# ---------------------------------------------------------------------------
# Records and history
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AnalysisRecord:
    """One stored analysis instance for a (job, user) pair."""

    id: str
    kind: AnalysisKind
    job_id: str
    user_id: str
    analysis_date: datetime
    result: AnalysisResult
    weights_used: WeightSet | None = None

    @property
    def score(self) -> float | None:
        return self.result.score


@dataclass(frozen=True)
class AnalysisHistory:
    """Historical records for one pair, ordered newest first.

    Use ``latest`` / ``earliest`` rather than indexing; both are None when the
    history is empty and the same record when it holds a single entry.
    """

    entries: tuple[AnalysisRecord, ...] = ()

    @property
    def latest(self) -> AnalysisRecord | None:
        return self.entries[0] if self.entries else None

    @property
    def earliest(self) -> AnalysisRecord | None:
        return self.entries[-1] if self.entries else None

    def limited(self, limit: int) -> AnalysisHistory:
        return AnalysisHistory(entries=self.entries[:limit])

    def __iter__(self) -> Iterator[AnalysisRecord]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __bool__(self) -> bool:
        return bool(self.entries)
