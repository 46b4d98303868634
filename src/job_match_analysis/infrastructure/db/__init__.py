"""Database models and engine wiring."""

from .engine import build_engine, build_session_factory, create_schema, transaction
from .models import (
    Base,
    CandidateProfileRow,
    InterviewInsightsRow,
    JobMatchAnalysisRow,
    JobMatchPreferenceRow,
    JobOpportunityRow,
    SkillsGapAnalysisRow,
    SkillsGapSnapshotRow,
)

__all__ = [
    "Base",
    "CandidateProfileRow",
    "InterviewInsightsRow",
    "JobMatchAnalysisRow",
    "JobMatchPreferenceRow",
    "JobOpportunityRow",
    "SkillsGapAnalysisRow",
    "SkillsGapSnapshotRow",
    "build_engine",
    "build_session_factory",
    "create_schema",
    "transaction",
]
