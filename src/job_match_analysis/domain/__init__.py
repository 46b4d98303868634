"""Domain modules for the analysis engine."""

from .analysis import (
    ANALYSIS_KINDS,
    INTERVIEW_INSIGHTS,
    JOB_MATCH,
    SKILLS_GAP,
    AnalysisHistory,
    AnalysisKind,
    AnalysisRecord,
    AnalysisResult,
)
from .freshness import CacheDecision, FreshnessWindows, decide_cache
from .weights import WeightModel, WeightSet, weights_equal

__all__ = [
    "ANALYSIS_KINDS",
    "INTERVIEW_INSIGHTS",
    "JOB_MATCH",
    "SKILLS_GAP",
    "AnalysisHistory",
    "AnalysisKind",
    "AnalysisRecord",
    "AnalysisResult",
    "CacheDecision",
    "FreshnessWindows",
    "WeightModel",
    "WeightSet",
    "decide_cache",
    "weights_equal",
]
