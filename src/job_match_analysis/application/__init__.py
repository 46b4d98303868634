"""Application services: get-or-compute, aggregation and export."""

from .analysis_service import AnalysisService
from .engine import MatchAnalysisEngine
from .scoring_gateway import ScoringGateway
from .views import AnalysisOutcome

__all__ = [
    "AnalysisOutcome",
    "AnalysisService",
    "MatchAnalysisEngine",
    "ScoringGateway",
]
