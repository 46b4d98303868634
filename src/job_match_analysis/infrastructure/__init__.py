"""Concrete infrastructure implementations of the engine protocols."""

from .filesystem import LocalFileSystem
from .scoring_http import RequestsScoringOracle
from .sql_repositories import SqlJobDirectory, SqlPreferenceStore, SqlProfileSource
from .sql_store import SqlAnalysisStore

__all__ = [
    "LocalFileSystem",
    "RequestsScoringOracle",
    "SqlAnalysisStore",
    "SqlJobDirectory",
    "SqlPreferenceStore",
    "SqlProfileSource",
]
