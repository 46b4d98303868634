"""Exports for test fakes."""

from .directory import InMemoryJobDirectory, InMemoryPreferenceStore, InMemoryProfileSource
from .filesystem import InMemoryFileSystem
from .oracle import FakeScoringOracle
from .store import InMemoryAnalysisStore

__all__ = [
    "FakeScoringOracle",
    "InMemoryAnalysisStore",
    "InMemoryFileSystem",
    "InMemoryJobDirectory",
    "InMemoryPreferenceStore",
    "InMemoryProfileSource",
]
