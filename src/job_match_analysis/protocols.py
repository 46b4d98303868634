"""Protocol definitions for dependency injection.

These protocols define the abstract interfaces that engine components depend on,
enabling isolated unit testing with in-memory implementations.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Protocol, runtime_checkable

from .domain.analysis import (
    AnalysisHistory,
    AnalysisKind,
    AnalysisRecord,
    CandidateProfile,
    JobPosting,
    ScoringRequest,
)
from .domain.weights import WeightSet


@runtime_checkable
class ScoringOracle(Protocol):
    """External scoring function (an LLM-backed service in production)."""

    def score(self, request: ScoringRequest) -> Mapping[str, object]:
        """Score a candidate profile against a job posting.

        Returns:
            The raw oracle payload for ``request.kind``.

        Raises:
            Exception: Any failure; the scoring gateway converts it.
        """
        ...


@runtime_checkable
class AnalysisStore(Protocol):
    """Durable record store for analyses."""

    def get_latest(self, kind: AnalysisKind, job_id: str, user_id: str) -> AnalysisRecord | None:
        """Return the most recent (current) record for the pair, if any."""
        ...

    def insert(self, record: AnalysisRecord) -> None:
        """Append a record (job-match history is append-only)."""
        ...

    def upsert_current(self, record: AnalysisRecord) -> None:
        """Replace the current record for the pair.

        For skills-gap records the store must also append an immutable history
        snapshot in the same transaction.
        """
        ...

    def list_history(
        self,
        kind: AnalysisKind,
        job_id: str,
        user_id: str,
        limit: int | None = None,
    ) -> AnalysisHistory:
        """Return historical records for the pair, newest first."""
        ...

    def list_for_user(self, kind: AnalysisKind, user_id: str) -> list[AnalysisRecord]:
        """Return the latest record of each job for the user."""
        ...


@runtime_checkable
class JobDirectory(Protocol):
    """Read access to the user's job opportunities."""

    def get_job(self, job_id: str, user_id: str) -> JobPosting | None:
        """Return the job when it exists and belongs to the user."""
        ...

    def list_jobs(self, user_id: str, status: str | None = None) -> list[JobPosting]:
        """List the user's jobs, optionally filtered by lifecycle status."""
        ...


@runtime_checkable
class ProfileSource(Protocol):
    """Read access to candidate profiles."""

    def get_profile(self, user_id: str) -> CandidateProfile | None:
        """Return the user's profile, or None if they have not created one."""
        ...


@runtime_checkable
class PreferenceStore(Protocol):
    """Saved job-match weighting preferences."""

    def get_weights(self, user_id: str) -> WeightSet | None:
        """Return the user's saved weights, if any."""
        ...

    def save_weights(self, user_id: str, weights: WeightSet) -> None:
        """Persist the user's weights."""
        ...


@runtime_checkable
class FileSystem(Protocol):
    """Abstract filesystem for config files and exports."""

    def read_text(self, path: Path) -> str:
        """Read text file."""
        ...

    def write_text(self, content: str, path: Path) -> None:
        """Write text file."""
        ...

    def exists(self, path: Path) -> bool:
        """Check if path exists."""
        ...
