"""SQL-backed read models for jobs and profiles, and the preference store.

Jobs and profiles are written by the CRUD side of the application; the engine
only reads them. Preferences are owned here.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import override

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from ..domain.analysis import CandidateProfile, JobPosting
from ..domain.weights import WeightSet
from ..observability import get_logger
from ..protocols import JobDirectory, PreferenceStore, ProfileSource
from .db.engine import transaction
from .db.models import CandidateProfileRow, JobMatchPreferenceRow, JobOpportunityRow
from .io import parse_profile_payload, parse_stored_weights

logger = get_logger("job_match_analysis.infrastructure.sql_repositories")


def _posting(row: JobOpportunityRow) -> JobPosting:
    return JobPosting(
        id=row.id,
        user_id=row.user_id,
        title=row.title,
        company=row.company or "",
        status=row.status,
        industry=row.industry or "",
        description=row.description or "",
    )


@dataclass
class SqlJobDirectory(JobDirectory):
    session_factory: sessionmaker[Session]

    @override
    def get_job(self, job_id: str, user_id: str) -> JobPosting | None:
        with transaction(self.session_factory, "get_job") as session:
            row = session.execute(
                select(JobOpportunityRow).where(
                    JobOpportunityRow.id == job_id,
                    JobOpportunityRow.user_id == user_id,
                )
            ).scalar_one_or_none()
            return None if row is None else _posting(row)

    @override
    def list_jobs(self, user_id: str, status: str | None = None) -> list[JobPosting]:
        stmt = select(JobOpportunityRow).where(JobOpportunityRow.user_id == user_id)
        if status is not None:
            stmt = stmt.where(JobOpportunityRow.status == status)
        with transaction(self.session_factory, "list_jobs") as session:
            rows = session.execute(stmt.order_by(JobOpportunityRow.id)).scalars().all()
            return [_posting(row) for row in rows]


@dataclass
class SqlProfileSource(ProfileSource):
    session_factory: sessionmaker[Session]

    @override
    def get_profile(self, user_id: str) -> CandidateProfile | None:
        with transaction(self.session_factory, "get_profile") as session:
            row = session.get(CandidateProfileRow, user_id)
            return None if row is None else parse_profile_payload(user_id, row.profile)


@dataclass
class SqlPreferenceStore(PreferenceStore):
    """Saved job-match weights, one row per user."""

    session_factory: sessionmaker[Session]
    default_weights: WeightSet = field(default_factory=WeightSet)
    now_fn: Callable[[], datetime] | None = None

    @override
    def get_weights(self, user_id: str) -> WeightSet | None:
        with transaction(self.session_factory, "get_weights") as session:
            row = session.get(JobMatchPreferenceRow, user_id)
            if row is None:
                return None
            return parse_stored_weights(row.weights, fallback=self.default_weights)

    @override
    def save_weights(self, user_id: str, weights: WeightSet) -> None:
        clock = self.now_fn or (lambda: datetime.now(UTC))
        with transaction(self.session_factory, "save_weights") as session:
            row = session.get(JobMatchPreferenceRow, user_id)
            if row is None:
                session.add(
                    JobMatchPreferenceRow(
                        user_id=user_id,
                        weights=weights.to_payload(),
                        updated_at=clock(),
                    )
                )
            else:
                row.weights = weights.to_payload()
                row.updated_at = clock()
        logger.info("Saved job-match preferences for user %s", user_id)
