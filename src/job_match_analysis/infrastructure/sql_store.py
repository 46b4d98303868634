"""SQLAlchemy implementation of the analysis store.

Usage example:
    from job_match_analysis.infrastructure.db import (
        build_engine,
        build_session_factory,
        create_schema,
    )
    from job_match_analysis.infrastructure.sql_store import SqlAnalysisStore

    engine = build_engine("sqlite:///data/match_analysis.sqlite3")
    create_schema(engine)
    store = SqlAnalysisStore(session_factory=build_session_factory(engine))
    latest = store.get_latest("job-match", job_id, user_id)
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import override

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from ..domain.analysis import (
    INTERVIEW_INSIGHTS,
    JOB_MATCH,
    SKILLS_GAP,
    AnalysisHistory,
    AnalysisKind,
    AnalysisRecord,
)
from ..domain.weights import WeightSet
from ..observability import get_logger
from ..protocols import AnalysisStore
from .db.engine import transaction
from .db.models import (
    InterviewInsightsRow,
    JobMatchAnalysisRow,
    SkillsGapAnalysisRow,
    SkillsGapSnapshotRow,
)
from .io import parse_stored_result, parse_stored_weights, result_to_payload

logger = get_logger("job_match_analysis.infrastructure.sql_store")

CurrentRow = SkillsGapAnalysisRow | InterviewInsightsRow


def as_utc(value: datetime) -> datetime:
    """SQLite drops tzinfo on read; stored datetimes are always UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _current_model(kind: AnalysisKind) -> type[CurrentRow]:
    if kind == SKILLS_GAP:
        return SkillsGapAnalysisRow
    if kind == INTERVIEW_INSIGHTS:
        return InterviewInsightsRow
    raise ValueError(f"{kind} analyses have no current-row table")


@dataclass
class SqlAnalysisStore(AnalysisStore):
    """Analysis store backed by a relational database.

    Every public method runs in its own transaction; SQLAlchemy failures are
    re-raised as ``StoreError``.
    """

    session_factory: sessionmaker[Session]
    default_weights: WeightSet = field(default_factory=WeightSet)

    # -- row conversion -----------------------------------------------------

    def _job_match_record(self, row: JobMatchAnalysisRow) -> AnalysisRecord:
        weights = None
        if row.weights_used is not None:
            weights = parse_stored_weights(row.weights_used, fallback=self.default_weights)
        return AnalysisRecord(
            id=row.id,
            kind=JOB_MATCH,
            job_id=row.job_id,
            user_id=row.user_id,
            analysis_date=as_utc(row.analysis_date),
            result=parse_stored_result(JOB_MATCH, row.result),
            weights_used=weights,
        )

    def _current_record(self, kind: AnalysisKind, row: CurrentRow) -> AnalysisRecord:
        return AnalysisRecord(
            id=row.id,
            kind=kind,
            job_id=row.job_id,
            user_id=row.user_id,
            analysis_date=as_utc(row.analysis_date),
            result=parse_stored_result(kind, row.result),
        )

    def _snapshot_record(self, row: SkillsGapSnapshotRow) -> AnalysisRecord:
        return AnalysisRecord(
            id=row.id,
            kind=SKILLS_GAP,
            job_id=row.job_id,
            user_id=row.user_id,
            analysis_date=as_utc(row.snapshot_date),
            result=parse_stored_result(SKILLS_GAP, row.result),
        )

    # -- reads --------------------------------------------------------------

    @override
    def get_latest(self, kind: AnalysisKind, job_id: str, user_id: str) -> AnalysisRecord | None:
        with transaction(self.session_factory, "get_latest") as session:
            if kind == JOB_MATCH:
                row = session.execute(
                    select(JobMatchAnalysisRow)
                    .where(
                        JobMatchAnalysisRow.job_id == job_id,
                        JobMatchAnalysisRow.user_id == user_id,
                    )
                    .order_by(
                        JobMatchAnalysisRow.analysis_date.desc(),
                        JobMatchAnalysisRow.seq.desc(),
                    )
                    .limit(1)
                ).scalar_one_or_none()
                return None if row is None else self._job_match_record(row)

            model = _current_model(kind)
            current = session.execute(
                select(model).where(model.job_id == job_id, model.user_id == user_id)
            ).scalar_one_or_none()
            return None if current is None else self._current_record(kind, current)

    @override
    def list_history(
        self,
        kind: AnalysisKind,
        job_id: str,
        user_id: str,
        limit: int | None = None,
    ) -> AnalysisHistory:
        with transaction(self.session_factory, "list_history") as session:
            if kind == JOB_MATCH:
                stmt = (
                    select(JobMatchAnalysisRow)
                    .where(
                        JobMatchAnalysisRow.job_id == job_id,
                        JobMatchAnalysisRow.user_id == user_id,
                    )
                    .order_by(
                        JobMatchAnalysisRow.analysis_date.desc(),
                        JobMatchAnalysisRow.seq.desc(),
                    )
                )
                if limit is not None:
                    stmt = stmt.limit(limit)
                rows = session.execute(stmt).scalars().all()
                return AnalysisHistory(entries=tuple(self._job_match_record(row) for row in rows))

            if kind == SKILLS_GAP:
                snapshot_stmt = (
                    select(SkillsGapSnapshotRow)
                    .where(
                        SkillsGapSnapshotRow.job_id == job_id,
                        SkillsGapSnapshotRow.user_id == user_id,
                    )
                    .order_by(
                        SkillsGapSnapshotRow.snapshot_date.desc(),
                        SkillsGapSnapshotRow.seq.desc(),
                    )
                )
                if limit is not None:
                    snapshot_stmt = snapshot_stmt.limit(limit)
                snapshots = session.execute(snapshot_stmt).scalars().all()
                return AnalysisHistory(
                    entries=tuple(self._snapshot_record(row) for row in snapshots)
                )

            current = session.execute(
                select(InterviewInsightsRow).where(
                    InterviewInsightsRow.job_id == job_id,
                    InterviewInsightsRow.user_id == user_id,
                )
            ).scalar_one_or_none()
            if current is None or limit == 0:
                return AnalysisHistory()
            return AnalysisHistory(entries=(self._current_record(kind, current),))

    @override
    def list_for_user(self, kind: AnalysisKind, user_id: str) -> list[AnalysisRecord]:
        with transaction(self.session_factory, "list_for_user") as session:
            if kind == JOB_MATCH:
                rows = (
                    session.execute(
                        select(JobMatchAnalysisRow)
                        .where(JobMatchAnalysisRow.user_id == user_id)
                        .order_by(
                            JobMatchAnalysisRow.analysis_date.desc(),
                            JobMatchAnalysisRow.seq.desc(),
                        )
                    )
                    .scalars()
                    .all()
                )
                latest_by_job: dict[str, JobMatchAnalysisRow] = {}
                for row in rows:
                    latest_by_job.setdefault(row.job_id, row)
                return [self._job_match_record(row) for row in latest_by_job.values()]

            model = _current_model(kind)
            current_rows = (
                session.execute(
                    select(model)
                    .where(model.user_id == user_id)
                    .order_by(model.analysis_date.desc(), model.seq.desc())
                )
                .scalars()
                .all()
            )
            return [self._current_record(kind, row) for row in current_rows]

    # -- writes -------------------------------------------------------------

    @override
    def insert(self, record: AnalysisRecord) -> None:
        if record.kind != JOB_MATCH:
            raise ValueError(f"insert() appends job-match records only, got {record.kind}")
        with transaction(self.session_factory, "insert") as session:
            session.add(
                JobMatchAnalysisRow(
                    id=record.id,
                    job_id=record.job_id,
                    user_id=record.user_id,
                    analysis_date=record.analysis_date,
                    result=result_to_payload(record.result),
                    weights_used=None
                    if record.weights_used is None
                    else record.weights_used.to_payload(),
                )
            )
        logger.info("Appended job-match analysis %s for job %s", record.id, record.job_id)

    @override
    def upsert_current(self, record: AnalysisRecord) -> None:
        model = _current_model(record.kind)
        payload = result_to_payload(record.result)
        with transaction(self.session_factory, "upsert_current") as session:
            current = session.execute(
                select(model).where(
                    model.job_id == record.job_id,
                    model.user_id == record.user_id,
                )
            ).scalar_one_or_none()
            if current is None:
                session.add(
                    model(
                        id=record.id,
                        job_id=record.job_id,
                        user_id=record.user_id,
                        analysis_date=record.analysis_date,
                        result=payload,
                    )
                )
            else:
                current.id = record.id
                current.analysis_date = record.analysis_date
                current.result = payload

            if record.kind == SKILLS_GAP:
                session.add(
                    SkillsGapSnapshotRow(
                        id=uuid.uuid4().hex,
                        job_id=record.job_id,
                        user_id=record.user_id,
                        snapshot_date=record.analysis_date,
                        result=payload,
                    )
                )
        logger.info(
            "Upserted current %s analysis %s for job %s", record.kind, record.id, record.job_id
        )
