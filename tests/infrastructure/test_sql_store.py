"""Tests for the SQLAlchemy analysis store against SQLite."""

from datetime import timedelta

import pytest
from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from job_match_analysis.domain.analysis import (
    INTERVIEW_INSIGHTS,
    JOB_MATCH,
    SKILLS_GAP,
    AnalysisRecord,
    InterviewInsightsResult,
    JobMatchResult,
)
from job_match_analysis.domain.weights import WeightSet
from job_match_analysis.exceptions import StoreError
from job_match_analysis.infrastructure.db import JobMatchAnalysisRow, SkillsGapSnapshotRow
from job_match_analysis.infrastructure.sql_store import SqlAnalysisStore
from tests.support.builders import (
    FIXED_NOW,
    USER_ID,
    job_match_record,
    skills_gap_record,
)


@pytest.fixture
def store(session_factory: sessionmaker[Session]) -> SqlAnalysisStore:
    return SqlAnalysisStore(session_factory=session_factory)


class TestJobMatchHistory:
    def test_insert_appends_and_latest_is_newest(self, store: SqlAnalysisStore) -> None:
        older = job_match_record("job-1", 40, analysis_date=FIXED_NOW - timedelta(hours=3))
        newer = job_match_record("job-1", 80, weights=WeightSet(skills=2.0))
        store.insert(newer)
        store.insert(older)

        latest = store.get_latest(JOB_MATCH, "job-1", USER_ID)
        history = store.list_history(JOB_MATCH, "job-1", USER_ID)

        assert latest is not None
        assert latest.id == newer.id
        assert latest.analysis_date == FIXED_NOW
        assert latest.weights_used == WeightSet(skills=2.0)
        assert [record.id for record in history] == [newer.id, older.id]

    def test_equal_timestamps_prefer_later_insert(self, store: SqlAnalysisStore) -> None:
        first = job_match_record("job-1", 40)
        second = job_match_record("job-1", 50)
        store.insert(first)
        store.insert(second)

        latest = store.get_latest(JOB_MATCH, "job-1", USER_ID)

        assert latest is not None
        assert latest.id == second.id

    def test_result_round_trips(self, store: SqlAnalysisStore) -> None:
        record = job_match_record("job-1", 72.5)
        store.insert(record)

        loaded = store.get_latest(JOB_MATCH, "job-1", USER_ID)

        assert loaded is not None
        assert isinstance(loaded.result, JobMatchResult)
        assert loaded.result == record.result

    def test_history_limit(self, store: SqlAnalysisStore) -> None:
        for hours in range(5):
            analysis_date = FIXED_NOW + timedelta(hours=hours)
            store.insert(job_match_record("job-1", 50 + hours, analysis_date=analysis_date))

        history = store.list_history(JOB_MATCH, "job-1", USER_ID, limit=2)

        assert [record.score for record in history] == [54, 53]

    def test_list_for_user_returns_latest_per_job(self, store: SqlAnalysisStore) -> None:
        store.insert(job_match_record("job-1", 40, analysis_date=FIXED_NOW - timedelta(days=1)))
        store.insert(job_match_record("job-1", 60))
        store.insert(job_match_record("job-2", 70))
        store.insert(job_match_record("job-3", 90, user_id="someone-else"))

        records = store.list_for_user(JOB_MATCH, USER_ID)

        assert sorted((record.job_id, record.score) for record in records) == [
            ("job-1", 60),
            ("job-2", 70),
        ]

    def test_damaged_weights_blob_reads_as_none(
        self, store: SqlAnalysisStore, session_factory: sessionmaker[Session]
    ) -> None:
        record = job_match_record("job-1", 60)
        store.insert(record)
        with session_factory.begin() as session:
            row = session.execute(select(JobMatchAnalysisRow)).scalar_one()
            row.weights_used = {"skills": "heavy"}

        loaded = store.get_latest(JOB_MATCH, "job-1", USER_ID)

        assert loaded is not None
        assert loaded.weights_used is None

    def test_insert_rejects_other_kinds(self, store: SqlAnalysisStore) -> None:
        with pytest.raises(ValueError, match="job-match"):
            store.insert(skills_gap_record("job-1", 40))


class TestCurrentRows:
    def test_skills_gap_upsert_replaces_current_and_keeps_snapshots(
        self, store: SqlAnalysisStore, session_factory: sessionmaker[Session]
    ) -> None:
        first = skills_gap_record("job-1", 30, analysis_date=FIXED_NOW - timedelta(days=2))
        second = skills_gap_record("job-1", 55)
        store.upsert_current(first)
        store.upsert_current(second)

        current = store.get_latest(SKILLS_GAP, "job-1", USER_ID)
        history = store.list_history(SKILLS_GAP, "job-1", USER_ID)

        assert current is not None
        assert current.id == second.id
        assert [record.score for record in history] == [55, 30]
        with session_factory() as session:
            snapshot_count = len(session.execute(select(SkillsGapSnapshotRow)).scalars().all())
        assert snapshot_count == 2

    def test_interview_insights_keep_only_current(self, store: SqlAnalysisStore) -> None:
        for score, days_ago in (("first", 3), ("second", 0)):
            store.upsert_current(
                AnalysisRecord(
                    id=f"insight-{score}",
                    kind=INTERVIEW_INSIGHTS,
                    job_id="job-1",
                    user_id=USER_ID,
                    analysis_date=FIXED_NOW - timedelta(days=days_ago),
                    result=InterviewInsightsResult(),
                )
            )

        history = store.list_history(INTERVIEW_INSIGHTS, "job-1", USER_ID)

        assert [record.id for record in history] == ["insight-second"]

    def test_list_for_user_orders_current_rows_newest_first(
        self, store: SqlAnalysisStore
    ) -> None:
        store.upsert_current(
            skills_gap_record("job-1", 30, analysis_date=FIXED_NOW - timedelta(days=1))
        )
        store.upsert_current(skills_gap_record("job-2", 50))

        records = store.list_for_user(SKILLS_GAP, USER_ID)

        assert [record.job_id for record in records] == ["job-2", "job-1"]

    def test_missing_pair_reads_as_none_and_empty(self, store: SqlAnalysisStore) -> None:
        assert store.get_latest(SKILLS_GAP, "job-1", USER_ID) is None
        assert len(store.list_history(SKILLS_GAP, "job-1", USER_ID)) == 0


def test_duplicate_record_id_raises_store_error(store: SqlAnalysisStore) -> None:
    record = job_match_record("job-1", 60)
    store.insert(record)

    with pytest.raises(StoreError, match="insert"):
        store.insert(record)

    assert len(store.list_history(JOB_MATCH, "job-1", USER_ID)) == 1
