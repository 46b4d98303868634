"""Tests for the SQL job directory, profile source and preference store."""

from datetime import UTC, datetime

from sqlalchemy.orm import Session, sessionmaker

from job_match_analysis.domain.weights import WeightSet
from job_match_analysis.infrastructure.db import (
    CandidateProfileRow,
    JobMatchPreferenceRow,
    JobOpportunityRow,
)
from job_match_analysis.infrastructure.sql_repositories import (
    SqlJobDirectory,
    SqlPreferenceStore,
    SqlProfileSource,
)
from tests.support.builders import FIXED_NOW, USER_ID


def _seed_jobs(session_factory: sessionmaker[Session]) -> None:
    with session_factory.begin() as session:
        session.add_all(
            [
                JobOpportunityRow(
                    id="job-1", user_id=USER_ID, title="Backend Engineer", status="applied"
                ),
                JobOpportunityRow(
                    id="job-2",
                    user_id=USER_ID,
                    title="Data Engineer",
                    company="Globex",
                    status="interviewing",
                    industry="Finance",
                ),
                JobOpportunityRow(id="job-3", user_id="someone-else", title="Designer"),
            ]
        )


def test_get_job_checks_ownership(session_factory: sessionmaker[Session]) -> None:
    _seed_jobs(session_factory)
    jobs = SqlJobDirectory(session_factory=session_factory)

    own = jobs.get_job("job-1", USER_ID)

    assert own is not None
    assert own.title == "Backend Engineer"
    assert own.company == ""
    assert jobs.get_job("job-3", USER_ID) is None
    assert jobs.get_job("job-404", USER_ID) is None


def test_list_jobs_filters_by_status(session_factory: sessionmaker[Session]) -> None:
    _seed_jobs(session_factory)
    jobs = SqlJobDirectory(session_factory=session_factory)

    assert [posting.id for posting in jobs.list_jobs(USER_ID)] == ["job-1", "job-2"]
    interviewing = jobs.list_jobs(USER_ID, status="interviewing")
    assert [(posting.id, posting.industry) for posting in interviewing] == [("job-2", "Finance")]


def test_profile_is_parsed_from_json(session_factory: sessionmaker[Session]) -> None:
    with session_factory.begin() as session:
        session.add(
            CandidateProfileRow(
                user_id=USER_ID,
                profile={
                    "skills": [
                        {"skillName": "Python", "proficiencyLevel": "expert"},
                        {"skillName": ""},
                        "garbage",
                    ],
                    "education": [{"degreeType": "BSc", "major": "Physics"}],
                },
            )
        )
    profiles = SqlProfileSource(session_factory=session_factory)

    profile = profiles.get_profile(USER_ID)

    assert profile is not None
    assert [skill.skill_name for skill in profile.skills] == ["Python"]
    assert profile.education[0].major == "Physics"
    assert profile.experience == ()
    assert profiles.get_profile("nobody") is None


def test_preferences_save_and_update(session_factory: sessionmaker[Session]) -> None:
    preferences = SqlPreferenceStore(session_factory=session_factory, now_fn=lambda: FIXED_NOW)

    assert preferences.get_weights(USER_ID) is None

    preferences.save_weights(USER_ID, WeightSet(skills=2.0))
    preferences.save_weights(USER_ID, WeightSet(education=0.5))

    assert preferences.get_weights(USER_ID) == WeightSet(education=0.5)
    with session_factory() as session:
        row = session.get(JobMatchPreferenceRow, USER_ID)
        assert row is not None
        assert row.updated_at.replace(tzinfo=UTC) == datetime(2026, 3, 2, 12, tzinfo=UTC)


def test_damaged_preference_reads_as_none(session_factory: sessionmaker[Session]) -> None:
    with session_factory.begin() as session:
        session.add(
            JobMatchPreferenceRow(user_id=USER_ID, weights={"skills": -3}, updated_at=FIXED_NOW)
        )
    preferences = SqlPreferenceStore(session_factory=session_factory)

    assert preferences.get_weights(USER_ID) is None
