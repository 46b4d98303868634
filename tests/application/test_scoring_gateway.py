"""Tests for oracle result validation at the gateway."""

import pytest

from job_match_analysis.application.scoring_gateway import ScoringGateway
from job_match_analysis.domain.analysis import (
    INTERVIEW_INSIGHTS,
    JOB_MATCH,
    SKILLS_GAP,
    CandidateProfile,
    InterviewInsightsResult,
    SkillsGapResult,
)
from job_match_analysis.domain.weights import WeightSet
from job_match_analysis.exceptions import ScoringUnavailable
from tests.fakes import FakeScoringOracle
from tests.support.builders import USER_ID, job_match_payload, posting, skills_gap_payload

PROFILE = CandidateProfile(user_id=USER_ID)
POSTING = posting("job-1")


def test_valid_job_match_payload_is_parsed() -> None:
    oracle = FakeScoringOracle(responses={JOB_MATCH: job_match_payload(82)})

    result = ScoringGateway(oracle=oracle).score(JOB_MATCH, PROFILE, POSTING, WeightSet())

    assert result.score == 82
    assert oracle.calls[0].weights == WeightSet()


def test_skills_gap_payload_is_parsed_without_weights() -> None:
    oracle = FakeScoringOracle(responses={SKILLS_GAP: skills_gap_payload(35)})

    result = ScoringGateway(oracle=oracle).score(
        SKILLS_GAP, PROFILE, POSTING, WeightSet(skills=2.0)
    )

    assert isinstance(result, SkillsGapResult)
    assert result.overall_gap_score == 35
    assert oracle.calls[0].weights is None


def test_interview_payload_is_kept_verbatim() -> None:
    payload = {"likelyQuestions": ["Why us?"]}
    oracle = FakeScoringOracle(responses={INTERVIEW_INSIGHTS: payload})

    result = ScoringGateway(oracle=oracle).score(INTERVIEW_INSIGHTS, PROFILE, POSTING)

    assert isinstance(result, InterviewInsightsResult)
    assert dict(result.payload) == payload


@pytest.mark.parametrize(
    "payload",
    [
        {**job_match_payload(), "overallMatchScore": 140},
        {**job_match_payload(), "overallMatchScore": "high"},
        {key: value for key, value in job_match_payload().items() if key != "gaps"},
    ],
)
def test_invalid_job_match_payload_is_unavailable(payload: dict[str, object]) -> None:
    oracle = FakeScoringOracle(responses={JOB_MATCH: payload})

    with pytest.raises(ScoringUnavailable, match="malformed response"):
        ScoringGateway(oracle=oracle).score(JOB_MATCH, PROFILE, POSTING, WeightSet())


def test_empty_interview_payload_is_unavailable() -> None:
    oracle = FakeScoringOracle(responses={INTERVIEW_INSIGHTS: {}})

    with pytest.raises(ScoringUnavailable):
        ScoringGateway(oracle=oracle).score(INTERVIEW_INSIGHTS, PROFILE, POSTING)


def test_oracle_exception_is_wrapped() -> None:
    oracle = FakeScoringOracle(responses={JOB_MATCH: TimeoutError()})

    with pytest.raises(ScoringUnavailable) as exc_info:
        ScoringGateway(oracle=oracle).score(JOB_MATCH, PROFILE, POSTING, WeightSet())

    assert exc_info.value.kind == JOB_MATCH
    assert exc_info.value.reason == "TimeoutError"
    assert isinstance(exc_info.value.__cause__, TimeoutError)
