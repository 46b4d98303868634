"""Scoring oracle fakes for tests."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import override

from job_match_analysis.domain.analysis import ScoringRequest
from job_match_analysis.protocols import ScoringOracle
from tests.support.errors import FakeOracleResponseMissingError


def _empty_responses() -> dict[str, Mapping[str, object] | Exception]:
    return {}


def _empty_calls() -> list[ScoringRequest]:
    return []


@dataclass
class FakeScoringOracle(ScoringOracle):
    """Return a canned payload per analysis kind, or raise a canned exception."""

    responses: dict[str, Mapping[str, object] | Exception] = field(
        default_factory=_empty_responses
    )
    calls: list[ScoringRequest] = field(default_factory=_empty_calls)

    @override
    def score(self, request: ScoringRequest) -> Mapping[str, object]:
        self.calls.append(request)
        response = self.responses.get(request.kind)
        if response is None:
            raise FakeOracleResponseMissingError(request.kind)
        if isinstance(response, Exception):
            raise response
        return response

    def calls_for(self, kind: str) -> list[ScoringRequest]:
        return [call for call in self.calls if call.kind == kind]
