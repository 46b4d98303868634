"""Adapter between the engine and the external scoring oracle.

The gateway is the only place oracle output enters the engine. Whatever goes
wrong on the way (transport failure, oracle error, a payload that does not
satisfy the kind's schema) surfaces as ``ScoringUnavailable`` so a garbled
result can never reach the store.

Usage example:
    from job_match_analysis.application.scoring_gateway import ScoringGateway

    gateway = ScoringGateway(oracle=oracle)
    result = gateway.score("job-match", profile, posting, weights)
"""

from __future__ import annotations

from dataclasses import dataclass

from ..domain.analysis import (
    JOB_MATCH,
    AnalysisKind,
    AnalysisResult,
    CandidateProfile,
    JobPosting,
    ScoringRequest,
)
from ..domain.weights import WeightSet
from ..exceptions import ScoringUnavailable
from ..infrastructure.io import IncomingDataError, parse_oracle_result
from ..observability import get_logger
from ..protocols import ScoringOracle

logger = get_logger("job_match_analysis.application.scoring_gateway")


@dataclass
class ScoringGateway:
    oracle: ScoringOracle

    def score(
        self,
        kind: AnalysisKind,
        profile: CandidateProfile,
        posting: JobPosting,
        weights: WeightSet | None = None,
    ) -> AnalysisResult:
        """Score ``profile`` against ``posting`` and validate the result.

        Weights are only forwarded for job-match analyses. No retries.

        Raises:
            ScoringUnavailable: If the oracle fails or returns malformed content.
        """
        request = ScoringRequest(
            kind=kind,
            profile=profile,
            posting=posting,
            weights=weights if kind == JOB_MATCH else None,
        )
        try:
            payload = self.oracle.score(request)
        except Exception as exc:
            reason = str(exc) or type(exc).__name__
            logger.warning("Scoring oracle failed for %s job %s: %s", kind, posting.id, reason)
            raise ScoringUnavailable(kind, reason) from exc

        try:
            return parse_oracle_result(kind, payload)
        except IncomingDataError as exc:
            logger.warning(
                "Scoring oracle returned malformed %s payload for job %s: %s",
                kind,
                posting.id,
                exc,
            )
            raise ScoringUnavailable(kind, f"malformed response: {exc}") from exc
