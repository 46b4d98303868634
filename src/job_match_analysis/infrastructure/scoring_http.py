"""HTTP client for the external scoring oracle.

Usage example:
    import requests

    from job_match_analysis.infrastructure.scoring_http import RequestsScoringOracle

    oracle = RequestsScoringOracle(
        session=requests.Session(),
        endpoint_url="https://scoring.internal/v1/analyses",
        api_key="...",
    )
    payload = oracle.score(request)
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import override

import requests

from ..domain.analysis import ScoringRequest
from ..observability import get_logger
from ..protocols import ScoringOracle
from .io import IncomingDataError, scoring_request_to_payload, validate_as

logger = get_logger("job_match_analysis.infrastructure.scoring_http")


def _response_details(response: requests.Response) -> str:
    """Return a compact status/body summary for error reporting."""
    try:
        body = response.text
    except (UnicodeDecodeError, ValueError, requests.RequestException):
        body = "<unreadable>"
    body = " ".join(body.split())
    if len(body) > 300:
        body = body[:300] + "..."
    return f"status={response.status_code}, body={body}"


class RequestsScoringOracle(ScoringOracle):
    """Scoring oracle reached over HTTP with a JSON POST.

    No retries: failures propagate to the scoring gateway, which reports them
    as ``ScoringUnavailable``.
    """

    def __init__(
        self,
        *,
        session: requests.Session,
        endpoint_url: str,
        api_key: str = "",
        timeout_seconds: float = 60.0,
    ) -> None:
        self.session = session
        self.endpoint_url = endpoint_url
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    @override
    def score(self, request: ScoringRequest) -> Mapping[str, object]:
        """POST the request and return the decoded JSON object.

        Raises:
            requests.RequestException: On transport failures and non-2xx responses.
            IncomingDataError: If the body is not a JSON object.
        """
        response = self.session.post(
            self.endpoint_url,
            json=scoring_request_to_payload(request),
            headers=self._headers(),
            timeout=self.timeout_seconds,
        )
        try:
            response.raise_for_status()
        except requests.HTTPError:
            logger.warning("Scoring oracle error: %s", _response_details(response))
            raise

        try:
            payload: object = response.json()
        except ValueError as exc:
            raise IncomingDataError("Scoring oracle response is not valid JSON.") from exc
        return validate_as(dict[str, object], payload)
