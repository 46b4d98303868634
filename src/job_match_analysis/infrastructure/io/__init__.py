"""Boundary parsing and rendering for analysis payloads."""

from .serialization import result_to_payload, scoring_request_to_payload
from .validation import (
    IncomingDataError,
    parse_oracle_result,
    parse_profile_payload,
    parse_stored_result,
    parse_stored_weights,
    validate_as,
)

__all__ = [
    "IncomingDataError",
    "parse_oracle_result",
    "parse_profile_payload",
    "parse_stored_result",
    "parse_stored_weights",
    "result_to_payload",
    "scoring_request_to_payload",
    "validate_as",
]
