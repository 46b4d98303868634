"""Custom exceptions for the job match analysis engine.

These exceptions provide clear error handling and enable testing of error paths.
"""

from __future__ import annotations


class AnalysisEngineError(Exception):
    """Base exception for all engine errors."""

    pass


class ValidationError(AnalysisEngineError):
    """Raised for malformed or missing identifiers and out-of-range inputs.

    This is the caller's fault - retrying the same request will not help.
    """


class MissingIdentifierError(ValidationError):
    """Raised when a required identifier is empty."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"{name} is required.")


class NoJobIdsError(ValidationError):
    """Raised when an export request names no usable job ids."""

    def __init__(self) -> None:
        super().__init__("At least one job id is required for export.")


class NoUsableWeightsError(ValidationError):
    """Raised when a preference update supplies no valid weight."""

    def __init__(self) -> None:
        super().__init__(
            "No valid weights supplied. Weights must be positive numbers; "
            "they are clamped to 0.1-3.0."
        )


class UnknownAnalysisKindError(ValidationError):
    """Raised when an unsupported analysis kind is requested."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"Unknown analysis kind: {kind!r}")


class NotFoundError(AnalysisEngineError):
    """Raised when a job or record does not exist or is not owned by the caller.

    Ownership failures are reported the same way as missing records.
    """

    def __init__(self, what: str, identifier: str) -> None:
        self.what = what
        self.identifier = identifier
        super().__init__(f"{what} not found: {identifier}")


class ScoringUnavailable(AnalysisEngineError):
    """Raised when the scoring oracle fails or returns malformed content.

    Retryable by the caller. Nothing is cached for a failed call.
    """

    def __init__(self, kind: str, reason: str) -> None:
        self.kind = kind
        self.reason = reason
        super().__init__(f"Scoring unavailable for {kind} analysis: {reason}")


class StoreError(AnalysisEngineError):
    """Raised when the persistence layer fails. Never swallowed."""

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        super().__init__(f"Store operation '{operation}' failed: {detail}")


class ConfigFileNotFoundError(AnalysisEngineError):
    """Raised when a configured config file does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Config file not found: {path}")


class ConfigFileParseError(AnalysisEngineError):
    """Raised when a config file is not valid TOML."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Config file {path} is not valid TOML: {detail}")


class ConfigFileValidationError(AnalysisEngineError):
    """Raised when a config file fails schema validation."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Config file {path} failed validation: {detail}")
