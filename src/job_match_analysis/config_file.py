"""Typed parsing and validation for engine config files.

Example file::

    schema_version = 1

    [engine]
    database_url = "sqlite:///data/match_analysis.sqlite3"
    job_match_freshness_hours = 12

    [default_weights]
    skills = 1.5
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .domain.weights import MAX_WEIGHT, MIN_WEIGHT, clamp_weight
from .exceptions import ConfigFileNotFoundError, ConfigFileParseError, ConfigFileValidationError
from .protocols import FileSystem

_SCHEMA_VERSION = 1


@dataclass(frozen=True)
class EngineConfigFile:
    """Validated engine config values loaded from a TOML file."""

    database_url: str | None = None
    scoring_url: str | None = None
    scoring_timeout_seconds: float | None = None
    job_match_freshness_hours: float | None = None
    skills_gap_freshness_hours: float | None = None
    interview_insights_freshness_hours: float | None = None
    default_weight_skills: float | None = None
    default_weight_experience: float | None = None
    default_weight_education: float | None = None
    default_weight_requirements: float | None = None


class _EngineSectionModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    database_url: str | None = None
    scoring_url: str | None = None
    scoring_timeout_seconds: float | None = None
    job_match_freshness_hours: float | None = None
    skills_gap_freshness_hours: float | None = None
    interview_insights_freshness_hours: float | None = None

    @field_validator("database_url", "scoring_url")
    @classmethod
    def _validate_non_empty_text(cls, value: str | None) -> str | None:
        if value is None:
            return None
        text = value.strip()
        if not text:
            raise ValueError
        return text

    @field_validator(
        "scoring_timeout_seconds",
        "job_match_freshness_hours",
        "skills_gap_freshness_hours",
        "interview_insights_freshness_hours",
    )
    @classmethod
    def _validate_positive(cls, value: float | None) -> float | None:
        if value is None:
            return None
        if value <= 0:
            raise ValueError
        return value


class _DefaultWeightsModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    skills: float | None = None
    experience: float | None = None
    education: float | None = None
    requirements: float | None = None

    @field_validator("skills", "experience", "education", "requirements")
    @classmethod
    def _validate_weight_range(cls, value: float | None) -> float | None:
        if value is None:
            return None
        if value < MIN_WEIGHT or value > MAX_WEIGHT:
            raise ValueError
        return clamp_weight(value)


class _ConfigFileModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_version: int
    engine: _EngineSectionModel = _EngineSectionModel()
    default_weights: _DefaultWeightsModel = _DefaultWeightsModel()

    @field_validator("schema_version")
    @classmethod
    def _validate_schema_version(cls, value: int) -> int:
        if value != _SCHEMA_VERSION:
            raise ValueError
        return value


def _format_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ("<root>",)))
    message = str(first.get("msg", "invalid value"))
    return f"{location}: {message}"


def load_engine_config_file(*, path: Path, fs: FileSystem) -> EngineConfigFile:
    """Load and validate an engine TOML config file."""
    if not fs.exists(path):
        raise ConfigFileNotFoundError(str(path))

    raw_payload = fs.read_text(path)
    try:
        payload: object = tomllib.loads(raw_payload)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigFileParseError(str(path), str(exc)) from exc

    try:
        model = _ConfigFileModel.model_validate(payload)
    except ValidationError as exc:
        raise ConfigFileValidationError(str(path), _format_validation_error(exc)) from exc

    engine = model.engine
    weights = model.default_weights
    return EngineConfigFile(
        database_url=engine.database_url,
        scoring_url=engine.scoring_url,
        scoring_timeout_seconds=engine.scoring_timeout_seconds,
        job_match_freshness_hours=engine.job_match_freshness_hours,
        skills_gap_freshness_hours=engine.skills_gap_freshness_hours,
        interview_insights_freshness_hours=engine.interview_insights_freshness_hours,
        default_weight_skills=weights.skills,
        default_weight_experience=weights.experience,
        default_weight_education=weights.education,
        default_weight_requirements=weights.requirements,
    )
