"""Centralised, injectable configuration for the match analysis engine."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, replace
from datetime import timedelta
from typing import Self

from dotenv import load_dotenv

from .config_file import EngineConfigFile
from .domain.freshness import FreshnessWindows
from .domain.weights import (
    DEFAULT_WEIGHT,
    MAX_WEIGHT,
    MIN_WEIGHT,
    WeightModel,
    WeightSet,
    clamp_weight,
)

DEFAULT_DATABASE_URL = "sqlite:///data/match_analysis.sqlite3"


class PositiveNumberEnvVarError(ValueError):
    """Raised when an environment variable must be a positive number."""

    def __init__(self, env_name: str) -> None:
        super().__init__(f"{env_name} must be a positive number.")


class WeightEnvVarError(ValueError):
    """Raised when a default weight environment variable is out of range."""

    def __init__(self, env_name: str) -> None:
        super().__init__(f"{env_name} must be a number between {MIN_WEIGHT} and {MAX_WEIGHT}.")


@dataclass(frozen=True)
class EngineConfig:
    """Immutable configuration object for the engine and its adapters.

    Load from environment with `EngineConfig.from_env()` or construct directly for testing.
    """

    # Persistence
    database_url: str = DEFAULT_DATABASE_URL

    # Scoring oracle
    scoring_url: str = ""
    scoring_api_key: str = ""
    scoring_timeout_seconds: float = 60.0

    # Freshness windows
    job_match_freshness_hours: float = 24.0
    skills_gap_freshness_hours: float = 24.0
    interview_insights_freshness_hours: float = 168.0

    # Built-in job-match weights
    default_weight_skills: float = DEFAULT_WEIGHT
    default_weight_experience: float = DEFAULT_WEIGHT
    default_weight_education: float = DEFAULT_WEIGHT
    default_weight_requirements: float = DEFAULT_WEIGHT

    @classmethod
    def from_env(cls, dotenv_path: str | None = None) -> Self:
        """Load configuration from environment variables.

        Args:
            dotenv_path: Optional path to .env file. If None, uses default .env discovery.

        Returns:
            EngineConfig instance populated from environment.
        """
        load_dotenv(dotenv_path)

        return cls(
            database_url=os.getenv("DATABASE_URL", "").strip() or DEFAULT_DATABASE_URL,
            scoring_url=os.getenv("SCORING_URL", "").strip(),
            scoring_api_key=os.getenv("SCORING_API_KEY", "").strip(),
            scoring_timeout_seconds=_parse_positive_float(
                os.getenv("SCORING_TIMEOUT_SECONDS", ""),
                env_name="SCORING_TIMEOUT_SECONDS",
                default=60.0,
            ),
            job_match_freshness_hours=_parse_positive_float(
                os.getenv("JOB_MATCH_FRESHNESS_HOURS", ""),
                env_name="JOB_MATCH_FRESHNESS_HOURS",
                default=24.0,
            ),
            skills_gap_freshness_hours=_parse_positive_float(
                os.getenv("SKILLS_GAP_FRESHNESS_HOURS", ""),
                env_name="SKILLS_GAP_FRESHNESS_HOURS",
                default=24.0,
            ),
            interview_insights_freshness_hours=_parse_positive_float(
                os.getenv("INTERVIEW_INSIGHTS_FRESHNESS_HOURS", ""),
                env_name="INTERVIEW_INSIGHTS_FRESHNESS_HOURS",
                default=168.0,
            ),
            default_weight_skills=_parse_weight(
                os.getenv("DEFAULT_WEIGHT_SKILLS", ""), env_name="DEFAULT_WEIGHT_SKILLS"
            ),
            default_weight_experience=_parse_weight(
                os.getenv("DEFAULT_WEIGHT_EXPERIENCE", ""), env_name="DEFAULT_WEIGHT_EXPERIENCE"
            ),
            default_weight_education=_parse_weight(
                os.getenv("DEFAULT_WEIGHT_EDUCATION", ""), env_name="DEFAULT_WEIGHT_EDUCATION"
            ),
            default_weight_requirements=_parse_weight(
                os.getenv("DEFAULT_WEIGHT_REQUIREMENTS", ""),
                env_name="DEFAULT_WEIGHT_REQUIREMENTS",
            ),
        )

    def with_overrides(
        self,
        *,
        database_url: str | None = None,
        scoring_url: str | None = None,
    ) -> Self:
        """Return a new config with specified overrides (for CLI options)."""
        return replace(
            self,
            database_url=self.database_url if database_url is None else database_url.strip(),
            scoring_url=self.scoring_url if scoring_url is None else scoring_url.strip(),
        )

    def with_file_overrides(self, file_config: EngineConfigFile) -> Self:
        """Return a new config with config-file values overriding env/default values."""
        return replace(
            self,
            database_url=self.database_url
            if file_config.database_url is None
            else file_config.database_url,
            scoring_url=self.scoring_url
            if file_config.scoring_url is None
            else file_config.scoring_url,
            scoring_timeout_seconds=self.scoring_timeout_seconds
            if file_config.scoring_timeout_seconds is None
            else file_config.scoring_timeout_seconds,
            job_match_freshness_hours=self.job_match_freshness_hours
            if file_config.job_match_freshness_hours is None
            else file_config.job_match_freshness_hours,
            skills_gap_freshness_hours=self.skills_gap_freshness_hours
            if file_config.skills_gap_freshness_hours is None
            else file_config.skills_gap_freshness_hours,
            interview_insights_freshness_hours=self.interview_insights_freshness_hours
            if file_config.interview_insights_freshness_hours is None
            else file_config.interview_insights_freshness_hours,
            default_weight_skills=self.default_weight_skills
            if file_config.default_weight_skills is None
            else file_config.default_weight_skills,
            default_weight_experience=self.default_weight_experience
            if file_config.default_weight_experience is None
            else file_config.default_weight_experience,
            default_weight_education=self.default_weight_education
            if file_config.default_weight_education is None
            else file_config.default_weight_education,
            default_weight_requirements=self.default_weight_requirements
            if file_config.default_weight_requirements is None
            else file_config.default_weight_requirements,
        )

    def freshness_windows(self) -> FreshnessWindows:
        return FreshnessWindows(
            job_match=timedelta(hours=self.job_match_freshness_hours),
            skills_gap=timedelta(hours=self.skills_gap_freshness_hours),
            interview_insights=timedelta(hours=self.interview_insights_freshness_hours),
        )

    def default_weights(self) -> WeightSet:
        return WeightSet(
            skills=self.default_weight_skills,
            experience=self.default_weight_experience,
            education=self.default_weight_education,
            requirements=self.default_weight_requirements,
        )

    def weight_model(self) -> WeightModel:
        return WeightModel(defaults=self.default_weights())


def _parse_positive_float(value: str, *, env_name: str, default: float) -> float:
    """Parse an optional positive number from an environment variable."""
    text = value.strip()
    if not text:
        return default
    try:
        parsed = float(text)
    except ValueError as exc:
        raise PositiveNumberEnvVarError(env_name) from exc
    if not math.isfinite(parsed) or parsed <= 0:
        raise PositiveNumberEnvVarError(env_name)
    return parsed


def _parse_weight(value: str, *, env_name: str) -> float:
    """Parse an optional default weight; it must already lie inside the clamp range."""
    text = value.strip()
    if not text:
        return DEFAULT_WEIGHT
    try:
        parsed = float(text)
    except ValueError as exc:
        raise WeightEnvVarError(env_name) from exc
    if not math.isfinite(parsed) or parsed < MIN_WEIGHT or parsed > MAX_WEIGHT:
        raise WeightEnvVarError(env_name)
    return clamp_weight(parsed) or DEFAULT_WEIGHT
