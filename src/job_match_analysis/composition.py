"""Composition root for wiring CLI dependencies."""

from __future__ import annotations

import requests

from .application.engine import MatchAnalysisEngine
from .cli import CliDependencies, create_app
from .config import EngineConfig
from .infrastructure import (
    LocalFileSystem,
    RequestsScoringOracle,
    SqlAnalysisStore,
    SqlJobDirectory,
    SqlPreferenceStore,
    SqlProfileSource,
)
from .infrastructure.db import build_engine, build_session_factory, create_schema


def build_cli_dependencies(*, config: EngineConfig) -> CliDependencies:
    """Build concrete dependencies for CLI commands.

    Args:
        config: Engine configuration (database, scoring service and weights).
    """
    fs = LocalFileSystem()
    db_engine = build_engine(config.database_url)
    create_schema(db_engine)
    session_factory = build_session_factory(db_engine)
    default_weights = config.default_weights()

    oracle = RequestsScoringOracle(
        session=requests.Session(),
        endpoint_url=config.scoring_url,
        api_key=config.scoring_api_key,
        timeout_seconds=config.scoring_timeout_seconds,
    )
    engine = MatchAnalysisEngine.build(
        store=SqlAnalysisStore(session_factory=session_factory, default_weights=default_weights),
        jobs=SqlJobDirectory(session_factory=session_factory),
        profiles=SqlProfileSource(session_factory=session_factory),
        preferences=SqlPreferenceStore(
            session_factory=session_factory, default_weights=default_weights
        ),
        oracle=oracle,
        config=config,
    )
    return CliDependencies(fs=fs, engine=engine)


app = create_app(build_cli_dependencies)
