"""Shared logging utilities for consistent engine observability.

All engine loggers live under the ``job_match_analysis`` namespace so the CLI
can raise or lower verbosity in one place.

Usage example:
    from job_match_analysis.observability.logging import get_logger

    logger = get_logger("job_match_analysis.analysis")
    logger.info("Cache %s for job %s", "hit", job_id)
"""

from __future__ import annotations

import logging
import time

ROOT_LOGGER_NAME = "job_match_analysis"

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def get_logger(name: str) -> logging.Logger:
    """Return a standard logger configured for UTC timestamps.

    Args:
        name: Logger name (use a stable module-qualified name).

    Returns:
        A logger with a single stream handler and a consistent UTC format.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(fmt=_LOG_FORMAT, datefmt=_LOG_DATE_FORMAT)
        formatter.converter = time.gmtime
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        logger.propagate = False
    return logger


def set_engine_log_level(level: str) -> None:
    """Apply ``level`` (e.g. "DEBUG", "warning") to every engine logger created so far."""
    numeric = logging.getLevelName(level.strip().upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")
    for name, logger in logging.root.manager.loggerDict.items():
        if isinstance(logger, logging.Logger) and (
            name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}.")
        ):
            logger.setLevel(numeric)
