"""Observability helpers."""

from .logging import get_logger, set_engine_log_level

__all__ = ["get_logger", "set_engine_log_level"]
