"""Logging utilities for monitoring and debugging."""

from mdpack.core.logging.config import LogConfig
from mdpack.core.logging.logger import (
    StructuredLogger,
    configure_logging,
    current_trace_id,
    log_context,
    logger,
)

__all__ = [
    "LogConfig",
    "StructuredLogger",
    "configure_logging",
    "current_trace_id",
    "log_context",
    "logger",
]
