"""
Observability module.

Provides logging configuration and run-scoped logging helpers.
"""

from apply_progress.observability.log_utils import (
    log_exception_with_context,
    log_with_context,
    safe_log_value,
)
from apply_progress.observability.logger import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
    "log_exception_with_context",
    "log_with_context",
    "safe_log_value",
]
