"""
Run-scoped logging helpers.

Progress payloads are logged as one-line summaries and context is
rendered into the message as key=value pairs, so the plain console
formatter shows which run a line belongs to.

Dependencies: logging (stdlib), apply_progress.models
System role: Logging helper functions
"""

import logging
from typing import Any

from apply_progress.models.progress import ProgressSnapshot


def safe_log_value(value: Any, max_length: int = 200) -> str:
    """
    Convert a value to a short string for a log line.

    Snapshots become "status@progress%", containers report their size and
    anything longer than max_length is truncated.

    Args:
        value: Value to convert
        max_length: Maximum length before truncating

    Returns:
        str: Loggable representation
    """
    if value is None:
        return "None"
    if isinstance(value, ProgressSnapshot):
        return f"{value.status.value}@{value.progress:g}%"
    if isinstance(value, dict):
        text = "{" + ",".join(str(k) for k in value) + "}"
    elif isinstance(value, (list, tuple)):
        text = f"{type(value).__name__}[{len(value)}]"
    else:
        try:
            text = str(value)
        except Exception as e:
            return f"<unloggable {type(value).__name__}: {type(e).__name__}>"

    if len(text) > max_length:
        return f"{text[:max_length]}...(+{len(text) - max_length})"
    return text


def format_context(**context) -> str:
    """Render context as ' [k=v k=v]', or '' when empty."""
    if not context:
        return ""
    pairs = " ".join(f"{key}={safe_log_value(val)}" for key, val in context.items())
    return f" [{pairs}]"


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context,
) -> None:
    """
    Log a message followed by its context.

    The raw context is also attached to the record as record.context.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        message: Log message
        **context: Key-value pairs such as run_id or status
    """
    if not logger.isEnabledFor(level):
        return
    logger.log(level, message + format_context(**context), extra={"context": context})


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context,
) -> None:
    """
    Log an exception with its type and traceback at ERROR level.

    Args:
        logger: Logger instance
        message: Log message
        exc: Exception instance
        **context: Key-value pairs such as run_id
    """
    context = {**context, "error_type": type(exc).__name__}
    logger.error(
        f"{message}: {exc}{format_context(**context)}",
        exc_info=exc,
        extra={"context": context},
    )
