"""
Error logging and classification helpers.
Used by the pipeline and the API layer to log failures with their taxonomy details.
"""

import json
import logging
from typing import Any, Dict, Optional

from .custom_exceptions import BaseInsightsError

from ..logging import get_logger

# Module logger
logger = get_logger(__name__)


def get_error_summary(exc: BaseException) -> Dict[str, Any]:
    """Get a summary of an exception suitable for a log line or a job record."""
    summary: Dict[str, Any] = {
        "type": type(exc).__name__,
        "message": str(exc),
    }
    if isinstance(exc, BaseInsightsError):
        summary["status_code"] = exc.status_code
        summary["details"] = exc.details
    return summary


def log_exception(
    exc: BaseException,
    logger_instance: Optional[logging.Logger] = None,
    level: int = logging.ERROR,
    include_traceback: bool = True,
    extra_context: Optional[Dict[str, Any]] = None
) -> None:
    """Log an exception with full context."""
    log = logger_instance or logger

    exc_info = get_error_summary(exc)
    if extra_context:
        exc_info["context"] = extra_context

    if include_traceback:
        log.log(level, f"Exception occurred: {exc_info}", exc_info=exc)
    else:
        log.log(level, f"Exception occurred: {exc_info}")


def extract_error_message(raw_body: Optional[str], default: str = "Unknown error") -> str:
    """
    Best-effort human-readable cause from an upstream error response body.

    Tries ``error.message``, then a top-level ``message``, then the raw body.
    """
    if not raw_body:
        return default
    try:
        payload = json.loads(raw_body)
    except (TypeError, ValueError):
        return raw_body

    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if payload.get("message"):
            return str(payload["message"])
    return raw_body


__all__ = [
    'log_exception',
    'get_error_summary',
    'extract_error_message',
]
