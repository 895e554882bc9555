"""
Exception handling utilities for the Comment Insights application.

This package provides:
- The error taxonomy shared by retrieval, inference, persistence and the API
- Utility functions for logging and summarising exceptions

The package is organized into focused modules:
- custom_exceptions: All custom exception classes
- context: Error logging and summary functions
"""

from .context import (
    extract_error_message,
    get_error_summary,
    log_exception,
)
from .custom_exceptions import (
    BaseInsightsError,
    InvalidInputError,
    JobFailedError,
    MalformedOutputError,
    PersistenceError,
    UnauthenticatedError,
    UpstreamFailureError,
    UpstreamTimeoutError,
)

__all__ = [
    # Exception classes
    "BaseInsightsError",
    "InvalidInputError",
    "UnauthenticatedError",
    "UpstreamTimeoutError",
    "UpstreamFailureError",
    "JobFailedError",
    "MalformedOutputError",
    "PersistenceError",
    # Functions
    "log_exception",
    "get_error_summary",
    "extract_error_message",
]
