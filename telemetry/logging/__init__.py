"""
Logging utilities for the Comment Insights application.

Public API:
- get_logger: Get a module logger
- JSONFormatter: JSON formatter for the unified structured log
- DEFAULT_FORMAT / DEFAULT_DATE_FORMAT: shared format strings
"""

from .formatters import JSONFormatter
from .logger import (
    DEFAULT_DATE_FORMAT,
    DEFAULT_FORMAT,
    get_logger,
)

__all__ = [
    'get_logger',
    'JSONFormatter',
    'DEFAULT_FORMAT',
    'DEFAULT_DATE_FORMAT',
]
