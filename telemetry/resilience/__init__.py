"""
Resilience utilities for the Comment Insights application.

This package provides deadline and timeout handling for pipeline stages:
- Deadline: an overall wall-clock budget shared by all stages of one run
- with_timeout: cancel an awaited call when its budget elapses
- TimeoutContext: log stage duration against its expected budget

No stage of the pipeline retries automatically.
"""

from .timeout import (
    Deadline,
    TimeoutContext,
    with_timeout,
)

__all__ = [
    "Deadline",
    "TimeoutContext",
    "with_timeout",
]
