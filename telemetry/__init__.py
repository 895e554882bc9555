"""
Telemetry package for Comment Insights.
Provides centralized logging, the error taxonomy, and deadline handling.

This package contains focused telemetry modules:
- telemetry.logging: Centralized logging utilities
- telemetry.exceptions: Error taxonomy and exception logging helpers
- telemetry.resilience: Deadlines and cancellable timeouts
"""

__version__ = "2.0.0"

from .exceptions import *
from .logging import *
from .resilience import *
