"""
Configuration modules for Comment Insights.

Centralized configuration management for:
- Logging configuration (Django LOGGING and Celery worker logging)
"""

from .logging import get_celery_logging_config, get_logging_config

__all__ = [
    "get_logging_config",
    "get_celery_logging_config",
]
