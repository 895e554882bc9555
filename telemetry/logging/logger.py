"""Core logger functionality for the Comment Insights application."""

import logging

# Default logging format
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str) -> logging.Logger:
    """
    Get a module logger.

    Handlers, levels and formatting come from Django's LOGGING setting and
    the Celery worker config (see comment_insights.config.logging), so the
    logger itself is left unconfigured and propagates to them.
    """
    return logging.getLogger(name)
