"""
Custom logging formatters for the Comment Insights application.

JSONFormatter writes one JSON object per record for the unified
all-services log, keeping any ``extra={...}`` fields the caller attached
(job id, stage, video id).
"""

import json
import logging
from datetime import datetime, timezone

# LogRecord attributes that are not caller-supplied extras
_RESERVED_ATTRS = frozenset({
    "name", "msg", "args", "created", "filename", "funcName", "levelname",
    "levelno", "lineno", "module", "msecs", "exc_info", "exc_text",
    "stack_info", "pathname", "process", "processName", "relativeCreated",
    "thread", "threadName", "taskName", "message", "asctime",
})


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "name": record.name,
            "level": record.levelname,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)
