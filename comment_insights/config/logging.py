"""
Logging configuration for the web process and the Celery worker.

Every module logger writes to the console and to a JSON-lines file that
both processes share; the pipeline modules also keep a plain-text file.
"""

from pathlib import Path

from telemetry.logging import DEFAULT_DATE_FORMAT, DEFAULT_FORMAT

JSON_FORMATTER = "telemetry.logging.formatters.JSONFormatter"

APP_LOGGERS = ("django", "api", "insights", "ai_utils", "telemetry", "celery")
PIPELINE_LOGGERS = ("insights", "ai_utils", "celery")
QUIET_LOGGERS = ("urllib3", "requests", "openai", "httpx")


def _rotating_file(path: Path, formatter: str) -> dict:
    path.parent.mkdir(parents=True, exist_ok=True)
    return {
        "class": "logging.handlers.TimedRotatingFileHandler",
        "filename": str(path),
        "when": "midnight",
        "backupCount": 30,
        "formatter": formatter,
        "encoding": "utf-8",
    }


def get_logging_config(debug: bool = False, log_dir: str | Path = "logs") -> dict:
    """
    Django LOGGING dict.

    Args:
        debug: DEBUG-level console output and a text (not JSON) pipeline file
        log_dir: Directory that receives the rotating log files
    """
    log_dir = Path(log_dir)

    loggers = {}
    for name in APP_LOGGERS:
        handlers = ["console", "unified_json"]
        if name in PIPELINE_LOGGERS:
            handlers.append("pipeline_file")
        loggers[name] = {"handlers": handlers, "level": "INFO", "propagate": False}
    # Third-party clients only surface problems
    for name in QUIET_LOGGERS:
        loggers[name] = {"handlers": ["unified_json"], "level": "WARNING", "propagate": False}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "text": {"format": DEFAULT_FORMAT, "datefmt": DEFAULT_DATE_FORMAT},
            "json": {"()": JSON_FORMATTER},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "text",
                "level": "DEBUG" if debug else "INFO",
            },
            "pipeline_file": _rotating_file(log_dir / "pipeline" / "pipeline.log", "text" if debug else "json"),
            "unified_json": _rotating_file(log_dir / "unified" / "all-services.jsonl", "json"),
        },
        "loggers": loggers,
        "root": {"handlers": ["console", "unified_json"], "level": "WARNING"},
    }


def get_celery_logging_config(log_dir: str | Path = "logs") -> dict:
    """Worker processes: console plus a JSON worker log."""
    log_dir = Path(log_dir)
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "worker": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - [Worker:%(processName)s] - %(message)s",
                "datefmt": DEFAULT_DATE_FORMAT,
            },
            "json": {"()": JSON_FORMATTER},
        },
        "handlers": {
            "console": {"class": "logging.StreamHandler", "formatter": "worker"},
            "file": _rotating_file(log_dir / "celery" / "worker.log", "json"),
        },
        "root": {"handlers": ["console", "file"], "level": "INFO"},
    }
