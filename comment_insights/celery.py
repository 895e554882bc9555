import logging.config
import os
import threading
import time

from celery import Celery, signals

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "comment_insights.settings")

app = Celery("comment_insights")
app.config_from_object("django.conf:settings", namespace="CELERY")

# Additional Celery configuration for task state tracking
app.conf.update(
    task_track_started=True,
    task_send_sent_event=True,
    worker_send_task_events=True,
    # Pipeline jobs are never retried by the broker; a new trigger creates a new job
    task_acks_late=False,
    task_reject_on_worker_lost=False,
)

app.autodiscover_tasks()

logger = logging.getLogger("celery.task")

# Lightweight per-task runtime logging for pipeline tasks
_task_start_times: dict[str, float] = {}
_task_lock = threading.Lock()


@signals.setup_logging.connect
def _configure_worker_logging(**kwargs):
    from comment_insights.config.logging import get_celery_logging_config

    logging.config.dictConfig(get_celery_logging_config(os.getenv("LOG_DIR", "logs")))


@signals.task_prerun.connect
def _task_prerun_handler(sender=None, task_id=None, task=None, **extra):
    name = getattr(task, "name", "") or str(sender)
    if not name.startswith("insights."):
        return
    with _task_lock:
        _task_start_times[task_id] = time.time()
    logger.info(f"task_start stage={name} task_id={task_id}")


@signals.task_postrun.connect
def _task_postrun_handler(sender=None, task_id=None, task=None, state=None, **extra):
    name = getattr(task, "name", "") or str(sender)
    if not name.startswith("insights."):
        return
    with _task_lock:
        start_ts = _task_start_times.pop(task_id, None)
    if start_ts is None:
        return
    elapsed = max(0.0, time.time() - start_ts)
    logger.info(f"task_end stage={name} task_id={task_id} state={state} elapsed_s={elapsed:.2f}")


@signals.task_failure.connect
def _task_failure_handler(sender=None, task_id=None, exception=None, **extra):
    name = getattr(sender, "name", "") or str(sender)
    if not name.startswith("insights."):
        return
    exc_type = type(exception).__name__ if exception else "UnknownError"
    logger.error(
        f"task_error stage={name} task_id={task_id} error_type={exc_type} "
        f"error={str(exception)[:500] if exception else ''}"
    )
