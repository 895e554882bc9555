"""
Celery task running the comment pipeline for Slack-triggered jobs.

The Slack command view enqueues ``run_comment_pipeline`` with a plain-dict
trigger and returns immediately. The task builds every collaborator from
configuration; nothing is shared with the request that queued it.
"""

import logging
import uuid
from typing import Optional

from celery import shared_task
from celery.exceptions import SoftTimeLimitExceeded

from ai_utils.config import AIConfig
from ai_utils.services.registry import build_inference_service
from telemetry.exceptions import log_exception

from . import slack_blocks
from .config import TASK_TIMEOUTS, PipelineConfig, get_pipeline_config
from .pipeline import PipelineJob, PipelineOrchestrator, SlackResponseNotifier
from .retrieval import build_comment_retriever
from .schemas import TriggerRequest
from .store import HistoryStore

logger = logging.getLogger(__name__)


def build_orchestrator(
    config: PipelineConfig,
    ai_config: Optional[AIConfig] = None,
    notifier: Optional[SlackResponseNotifier] = None,
) -> PipelineOrchestrator:
    """
    Wire a PipelineOrchestrator from configuration.

    Raises:
        ValueError: a required API key is not configured
    """
    config.validate_retrieval()
    ai_config = ai_config or AIConfig.from_env()
    ai_config.validate()
    return PipelineOrchestrator(
        retriever=build_comment_retriever(config),
        inference=build_inference_service(ai_config, default_deadline=config.inference_timeout),
        config=config,
        store=HistoryStore(),
        notifier=notifier,
    )


@shared_task(bind=True,
             name='insights.run_comment_pipeline',
             soft_time_limit=TASK_TIMEOUTS['pipeline_soft_limit'],
             time_limit=TASK_TIMEOUTS['pipeline_hard_limit'])
def run_comment_pipeline(self, trigger: dict) -> dict:
    """
    Run one pipeline job to completion.

    Args:
        trigger: TriggerRequest fields (source_identifier, callback_address,
            requested_model, user_id, channel_id)

    Returns:
        dict: job id, terminal stage, outcome status and saved record id
    """
    trigger_request = TriggerRequest.model_validate(trigger)
    job = PipelineJob(id=self.request.id or str(uuid.uuid4()), trigger=trigger_request)
    config = get_pipeline_config()
    notifier = SlackResponseNotifier(timeout=config.slack.callback_timeout)

    logger.info(
        f"Comment pipeline job {job.id} for {trigger_request.source_identifier} "
        f"(user={trigger_request.user_id}, channel={trigger_request.channel_id})"
    )

    try:
        orchestrator = build_orchestrator(config, notifier=notifier)
    except ValueError as e:
        log_exception(e, logger, include_traceback=False)
        job.fail(str(e))
        if trigger_request.callback_address:
            notifier.notify(trigger_request.callback_address, slack_blocks.error_message("Error during analysis", str(e)))
        return {'job_id': job.id, 'stage': job.stage.value, 'status': 'failed', 'error': str(e)}

    try:
        outcome = orchestrator.run(job)
    except SoftTimeLimitExceeded:
        logger.error(f"Comment pipeline job {job.id} hit the task soft time limit")
        message = "Analysis timed out. Try a video with fewer comments."
        if not job.is_terminal:
            job.fail(message)
        if trigger_request.callback_address:
            notifier.notify(trigger_request.callback_address, slack_blocks.error_message("Analysis failed", message))
        return {'job_id': job.id, 'stage': job.stage.value, 'status': 'failed', 'error': message}

    return {
        'job_id': job.id,
        'stage': outcome.job.stage.value,
        'status': outcome.status.value,
        'record_id': outcome.record_id,
        'error': outcome.error,
        'deliveries': len(notifier.deliveries),
    }
