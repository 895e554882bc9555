"""
Pipeline orchestration.

Sequences retrieval, ranking, inference, assembly, persistence and, for jobs
triggered from Slack, delivery of progress and the final message. Stages run
strictly in order; the first failure moves the job to ``failed`` and ends the
run. Persistence failures are logged and do not affect the outcome.
"""

import logging
import time
from enum import Enum
from typing import Callable, Optional, Sequence

from celery.exceptions import SoftTimeLimitExceeded
from pydantic import BaseModel

from ai_utils.models import TokenCounts
from ai_utils.services.inference_service import InferenceService
from telemetry.exceptions import (
    BaseInsightsError,
    JobFailedError,
    PersistenceError,
    UpstreamFailureError,
    log_exception,
)
from telemetry.resilience import Deadline, TimeoutContext

from .. import slack_blocks
from ..config import PipelineConfig
from ..prompts import ANALYSIS_SYSTEM_PROMPT, build_user_prompt
from ..retrieval import CommentRetriever, extract_video_id
from ..schemas import InsightResult, RetrievalResult, RetrievedItem, VideoInfo
from ..store import HistoryEntry, HistoryStore
from .assembler import build_insight_result
from .job import PipelineJob, Stage
from .notifier import SlackResponseNotifier
from .ranking import format_excerpt, rank_by_likes

logger = logging.getLogger(__name__)

INFERENCE_SERVICE_NAME = "OpenRouter"
INTERNAL_ERROR_MESSAGE = "An error occurred during analysis"


class OutcomeStatus(str, Enum):
    SUCCESS = "success"
    NO_CONTENT = "no_content"
    FAILED = "failed"


class AnalysisOutcome(BaseModel):
    """Assembled analysis plus the inference metadata returned to callers"""
    result: InsightResult
    model_used: str
    token_counts: TokenCounts

    def to_api(self) -> dict:
        return {
            "analysis": self.result.to_api(),
            "model_used": self.model_used,
            "tokens_used": self.token_counts.model_dump(),
        }


class PipelineOutcome(BaseModel):
    """Terminal state of one pipeline run"""
    status: OutcomeStatus
    job: PipelineJob
    retrieval: Optional[RetrievalResult] = None
    analysis: Optional[AnalysisOutcome] = None
    record_id: Optional[str] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    status_code: int = 200


def user_facing_message(exc: BaseException) -> str:
    """
    Message safe to show to the person who triggered the job.

    Raw model output and stack traces are never included.
    """
    if isinstance(exc, JobFailedError):
        return f"Scraping failed with status: {exc.job_status}"
    if isinstance(exc, UpstreamFailureError):
        if exc.service == INFERENCE_SERVICE_NAME and exc.provider_message != "No analysis generated":
            return f"AI analysis failed: {exc.provider_message}"
        return exc.provider_message
    if isinstance(exc, BaseInsightsError):
        return exc.message
    return INTERNAL_ERROR_MESSAGE


def analyze_comments(
    items: Sequence[RetrievedItem],
    video_info: VideoInfo,
    inference: InferenceService,
    model: Optional[str] = None,
    deadline: float = 55.0,
    excerpt_size: int = 150,
    top_n: int = 5,
) -> AnalysisOutcome:
    """
    Rank comments, run inference on the top excerpt and assemble the result.

    Args:
        items: Full retrieved comment set
        video_info: Video details for the prompt and the result header
        inference: Bounded inference service
        model: Requested model, service default when None
        deadline: Seconds allowed for the inference call
        excerpt_size: Number of top-liked comments sent to the model
        top_n: Size of the most liked / most discussed views

    Returns:
        AnalysisOutcome with the assembled InsightResult

    Raises:
        UpstreamTimeoutError, UpstreamFailureError, MalformedOutputError
    """
    excerpt = rank_by_likes(items, excerpt_size)
    logger.info(f"Processing top {len(excerpt)} comments (by likes) out of {len(items)} total")

    user_prompt = build_user_prompt(video_info.title, video_info.channel, len(items), format_excerpt(excerpt))
    outcome = inference.infer(ANALYSIS_SYSTEM_PROMPT, user_prompt, model=model, deadline=deadline)

    result = build_insight_result(outcome.output, items, video_info, top_n=top_n)
    return AnalysisOutcome(result=result, model_used=outcome.model, token_counts=outcome.token_counts)


class PipelineOrchestrator:
    """
    Runs one PipelineJob to a terminal stage.

    Each collaborator is passed in; the orchestrator holds no state between
    runs other than its configuration.
    """

    def __init__(
        self,
        retriever: CommentRetriever,
        inference: InferenceService,
        config: PipelineConfig,
        store: Optional[HistoryStore] = None,
        notifier: Optional[SlackResponseNotifier] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.retriever = retriever
        self.inference = inference
        self.config = config
        self.store = store
        self.notifier = notifier
        self.clock = clock

    def run(self, job: PipelineJob, deadline: Optional[Deadline] = None) -> PipelineOutcome:
        deadline = deadline or Deadline(self.config.pipeline_budget, clock=self.clock)
        job.stage_deadlines = {
            Stage.RETRIEVING: deadline.bound(self.config.apify.max_wait),
            Stage.INFERRING: self.config.inference_timeout,
            Stage.NOTIFYING: self.config.slack.callback_timeout,
        }
        logger.info(f"Pipeline job {job.id} started for {job.trigger.source_identifier}")

        try:
            return self._run_stages(job, deadline)
        except SoftTimeLimitExceeded:
            # The Celery task owns the time limit and reports it as a timeout
            raise
        except Exception as e:
            # Unclassified errors also end the job with a final message
            return self._fail(job, e)

    def _run_stages(self, job: PipelineJob, deadline: Deadline) -> PipelineOutcome:
        trigger = job.trigger

        # Retrieving
        job.advance(Stage.RETRIEVING)
        with TimeoutContext(job.stage_deadlines[Stage.RETRIEVING], "comment retrieval"):
            retrieval = self.retriever.fetch(trigger.source_identifier, self.config.max_comments, deadline)

        if retrieval.total_count == 0:
            logger.info(f"Pipeline job {job.id}: no comments found")
            self._deliver_final(job, slack_blocks.no_content_message(retrieval.video_info.url))
            job.advance(Stage.DONE)
            return PipelineOutcome(status=OutcomeStatus.NO_CONTENT, job=job, retrieval=retrieval)

        self._send(job, slack_blocks.progress_message(retrieval.total_count))

        # Inferring
        job.advance(Stage.INFERRING)
        inference_deadline = deadline.bound(self.config.inference_timeout)
        analysis = analyze_comments(
            retrieval.items,
            retrieval.video_info,
            self.inference,
            model=trigger.requested_model,
            deadline=inference_deadline,
            excerpt_size=self.config.excerpt_size,
            top_n=self.config.display_top_n,
        )

        # Persisting
        job.advance(Stage.PERSISTING)
        record_id = self._persist(retrieval, analysis)

        # Notifying
        self._deliver_final(job, slack_blocks.analysis_message(analysis.result))
        job.advance(Stage.DONE)

        logger.info(f"Pipeline job {job.id} completed in {deadline.elapsed():.1f}s")
        return PipelineOutcome(
            status=OutcomeStatus.SUCCESS,
            job=job,
            retrieval=retrieval,
            analysis=analysis,
            record_id=record_id,
        )

    def _persist(self, retrieval: RetrievalResult, analysis: AnalysisOutcome) -> Optional[str]:
        if self.store is None:
            return None
        video_info = retrieval.video_info
        entry = HistoryEntry(
            video_id=extract_video_id(video_info.url) or "",
            video_title=video_info.title,
            video_channel=video_info.channel,
            video_url=video_info.url,
            model_used=analysis.model_used,
            total_comments=retrieval.total_count,
            analysis=analysis.result.to_api(),
            tokens_used=analysis.token_counts.model_dump(),
        )
        try:
            return self.store.save(entry)
        except PersistenceError as e:
            log_exception(e, logger, level=logging.WARNING, include_traceback=False)
            return None

    def _fail(self, job: PipelineJob, exc: BaseException) -> PipelineOutcome:
        stage = job.stage
        message = user_facing_message(exc)
        job.fail(message)
        log_exception(exc, logger, extra_context={"job_id": job.id, "stage": stage.value})

        title = "Failed to retrieve comments" if stage == Stage.RETRIEVING else "Analysis failed"
        self._send(job, slack_blocks.error_message(title, message))

        return PipelineOutcome(
            status=OutcomeStatus.FAILED,
            job=job,
            error=message,
            error_type=type(exc).__name__,
            status_code=getattr(exc, "status_code", 500),
        )

    def _has_callback(self, job: PipelineJob) -> bool:
        return bool(self.notifier and job.trigger.callback_address)

    def _send(self, job: PipelineJob, payload: dict) -> None:
        if self._has_callback(job):
            self.notifier.notify(job.trigger.callback_address, payload)

    def _deliver_final(self, job: PipelineJob, payload: dict) -> None:
        if self._has_callback(job):
            job.advance(Stage.NOTIFYING)
            self.notifier.notify(job.trigger.callback_address, payload)
