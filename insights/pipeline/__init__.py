from .assembler import build_insight_result
from .job import InvalidStageTransition, PipelineJob, Stage
from .notifier import SlackResponseNotifier
from .orchestrator import (
    AnalysisOutcome,
    OutcomeStatus,
    PipelineOrchestrator,
    PipelineOutcome,
    analyze_comments,
    user_facing_message,
)
from .ranking import format_excerpt, rank_by_likes, rank_by_replies

__all__ = [
    "AnalysisOutcome",
    "InvalidStageTransition",
    "OutcomeStatus",
    "PipelineJob",
    "PipelineOrchestrator",
    "PipelineOutcome",
    "SlackResponseNotifier",
    "Stage",
    "analyze_comments",
    "build_insight_result",
    "format_excerpt",
    "rank_by_likes",
    "rank_by_replies",
    "user_facing_message",
]
