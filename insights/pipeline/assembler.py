"""
Result assembly.

Merges the model's JSON output with views derived from the full comment set.
Each section is validated on its own; a missing or malformed section falls
back to its neutral default instead of failing the whole result.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional, Sequence, Type

from pydantic import BaseModel, TypeAdapter, ValidationError

from ..schemas import (
    AnalysisVideoInfo,
    InsightItem,
    InsightResult,
    LikesAndResonance,
    RetrievedItem,
    SentimentAnalysis,
    SentimentBreakdown,
    SentimentDrivers,
    TopComments,
    VideoInfo,
)
from .ranking import rank_by_likes, rank_by_replies

logger = logging.getLogger(__name__)

INSIGHT_CATEGORIES = (
    "knowledge_gaps",
    "demand_signals",
    "myths_and_misconceptions",
    "pain_points",
)

_insight_list = TypeAdapter(list[InsightItem])
_string_list = TypeAdapter(list[str])


def _section(raw: dict, key: str, model: Type[BaseModel], default: BaseModel) -> Any:
    value = raw.get(key)
    if value is None:
        return default
    if not isinstance(value, dict):
        logger.warning(f"Model output section '{key}' has type {type(value).__name__}, using default")
        return default
    try:
        return model.model_validate(value)
    except ValidationError as e:
        logger.warning(f"Model output section '{key}' is malformed, using default: {e.error_count()} errors")
        return default


def _list_section(raw: dict, key: str, adapter: TypeAdapter) -> list:
    value = raw.get(key)
    if value is None:
        return []
    try:
        return adapter.validate_python(value)
    except ValidationError as e:
        logger.warning(f"Model output list '{key}' is malformed, using []: {e.error_count()} errors")
        return []


def _sentiment(raw: dict) -> SentimentAnalysis:
    section = raw.get("sentiment_analysis")
    if not isinstance(section, dict):
        if section is not None:
            logger.warning("Model output section 'sentiment_analysis' is not an object, using default")
        return SentimentAnalysis()

    breakdown = _section(section, "breakdown", SentimentBreakdown, SentimentBreakdown())
    drivers = _section(section, "sentiment_drivers", SentimentDrivers, SentimentDrivers())
    tone = section.get("overall_tone")
    return SentimentAnalysis(
        breakdown=breakdown,
        overall_tone=tone if isinstance(tone, str) and tone else "Mixed",
        sentiment_drivers=drivers,
    )


def build_insight_result(
    raw: dict,
    items: Sequence[RetrievedItem],
    video_info: VideoInfo,
    top_n: int = 5,
    now: Optional[datetime] = None,
) -> InsightResult:
    """
    Build the final analysis from model output and the full comment set.

    Args:
        raw: Parsed JSON object returned by the model
        items: Every retrieved comment, not only the inference excerpt
        video_info: Video details from retrieval
        top_n: Size of the most liked / most discussed views
        now: Analysis timestamp, current UTC time when None

    Returns:
        InsightResult with defaults filled for missing sections and
        ``top_comments`` recomputed from ``items``
    """
    raw = raw if isinstance(raw, dict) else {}
    timestamp = (now or datetime.now(timezone.utc)).isoformat()

    categories = {key: _list_section(raw, key, _insight_list) for key in INSIGHT_CATEGORIES}

    return InsightResult(
        video_info=AnalysisVideoInfo(
            title=video_info.title,
            channel=video_info.channel,
            url=video_info.url,
            total_comments_analyzed=len(items),
            analysis_timestamp=timestamp,
        ),
        sentiment_analysis=_sentiment(raw),
        likes_and_resonance=_section(raw, "likes_and_resonance", LikesAndResonance, LikesAndResonance()),
        top_comments=TopComments(
            most_liked=rank_by_likes(items, top_n),
            most_discussed=rank_by_replies(items, top_n),
        ),
        actionable_recommendations=_list_section(raw, "actionable_recommendations", _string_list),
        **categories,
    )
