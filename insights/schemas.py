"""
Pydantic models for the comment insights pipeline.

Wire names follow the public JSON API (``publishedAt``, ``replyCount``,
``videoInfo``); attribute names stay snake_case in Python.
"""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RetrievedItem(BaseModel):
    """A single audience comment"""
    model_config = ConfigDict(populate_by_name=True)

    text: str = Field(..., description="Comment body")
    author: str = Field(default="Anonymous", description="Display name of the commenter")
    likes: int = Field(default=0, ge=0, description="Like count, used as the ranking weight")
    published_at: str = Field(default="", alias="publishedAt", description="Provider timestamp")
    reply_count: int = Field(default=0, ge=0, alias="replyCount", description="Number of replies")

    @field_validator("likes", "reply_count", mode="before")
    @classmethod
    def coerce_count(cls, v):
        """Providers report counts as ints, numeric strings or null"""
        if v is None or v == "":
            return 0
        try:
            return max(0, int(v))
        except (TypeError, ValueError):
            return 0

    def to_api(self) -> dict:
        return self.model_dump(by_alias=True)


class VideoInfo(BaseModel):
    """Video details reported alongside the comments"""
    title: str = Field(..., description="Video title")
    channel: str = Field(default="Unknown Channel", description="Channel name")
    url: str = Field(..., description="Canonical watch URL")

    @classmethod
    def placeholder(cls, video_id: str) -> "VideoInfo":
        """Video info used when the provider reports no details"""
        return cls(
            title=f"Video {video_id}",
            channel="Unknown Channel",
            url=watch_url(video_id),
        )


class RetrievalResult(BaseModel):
    """Output of one comment retrieval"""
    items: List[RetrievedItem] = Field(default_factory=list)
    video_info: VideoInfo

    @property
    def total_count(self) -> int:
        return len(self.items)

    def to_api(self) -> dict:
        return {
            "comments": [item.to_api() for item in self.items],
            "videoInfo": self.video_info.model_dump(),
            "totalComments": self.total_count,
        }


class TriggerRequest(BaseModel):
    """Accepted pipeline trigger; immutable once created"""
    model_config = ConfigDict(frozen=True)

    source_identifier: str = Field(..., min_length=1, description="Video URL or id")
    callback_address: Optional[str] = Field(None, description="Slack response_url for follow-ups")
    requested_model: Optional[str] = Field(None, description="Model override")
    user_id: Optional[str] = Field(None, description="Slack user who issued the command")
    channel_id: Optional[str] = Field(None, description="Slack channel of the command")


# Insight result

class SentimentBreakdown(BaseModel):
    positive: int = 33
    negative: int = 33
    neutral: int = 34

    @field_validator("positive", "negative", "neutral", mode="before")
    @classmethod
    def round_percentage(cls, v):
        if isinstance(v, float):
            return round(v)
        return v


class SentimentDrivers(BaseModel):
    positive_drivers: List[str] = Field(default_factory=list)
    negative_drivers: List[str] = Field(default_factory=list)


class SentimentAnalysis(BaseModel):
    breakdown: SentimentBreakdown = Field(default_factory=SentimentBreakdown)
    overall_tone: str = "Mixed"
    sentiment_drivers: SentimentDrivers = Field(default_factory=SentimentDrivers)


class InsightItem(BaseModel):
    """One recurring theme found by the model"""
    text: str
    frequency: Optional[Union[int, float]] = None
    examples: List[str] = Field(default_factory=list)
    engagement_score: Optional[Union[int, float]] = None


class LikesAndResonance(BaseModel):
    what_resonated: List[InsightItem] = Field(default_factory=list)
    what_fell_flat: List[InsightItem] = Field(default_factory=list)


class TopComments(BaseModel):
    most_liked: List[RetrievedItem] = Field(default_factory=list)
    most_discussed: List[RetrievedItem] = Field(default_factory=list)


class AnalysisVideoInfo(BaseModel):
    title: str
    channel: str
    url: str
    total_comments_analyzed: int
    analysis_timestamp: str


class InsightResult(BaseModel):
    """Assembled analysis of one video's comments"""
    video_info: AnalysisVideoInfo
    sentiment_analysis: SentimentAnalysis = Field(default_factory=SentimentAnalysis)
    knowledge_gaps: List[InsightItem] = Field(default_factory=list)
    demand_signals: List[InsightItem] = Field(default_factory=list)
    myths_and_misconceptions: List[InsightItem] = Field(default_factory=list)
    pain_points: List[InsightItem] = Field(default_factory=list)
    likes_and_resonance: LikesAndResonance = Field(default_factory=LikesAndResonance)
    top_comments: TopComments = Field(default_factory=TopComments)
    actionable_recommendations: List[str] = Field(default_factory=list)

    def to_api(self) -> dict:
        # Comments inside top_comments use the public camelCase names
        return self.model_dump(by_alias=True)


class CallbackDelivery(BaseModel):
    """Record of one message posted to a callback address"""
    address: str
    payload: dict
    attempt: int = Field(..., ge=1)
    delivered: bool = False
    sent_at: datetime = Field(default_factory=datetime.now)


def watch_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={video_id}"
