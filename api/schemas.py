"""
Pydantic schemas for API request validation.
Field names follow the public JSON API (camelCase).
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from insights.retrieval import extract_video_id
from insights.schemas import RetrievedItem, VideoInfo
from insights.store import HistoryEntry


class CommentRetrieveRequest(BaseModel):
    """Request schema for comment retrieval"""
    video_url: str = Field(..., alias="videoUrl", description="YouTube URL or video id")

    @field_validator('video_url', mode='before')
    @classmethod
    def validate_video_url(cls, v):
        if not v or not str(v).strip():
            raise ValueError('Video URL is required')
        v = str(v).strip()
        if not extract_video_id(v):
            raise ValueError('Invalid YouTube URL')
        return v


class CommentAnalyzeRequest(BaseModel):
    """Request schema for comment analysis"""
    model_config = ConfigDict(populate_by_name=True)

    comments: List[RetrievedItem] = Field(..., description="Comments returned by retrieval")
    video_info: VideoInfo = Field(..., alias="videoInfo")
    model: Optional[str] = Field(None, description="OpenRouter model id; default model when omitted")

    @field_validator('comments', mode='before')
    @classmethod
    def validate_comments(cls, v):
        if not v or not isinstance(v, list):
            raise ValueError('Comments are required')
        return v

    @field_validator('model')
    @classmethod
    def blank_model_is_default(cls, v):
        return v.strip() if v and v.strip() else None


class HistorySaveRequest(HistoryEntry):
    """Request schema for saving an analysis to history"""

    @field_validator('video_id', 'video_title', mode='before')
    @classmethod
    def required_text(cls, v):
        if not v or not str(v).strip():
            raise ValueError('Missing required fields')
        return v

    @field_validator('analysis', mode='before')
    @classmethod
    def required_analysis(cls, v):
        if not v or not isinstance(v, dict):
            raise ValueError('Missing required fields')
        return v

    @field_validator('total_comments', mode='before')
    @classmethod
    def default_total(cls, v):
        return v or 0

    @field_validator('video_channel', 'video_url', 'model_used', mode='before')
    @classmethod
    def default_text(cls, v):
        return v or ''


class SlackCommandForm(BaseModel):
    """Slash command payload (URL-encoded form)"""
    text: str = ""
    user_id: Optional[str] = None
    channel_id: Optional[str] = None
    response_url: Optional[str] = None

    @field_validator('text', mode='before')
    @classmethod
    def strip_text(cls, v):
        return (v or "").strip()
