"""
Analysis history storage backed by the Django ORM.
"""

import logging
import uuid
from typing import Any, Dict, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError
from pydantic import BaseModel, ConfigDict, Field

from telemetry.exceptions import PersistenceError

from .models import AnalysisRecord

logger = logging.getLogger(__name__)


class HistoryEntry(BaseModel):
    """Analysis to be saved; accepts the public camelCase field names"""
    model_config = ConfigDict(populate_by_name=True)

    video_id: str = Field(..., alias="videoId")
    video_title: str = Field(..., alias="videoTitle")
    video_channel: str = Field(default="", alias="videoChannel")
    video_url: str = Field(default="", alias="videoUrl")
    model_used: str = Field(default="", alias="modelUsed")
    total_comments: int = Field(default=0, ge=0, alias="totalComments")
    analysis: Dict[str, Any] = Field(...)
    tokens_used: Optional[Dict[str, int]] = Field(default=None, alias="tokensUsed")


class HistoryStore:
    """Saves and reads AnalysisRecord rows"""

    def save(self, entry: HistoryEntry) -> str:
        """
        Persist an analysis.

        Returns:
            Id of the new record

        Raises:
            PersistenceError: the database rejected the write
        """
        try:
            record = AnalysisRecord.objects.create(
                video_id=entry.video_id,
                video_title=entry.video_title,
                video_channel=entry.video_channel,
                video_url=entry.video_url,
                model_used=entry.model_used,
                total_comments=entry.total_comments,
                analysis=entry.analysis,
                tokens_used=entry.tokens_used,
            )
        except DatabaseError as e:
            logger.error(f"Failed to save analysis for video {entry.video_id}: {e}")
            raise PersistenceError(f"Failed to save analysis: {e}") from e

        logger.info(f"Saved analysis {record.id} for video {entry.video_id}")
        return str(record.id)

    def list_recent(self, limit: int = 50) -> list[dict]:
        """Most recent analyses first, summary fields only."""
        try:
            records = AnalysisRecord.objects.order_by("-created_at")[:limit]
            return [record.to_summary() for record in records]
        except DatabaseError as e:
            raise PersistenceError(f"Failed to fetch history: {e}", operation="list") from e

    def get(self, record_id: str) -> Optional[dict]:
        """Full record, or None if the id is unknown or not a UUID."""
        try:
            uuid.UUID(str(record_id))
        except ValueError:
            return None
        try:
            record = AnalysisRecord.objects.filter(pk=record_id).first()
        except (DatabaseError, DjangoValidationError) as e:
            raise PersistenceError(f"Failed to fetch analysis: {e}", operation="get") from e
        return record.to_dict() if record else None
