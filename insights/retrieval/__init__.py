"""
Comment retrieval strategies.

The strategy is selected by ``PipelineConfig.comment_provider``: ``apify``
runs a scraper job and polls it, ``youtube_api`` pages the YouTube Data API.
"""

from ..config import PipelineConfig
from .apify_service import ApifyCommentRetriever
from .base import CommentRetriever
from .utils import extract_video_id, is_youtube_url
from .youtube_data_service import YouTubeDataCommentRetriever


def build_comment_retriever(config: PipelineConfig, **kwargs) -> CommentRetriever:
    """Create the retriever selected by configuration."""
    if config.comment_provider == "youtube_api":
        return YouTubeDataCommentRetriever(config.youtube, **kwargs)
    return ApifyCommentRetriever(config.apify, **kwargs)


__all__ = [
    "CommentRetriever",
    "ApifyCommentRetriever",
    "YouTubeDataCommentRetriever",
    "build_comment_retriever",
    "extract_video_id",
    "is_youtube_url",
]
