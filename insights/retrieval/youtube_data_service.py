"""
YouTube Data API v3 comment retrieval.

Pages through ``commentThreads`` until the cap or the last page. A page that
fails after earlier pages succeeded ends retrieval with the partial set.
"""

import logging
from typing import Optional

import requests

from telemetry.exceptions import (
    InvalidInputError,
    UpstreamFailureError,
    UpstreamTimeoutError,
    extract_error_message,
)
from telemetry.resilience import Deadline

from ..config import YouTubeDataConfig
from ..schemas import RetrievalResult, RetrievedItem, VideoInfo, watch_url
from .base import CommentRetriever
from .utils import extract_video_id

logger = logging.getLogger(__name__)

SERVICE_NAME = "YouTube Data API"
COMMENTS_DISABLED = "commentsDisabled"


class CommentsDisabled(Exception):
    """The video does not accept comments; retrieval yields no items."""


class YouTubeDataCommentRetriever(CommentRetriever):
    """Paged retrieval through the YouTube Data API"""

    name = "youtube_api"

    def __init__(self, config: YouTubeDataConfig, session: Optional[requests.Session] = None):
        if not config.api_key:
            raise ValueError("YOUTUBE_API_KEY not configured")
        self.config = config
        self.session = session or requests.Session()

    def fetch(self, source_identifier: str, cap: int, deadline: Optional[Deadline] = None) -> RetrievalResult:
        video_id = extract_video_id(source_identifier)
        if not video_id:
            raise InvalidInputError("Invalid YouTube URL", field="videoUrl")
        deadline = deadline or Deadline.unbounded()

        items = self._fetch_comments(video_id, cap, deadline)
        video_info = self.fetch_video_info(video_id, deadline)
        return RetrievalResult(items=self.clip(items, cap), video_info=video_info)

    def _fetch_comments(self, video_id: str, cap: int, deadline: Deadline) -> list[RetrievedItem]:
        items: list[RetrievedItem] = []
        page_token = None
        pages = 0

        while len(items) < cap:
            try:
                data = self._get_page(video_id, min(self.config.page_size, cap - len(items)), page_token, deadline)
            except CommentsDisabled:
                logger.info(f"Comments are disabled for video {video_id}")
                return items
            except (UpstreamFailureError, UpstreamTimeoutError) as e:
                if pages == 0:
                    raise
                logger.warning(
                    f"Page {pages + 1} failed for video {video_id}, "
                    f"keeping {len(items)} comments from {pages} pages: {e}"
                )
                return items

            pages += 1
            items.extend(self._parse_threads(data.get("items") or []))
            page_token = data.get("nextPageToken")
            if not page_token:
                break

        logger.info(f"Fetched {len(items)} comments for video {video_id} in {pages} pages")
        return items

    def _get_page(self, video_id: str, max_results: int, page_token: Optional[str], deadline: Deadline) -> dict:
        params = {
            "part": "snippet",
            "videoId": video_id,
            "maxResults": max_results,
            "order": self.config.order,
            "textFormat": "plainText",
            "key": self.config.api_key,
        }
        if page_token:
            params["pageToken"] = page_token

        deadline.check("comment retrieval")
        timeout = deadline.bound(self.config.request_timeout)
        try:
            response = self.session.get(f"{self.config.base_url}/commentThreads", params=params, timeout=timeout)
        except requests.exceptions.Timeout as e:
            raise UpstreamTimeoutError("comment retrieval", timeout) from e
        except requests.exceptions.RequestException as e:
            raise UpstreamFailureError(SERVICE_NAME, f"Request error: {e}") from e

        if response.status_code == 403 and COMMENTS_DISABLED in response.text:
            raise CommentsDisabled(video_id)
        if not response.ok:
            message = extract_error_message(response.text, default=f"HTTP {response.status_code}")
            logger.error(f"YouTube API error for video {video_id}: HTTP {response.status_code} {message}")
            raise UpstreamFailureError(SERVICE_NAME, message, response.status_code)
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamFailureError(SERVICE_NAME, "Invalid JSON response", response.status_code) from e

    @staticmethod
    def _parse_threads(threads: list) -> list[RetrievedItem]:
        items = []
        for thread in threads:
            snippet = (thread or {}).get("snippet") or {}
            comment = ((snippet.get("topLevelComment") or {}).get("snippet")) or {}
            text = comment.get("textOriginal") or comment.get("textDisplay") or ""
            if not text.strip():
                continue
            items.append(
                RetrievedItem(
                    text=text,
                    author=comment.get("authorDisplayName") or "Anonymous",
                    likes=comment.get("likeCount") or 0,
                    published_at=comment.get("publishedAt") or "",
                    reply_count=snippet.get("totalReplyCount") or 0,
                )
            )
        return items

    def fetch_video_info(self, video_id: str, deadline: Deadline) -> VideoInfo:
        """Title and channel of the video; falls back to placeholders on any error."""
        if deadline.expired():
            return VideoInfo.placeholder(video_id)
        params = {"part": "snippet", "id": video_id, "key": self.config.api_key}
        try:
            response = self.session.get(
                f"{self.config.base_url}/videos",
                params=params,
                timeout=deadline.bound(self.config.request_timeout),
            )
            response.raise_for_status()
            videos = response.json().get("items") or []
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.warning(f"Could not fetch video details for {video_id}: {e}")
            return VideoInfo.placeholder(video_id)

        if not videos:
            return VideoInfo.placeholder(video_id)
        snippet = videos[0].get("snippet") or {}
        return VideoInfo(
            title=snippet.get("title") or f"Video {video_id}",
            channel=snippet.get("channelTitle") or "Unknown Channel",
            url=watch_url(video_id),
        )
