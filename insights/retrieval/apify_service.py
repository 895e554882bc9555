"""
Apify comment retrieval.

Starts the YouTube comment scraper actor, polls the run until it leaves the
running state and reads the run's dataset once.
"""

import logging
import time
from typing import Any, Callable, Optional

import requests

from telemetry.exceptions import (
    InvalidInputError,
    JobFailedError,
    UpstreamFailureError,
    UpstreamTimeoutError,
)
from telemetry.resilience import Deadline

from ..config import ApifyConfig
from ..schemas import RetrievalResult, RetrievedItem, VideoInfo, watch_url
from .base import CommentRetriever
from .utils import extract_video_id

logger = logging.getLogger(__name__)

SERVICE_NAME = "Apify"
RUNNING_STATES = ("RUNNING", "READY")
SUCCEEDED = "SUCCEEDED"
TIMEOUT_MESSAGE = "Scraping timed out. Try a video with fewer comments."


class ApifyCommentRetriever(CommentRetriever):
    """Job-based retrieval through the Apify actor API"""

    name = "apify"

    def __init__(
        self,
        config: ApifyConfig,
        session: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if not config.api_token:
            raise ValueError("APIFY_API_KEY not configured")
        self.config = config
        self.session = session or requests.Session()
        self.clock = clock
        self.sleep = sleep

    def fetch(self, source_identifier: str, cap: int, deadline: Optional[Deadline] = None) -> RetrievalResult:
        video_id = extract_video_id(source_identifier)
        if not video_id:
            raise InvalidInputError("Invalid YouTube URL", field="videoUrl")
        deadline = deadline or Deadline.unbounded(clock=self.clock)

        logger.info(f"Starting Apify scrape for video: {video_id}")
        run = self._start_run(video_id, cap, deadline)
        run_id = run.get("id")
        dataset_id = run.get("defaultDatasetId")
        if not run_id or not dataset_id:
            raise UpstreamFailureError(SERVICE_NAME, "Failed to start comment scraper")
        logger.info(f"Apify run started: {run_id}")

        status = self.wait_for_run(run_id, deadline)
        if status != SUCCEEDED:
            logger.error(f"Apify run {run_id} finished with status {status}")
            raise JobFailedError(SERVICE_NAME, status, run_id=run_id)

        rows = self._fetch_dataset(dataset_id, deadline)
        items = self.clip(self._parse_rows(rows), cap)
        video_info = self._parse_video_info(rows, video_id)

        logger.info(f"Scraped {len(items)} comments for video {video_id}")
        return RetrievalResult(items=items, video_info=video_info)

    def wait_for_run(self, run_id: str, deadline: Deadline) -> str:
        """
        Poll the run status until it leaves RUNNING/READY.

        The ceiling is checked before every sleep; once it is reached no
        further status checks are made.

        Returns:
            Terminal run status reported by Apify

        Raises:
            UpstreamTimeoutError: the run did not finish within ``max_wait``
        """
        started_at = self.clock()
        status = "RUNNING"
        checks = 0

        while status in RUNNING_STATES:
            waited = self.clock() - started_at
            remaining_wait = self.config.max_wait - waited
            if remaining_wait <= 0:
                logger.error(f"Apify run {run_id} still {status} after {waited:.0f}s ({checks} checks)")
                raise UpstreamTimeoutError("comment retrieval", self.config.max_wait, message=TIMEOUT_MESSAGE)
            deadline.check("comment retrieval")

            self.sleep(deadline.bound(min(self.config.poll_interval, remaining_wait)))

            status = self._get_run_status(run_id, deadline)
            checks += 1
            logger.debug(f"Run status: {status}")

        logger.info(f"Apify run {run_id} finished with {status} after {checks} status checks")
        return status

    def _start_run(self, video_id: str, cap: int, deadline: Deadline) -> dict:
        payload = {
            "startUrls": [watch_url(video_id)],
            "maxComments": cap,
            # Replies are skipped to keep runs short
            "maxReplies": 0,
            "sortBy": "top",
        }
        response = self._request(
            "POST",
            f"{self.config.base_url}/acts/{self.config.actor_id}/runs",
            deadline,
            json=payload,
        )
        if not response.ok:
            logger.error(f"Apify run start failed: HTTP {response.status_code} {response.text[:500]}")
            raise UpstreamFailureError(SERVICE_NAME, "Failed to start comment scraper", response.status_code)
        return (self._json(response).get("data") or {})

    def _get_run_status(self, run_id: str, deadline: Deadline) -> str:
        response = self._request("GET", f"{self.config.base_url}/actor-runs/{run_id}", deadline)
        if not response.ok:
            raise UpstreamFailureError(SERVICE_NAME, "Failed to check scraper status", response.status_code)
        return str((self._json(response).get("data") or {}).get("status", "UNKNOWN"))

    def _fetch_dataset(self, dataset_id: str, deadline: Deadline) -> list:
        response = self._request(
            "GET",
            f"{self.config.base_url}/datasets/{dataset_id}/items",
            deadline,
            params={"format": "json"},
        )
        if not response.ok:
            raise UpstreamFailureError(SERVICE_NAME, "Failed to fetch results", response.status_code)
        rows = self._json(response)
        return rows if isinstance(rows, list) else []

    def _request(self, method: str, url: str, deadline: Deadline, params: Optional[dict] = None,
                 json: Optional[dict] = None) -> requests.Response:
        deadline.check("comment retrieval")
        query = {"token": self.config.api_token}
        query.update(params or {})
        timeout = deadline.bound(self.config.request_timeout)
        try:
            return self.session.request(method, url, params=query, json=json, timeout=timeout)
        except requests.exceptions.Timeout as e:
            logger.error(f"Timeout calling Apify {url}")
            raise UpstreamTimeoutError("comment retrieval", timeout, message=TIMEOUT_MESSAGE) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Request error calling Apify {url}: {e}")
            raise UpstreamFailureError(SERVICE_NAME, f"Request error: {e}") from e

    @staticmethod
    def _json(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamFailureError(SERVICE_NAME, "Invalid JSON response", response.status_code) from e

    @staticmethod
    def _parse_rows(rows: list) -> list[RetrievedItem]:
        items = []
        for row in rows:
            if not isinstance(row, dict):
                continue
            text = row.get("text") or ""
            if not text.strip():
                continue
            items.append(
                RetrievedItem(
                    text=text,
                    author=row.get("author") or "Anonymous",
                    likes=row.get("likes") or row.get("votesCount") or 0,
                    published_at=row.get("publishedAt") or row.get("date") or "",
                    reply_count=row.get("replyCount") or row.get("repliesCount") or 0,
                )
            )
        return items

    @staticmethod
    def _parse_video_info(rows: list, video_id: str) -> VideoInfo:
        first = rows[0] if rows and isinstance(rows[0], dict) else {}
        return VideoInfo(
            title=first.get("videoTitle") or f"Video {video_id}",
            channel=first.get("channelName") or "Unknown Channel",
            url=watch_url(video_id),
        )
