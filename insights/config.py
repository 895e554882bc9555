"""
Pipeline configuration.

Every component receives the relevant section of ``PipelineConfig`` at
construction time; nothing below the Celery task and the views reads the
environment.
"""

import os
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


class ApifyConfig(BaseModel):
    """Job-based retrieval through an Apify actor"""
    api_token: str = Field(default="", description="Apify API token")
    base_url: str = Field(default="https://api.apify.com/v2", description="Apify API root")
    actor_id: str = Field(default="bernardo~youtube-comment-scraper", description="Comment scraper actor")
    poll_interval: float = Field(default=5.0, gt=0, description="Seconds between run status checks")
    max_wait: float = Field(default=300.0, gt=0, description="Ceiling for a run to leave the running state")
    request_timeout: float = Field(default=30.0, gt=0, description="Timeout for a single Apify HTTP call")


class YouTubeDataConfig(BaseModel):
    """Paged retrieval through the YouTube Data API v3"""
    api_key: str = Field(default="", description="YouTube Data API key")
    base_url: str = Field(default="https://www.googleapis.com/youtube/v3", description="API root")
    page_size: int = Field(default=100, ge=1, le=100, description="commentThreads maxResults (provider max is 100)")
    order: Literal["relevance", "time"] = Field(default="relevance", description="Comment ordering")
    request_timeout: float = Field(default=30.0, gt=0, description="Timeout for a single page request")


class SlackConfig(BaseModel):
    """Chat-ops trigger settings"""
    signing_secret: str = Field(default="", description="Slack app signing secret")
    replay_window: int = Field(default=300, gt=0, description="Max request age in seconds")
    callback_timeout: float = Field(default=10.0, gt=0, description="Timeout for a response_url delivery")
    default_model: str = Field(default="google/gemini-2.0-flash-exp:free", description="Model used for slash commands")


class PipelineConfig(BaseModel):
    """Main pipeline configuration container"""
    comment_provider: Literal["apify", "youtube_api"] = Field(default="apify", description="Retrieval strategy")
    apify: ApifyConfig = Field(default_factory=ApifyConfig)
    youtube: YouTubeDataConfig = Field(default_factory=YouTubeDataConfig)
    slack: SlackConfig = Field(default_factory=SlackConfig)

    max_comments: int = Field(default=2000, ge=1, description="Global cap on retrieved comments")
    excerpt_size: int = Field(default=150, ge=1, description="Top-K comments by likes sent to the model")
    display_top_n: int = Field(default=5, ge=1, description="Size of the most liked / most discussed views")
    inference_timeout: float = Field(default=55.0, gt=0, description="Hard deadline for one inference call")
    pipeline_budget: float = Field(default=540.0, gt=0, description="Overall wall-clock budget of one job")

    @classmethod
    def from_env(cls) -> "PipelineConfig":
        """Create configuration from environment variables"""
        return cls(
            comment_provider=os.getenv("COMMENT_PROVIDER", "apify"),
            apify=ApifyConfig(
                api_token=os.getenv("APIFY_API_KEY", ""),
                actor_id=os.getenv("APIFY_ACTOR_ID", "bernardo~youtube-comment-scraper"),
                poll_interval=float(os.getenv("APIFY_POLL_INTERVAL", "5")),
                max_wait=float(os.getenv("APIFY_MAX_WAIT", "300")),
            ),
            youtube=YouTubeDataConfig(
                api_key=os.getenv("YOUTUBE_API_KEY", ""),
                page_size=int(os.getenv("YOUTUBE_PAGE_SIZE", "100")),
            ),
            slack=SlackConfig(
                signing_secret=os.getenv("SLACK_SIGNING_SECRET", ""),
                replay_window=int(os.getenv("SLACK_REPLAY_WINDOW", "300")),
                callback_timeout=float(os.getenv("SLACK_CALLBACK_TIMEOUT", "10")),
                default_model=os.getenv("SLACK_DEFAULT_MODEL", os.getenv("DEFAULT_MODEL", "google/gemini-2.0-flash-exp:free")),
            ),
            max_comments=int(os.getenv("MAX_COMMENTS", "2000")),
            excerpt_size=int(os.getenv("INFERENCE_EXCERPT_SIZE", "150")),
            display_top_n=int(os.getenv("DISPLAY_TOP_N", "5")),
            inference_timeout=float(os.getenv("INFERENCE_TIMEOUT", "55")),
            pipeline_budget=float(os.getenv("PIPELINE_BUDGET", "540")),
        )

    def validate_retrieval(self) -> None:
        """Raise ValueError when the selected retrieval strategy has no credentials"""
        if self.comment_provider == "apify" and not self.apify.api_token:
            raise ValueError("APIFY_API_KEY not configured")
        if self.comment_provider == "youtube_api" and not self.youtube.api_key:
            raise ValueError("YOUTUBE_API_KEY not configured")


# Celery time limits sit above the pipeline budget so the job can report its own timeout
TASK_TIMEOUTS = {
    "pipeline_soft_limit": 600,
    "pipeline_hard_limit": 660,
}


def get_pipeline_config() -> PipelineConfig:
    """Build the pipeline configuration from the current environment"""
    return PipelineConfig.from_env()
