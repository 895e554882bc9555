"""
Shared fixtures for the comment insights test suite.
"""

import pytest

from insights.config import ApifyConfig, PipelineConfig, SlackConfig, YouTubeDataConfig
from insights.schemas import RetrievedItem, VideoInfo

VIDEO_ID = "dQw4w9WgXcQ"
VIDEO_URL = f"https://www.youtube.com/watch?v={VIDEO_ID}"


class FakeClock:
    """Manual clock; ``sleep`` advances it instead of blocking."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def make_items(count: int, likes=None, replies=None) -> list[RetrievedItem]:
    """Comments with likes 1..count unless given explicitly."""
    return [
        RetrievedItem(
            text=f"comment {i}",
            author=f"user{i}",
            likes=likes[i] if likes is not None else i + 1,
            published_at="2024-01-01T00:00:00Z",
            reply_count=replies[i] if replies is not None else 0,
        )
        for i in range(count)
    ]


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def video_info():
    return VideoInfo(title="Test Video", channel="Test Channel", url=VIDEO_URL)


@pytest.fixture
def pipeline_config():
    return PipelineConfig(
        comment_provider="apify",
        apify=ApifyConfig(api_token="apify-token", poll_interval=5.0, max_wait=300.0),
        youtube=YouTubeDataConfig(api_key="yt-key"),
        slack=SlackConfig(signing_secret="slack-secret", default_model="test/model"),
        max_comments=2000,
        excerpt_size=150,
        display_top_n=5,
        inference_timeout=55.0,
        pipeline_budget=540.0,
    )


@pytest.fixture
def model_output():
    """Structured payload as returned by the model"""
    return {
        "sentiment_analysis": {
            "breakdown": {"positive": 70, "negative": 10, "neutral": 20},
            "overall_tone": "Enthusiastic and curious",
            "sentiment_drivers": {
                "positive_drivers": ["Clear explanations"],
                "negative_drivers": ["Audio quality"],
            },
        },
        "knowledge_gaps": [{"text": "How to deploy", "frequency": 12, "examples": ["how do I deploy this?"]}],
        "demand_signals": [{"text": "More tutorials", "frequency": 8, "examples": ["part 2 please"]}],
        "myths_and_misconceptions": [],
        "pain_points": [{"text": "Setup is confusing", "frequency": 5, "examples": []}],
        "likes_and_resonance": {
            "what_resonated": [{"text": "The demo", "engagement_score": 9, "examples": []}],
            "what_fell_flat": [],
        },
        "top_comments": {"most_liked": [], "most_discussed": []},
        "actionable_recommendations": ["Make a deployment video", "Improve audio"],
    }
