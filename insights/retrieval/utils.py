"""
Video identifier parsing for the retrieval strategies.
"""

import re
from typing import Optional
from urllib.parse import parse_qs, urlparse

VIDEO_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{11}$")

YOUTUBE_HOSTS = {"www.youtube.com", "youtube.com", "m.youtube.com", "music.youtube.com"}


def extract_video_id(url_or_id: str) -> Optional[str]:
    """
    Extract a YouTube video ID from a URL or a bare ID.

    Supports:
    - https://www.youtube.com/watch?v=VIDEO_ID
    - https://youtu.be/VIDEO_ID
    - https://www.youtube.com/embed/VIDEO_ID
    - https://www.youtube.com/v/VIDEO_ID
    - https://www.youtube.com/shorts/VIDEO_ID
    - VIDEO_ID (11 characters)

    Args:
        url_or_id: YouTube video URL or ID

    Returns:
        str: Video ID if found, None otherwise
    """
    if not url_or_id:
        return None
    value = url_or_id.strip()

    if VIDEO_ID_PATTERN.match(value):
        return value

    if "://" not in value:
        value = f"https://{value}"
    parsed = urlparse(value)
    host = (parsed.hostname or "").lower()

    candidate = None
    if host == "youtu.be":
        candidate = parsed.path.lstrip("/").split("/")[0]
    elif host in YOUTUBE_HOSTS:
        if parsed.path == "/watch":
            candidate = parse_qs(parsed.query).get("v", [None])[0]
        else:
            parts = [p for p in parsed.path.split("/") if p]
            if len(parts) >= 2 and parts[0] in ("embed", "v", "shorts"):
                candidate = parts[1]

    if candidate and VIDEO_ID_PATTERN.match(candidate):
        return candidate
    return None


def is_youtube_url(text: str) -> bool:
    """Loose check used on chat-ops input before a job is queued"""
    return "youtube.com" in text or "youtu.be" in text
