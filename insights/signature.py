"""
Slack request signature verification.

Runs on the raw request body before any form or JSON decoding.
"""

import hashlib
import hmac
import logging
import time
from typing import Optional, Union

logger = logging.getLogger(__name__)

SIGNATURE_VERSION = "v0"
REPLAY_WINDOW_SECONDS = 300


def compute_slack_signature(raw_body: Union[bytes, str], timestamp: str, signing_secret: str) -> str:
    """Return the ``v0=<hex>`` HMAC-SHA256 signature Slack would send."""
    if isinstance(raw_body, str):
        raw_body = raw_body.encode("utf-8")
    basestring = f"{SIGNATURE_VERSION}:{timestamp}:".encode("utf-8") + raw_body
    digest = hmac.new(signing_secret.encode("utf-8"), basestring, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_VERSION}={digest}"


def verify_slack_signature(
    raw_body: Union[bytes, str],
    signature: Optional[str],
    timestamp: Optional[str],
    signing_secret: Optional[str],
    now: Optional[float] = None,
    replay_window: int = REPLAY_WINDOW_SECONDS,
) -> bool:
    """
    Check that a request was signed by Slack and is recent.

    Args:
        raw_body: Request body exactly as received
        signature: ``X-Slack-Signature`` header
        timestamp: ``X-Slack-Request-Timestamp`` header
        signing_secret: App signing secret
        now: Current Unix time, ``time.time()`` when None
        replay_window: Maximum age of the timestamp in seconds

    Returns:
        True only if every header is present, the timestamp is within the
        replay window and the signature matches
    """
    if not signing_secret:
        logger.error("SLACK_SIGNING_SECRET not configured")
        return False
    if not signature or not timestamp:
        return False

    try:
        request_time = int(timestamp)
    except (TypeError, ValueError):
        return False

    current = time.time() if now is None else now
    if abs(current - request_time) > replay_window:
        logger.warning(f"Rejected Slack request outside replay window (timestamp {request_time})")
        return False

    expected = compute_slack_signature(raw_body, timestamp, signing_secret)
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))
