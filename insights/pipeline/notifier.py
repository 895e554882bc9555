"""
Slack ``response_url`` delivery.

Deliveries are best-effort: a single POST, no retry, failures are logged and
reported as ``False``. Messages go out in the order ``notify`` is called.
"""

import logging
from typing import Optional

import requests

from ..schemas import CallbackDelivery

logger = logging.getLogger(__name__)


class SlackResponseNotifier:
    """Posts progress and result messages to a Slack response_url"""

    def __init__(self, timeout: float = 10.0, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.deliveries: list[CallbackDelivery] = []

    def notify(self, address: str, payload: dict) -> bool:
        """
        Send one message.

        Args:
            address: Callback URL supplied by Slack
            payload: Slack message body (``text`` and optional ``blocks``)

        Returns:
            True if Slack accepted the message, False otherwise
        """
        delivery = CallbackDelivery(address=address, payload=payload, attempt=len(self.deliveries) + 1)
        self.deliveries.append(delivery)

        try:
            response = self.session.post(address, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Slack delivery #{delivery.attempt} failed: {e}")
            return False

        if not response.ok:
            logger.error(f"Slack delivery #{delivery.attempt} rejected: HTTP {response.status_code} {response.text[:200]}")
            return False

        delivery.delivered = True
        logger.info(f"Slack delivery #{delivery.attempt} sent")
        return True
