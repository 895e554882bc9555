"""
Unit tests for Slack response_url delivery.
"""

from unittest.mock import MagicMock

import requests

from insights.pipeline import SlackResponseNotifier

CALLBACK = "https://hooks.slack.com/commands/T1/B2/xyz"


def make_notifier(response=None, error=None):
    session = MagicMock()
    if error is not None:
        session.post.side_effect = error
    else:
        session.post.return_value = response
    return SlackResponseNotifier(timeout=10, session=session), session


def ok_response():
    response = MagicMock()
    response.ok = True
    response.status_code = 200
    return response


class TestSlackResponseNotifier:

    def test_posts_payload(self):
        notifier, session = make_notifier(ok_response())

        assert notifier.notify(CALLBACK, {"text": "hello"}) is True

        session.post.assert_called_once_with(CALLBACK, json={"text": "hello"}, timeout=10)
        assert notifier.deliveries[0].delivered is True
        assert notifier.deliveries[0].attempt == 1

    def test_rejected_response(self):
        response = MagicMock()
        response.ok = False
        response.status_code = 404
        response.text = "expired_url"
        notifier, _ = make_notifier(response)

        assert notifier.notify(CALLBACK, {"text": "hello"}) is False
        assert notifier.deliveries[0].delivered is False

    def test_transport_error_not_retried(self):
        notifier, session = make_notifier(error=requests.exceptions.ConnectionError("down"))

        assert notifier.notify(CALLBACK, {"text": "hello"}) is False
        assert session.post.call_count == 1

    def test_deliveries_numbered_in_call_order(self):
        notifier, _ = make_notifier(ok_response())

        notifier.notify(CALLBACK, {"text": "first"})
        notifier.notify(CALLBACK, {"text": "second"})

        assert [(d.attempt, d.payload["text"]) for d in notifier.deliveries] == [(1, "first"), (2, "second")]
