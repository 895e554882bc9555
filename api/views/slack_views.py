"""
Slack Views - /analyze slash command and interactivity events.

Both endpoints verify the Slack signature on the raw body before decoding it.
The command view only validates and enqueues; the pipeline runs in a Celery
worker and reports back through the command's response_url.
"""
import json

from django.http import HttpRequest, JsonResponse, QueryDict
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods
from pydantic import ValidationError

from insights import slack_blocks
from insights.config import get_pipeline_config
from insights.retrieval import extract_video_id, is_youtube_url
from insights.schemas import TriggerRequest
from insights.signature import verify_slack_signature
from insights.tasks import run_comment_pipeline
from telemetry.exceptions import UnauthenticatedError
from telemetry.logging import get_logger

from ..schemas import SlackCommandForm

logger = get_logger(__name__)


def _is_signed(request: HttpRequest, slack_config) -> bool:
    return verify_slack_signature(
        request.body,
        request.headers.get("X-Slack-Signature"),
        request.headers.get("X-Slack-Request-Timestamp"),
        slack_config.signing_secret,
        replay_window=slack_config.replay_window,
    )


def _unauthorized() -> JsonResponse:
    return JsonResponse({"error": UnauthenticatedError().message}, status=401)


@csrf_exempt
@require_http_methods(["POST"])
def slack_command(request: HttpRequest) -> JsonResponse:
    """
    Handle ``/analyze <youtube url>``.

    Replies with an ephemeral acknowledgement inside Slack's 3 second window
    and queues the comment pipeline.
    """
    slack_config = get_pipeline_config().slack
    if not _is_signed(request, slack_config):
        logger.warning("Rejected Slack command with invalid signature")
        return _unauthorized()

    try:
        form = SlackCommandForm.model_validate(QueryDict(request.body.decode("utf-8")).dict())
    except (UnicodeDecodeError, ValidationError) as e:
        logger.warning(f"Malformed Slack command body: {e}")
        return JsonResponse(slack_blocks.usage_message())

    if not form.text:
        return JsonResponse(slack_blocks.usage_message())
    if not is_youtube_url(form.text) or not extract_video_id(form.text):
        return JsonResponse(slack_blocks.invalid_url_message())

    trigger = TriggerRequest(
        source_identifier=form.text,
        callback_address=form.response_url,
        requested_model=slack_config.default_model,
        user_id=form.user_id,
        channel_id=form.channel_id,
    )

    try:
        result = run_comment_pipeline.delay(trigger.model_dump())
    except Exception as e:
        logger.error(f"Failed to queue comment pipeline: {e}", exc_info=True)
        return JsonResponse({
            "response_type": "ephemeral",
            "text": "❌ An error occurred while processing your request.",
        })

    logger.info(f"Queued comment pipeline {result.id} for {form.text} (user={form.user_id}, channel={form.channel_id})")
    return JsonResponse(slack_blocks.acknowledgement_message(form.text))


@csrf_exempt
@require_http_methods(["POST"])
def slack_events(request: HttpRequest) -> JsonResponse:
    """
    Handle Events API and interactivity requests.

    Answers ``url_verification`` challenges and acknowledges everything else,
    including ``block_actions`` from the report's buttons.
    """
    slack_config = get_pipeline_config().slack
    if not _is_signed(request, slack_config):
        logger.warning("Rejected Slack event with invalid signature")
        return _unauthorized()

    try:
        body = request.body.decode("utf-8")
        # Interactivity payloads arrive form-encoded as payload=<json>
        if request.content_type == "application/x-www-form-urlencoded":
            body = QueryDict(body).get("payload", "")
        payload = json.loads(body)
    except (UnicodeDecodeError, ValueError):
        return JsonResponse({"error": "Invalid payload"}, status=400)

    if not isinstance(payload, dict):
        return JsonResponse({"error": "Invalid payload"}, status=400)

    if payload.get("type") == "url_verification":
        return JsonResponse({"challenge": payload.get("challenge")})

    if payload.get("type") == "block_actions":
        actions = [a.get("action_id") for a in payload.get("actions") or [] if isinstance(a, dict)]
        logger.info(f"Slack block actions: {actions}")

    return JsonResponse({"ok": True})
