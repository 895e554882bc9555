"""
Bounded Inference Service
Runs one structured-output LLM call under a hard deadline and parses its JSON result.
"""

import asyncio
import json
import logging
import re
import time
from typing import Any, Optional

from telemetry.exceptions import MalformedOutputError, UpstreamFailureError, UpstreamTimeoutError
from telemetry.resilience import with_timeout

from ..interfaces.llm import LLMProvider
from ..models import ChatMessage, ChatRole, InferenceOutcome, TokenCounts

logger = logging.getLogger(__name__)

# Matches ```json / ``` fences anywhere in the model text
CODE_FENCE_PATTERN = re.compile(r"```(?:json)?\n?")


def strip_code_fences(text: str) -> str:
    """Remove markdown code-fence markup surrounding a JSON payload."""
    return CODE_FENCE_PATTERN.sub("", text).strip()


def parse_structured_output(text: str) -> dict[str, Any]:
    """
    Parse model text as a JSON object.

    Raises:
        MalformedOutputError: the text is not a JSON object; carries the raw text
    """
    cleaned = strip_code_fences(text)
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse AI response ({len(text)} chars): {text[:1000]}")
        raise MalformedOutputError("Failed to parse analysis results", raw_text=text) from e

    if not isinstance(parsed, dict):
        logger.error(f"AI response is JSON but not an object: {type(parsed).__name__}")
        raise MalformedOutputError("Analysis result is not a JSON object", raw_text=text)
    return parsed


class InferenceService:
    """
    Structured inference with a hard wall-clock deadline.

    The provider call is awaited through ``asyncio.wait_for``; when the deadline
    elapses the in-flight request is cancelled and UpstreamTimeoutError is raised.
    """

    def __init__(self, provider: LLMProvider, default_deadline: float = 55.0):
        self.provider = provider
        self.default_deadline = default_deadline

    async def ainfer(
        self,
        system_prompt: str,
        user_prompt: str,
        model: Optional[str] = None,
        deadline: Optional[float] = None,
    ) -> InferenceOutcome:
        """Run the inference call; see ``infer`` for the contract."""
        timeout = self.default_deadline if deadline is None else deadline
        model_name = model or self.provider.get_default_model()
        if timeout <= 0:
            raise UpstreamTimeoutError("inference", 0.0)

        messages = [
            ChatMessage(role=ChatRole.SYSTEM, content=system_prompt),
            ChatMessage(role=ChatRole.USER, content=user_prompt),
        ]

        start_time = time.perf_counter()
        logger.info(f"Running inference with {model_name} (deadline {timeout:.1f}s)")
        response = await with_timeout(
            self.provider.chat_completion(messages=messages, model=model_name),
            timeout_seconds=timeout,
            operation="inference",
            error_message="Request timed out. Try a faster model or fewer comments.",
        )
        elapsed_ms = (time.perf_counter() - start_time) * 1000

        content = response.content
        if not content:
            raise UpstreamFailureError("OpenRouter", "No analysis generated")

        output = parse_structured_output(content)
        logger.info(
            f"Inference completed in {elapsed_ms:.0f}ms "
            f"({response.usage.prompt_tokens} in / {response.usage.completion_tokens} out)"
        )
        return InferenceOutcome(
            output=output,
            token_counts=TokenCounts.from_usage(response.usage),
            model=model_name,
            raw_text=content,
            elapsed_ms=elapsed_ms,
        )

    def infer(
        self,
        system_prompt: str,
        user_prompt: str,
        model: Optional[str] = None,
        deadline: Optional[float] = None,
    ) -> InferenceOutcome:
        """
        Synchronous entry point used by Celery tasks and DRF views.

        Runs on a fresh event loop and closes the provider before the loop
        closes, so a service built by ``build_inference_service`` serves one call.

        Args:
            system_prompt: Instructions describing the expected JSON structure
            user_prompt: Video details and the ranked comment excerpt
            model: Model identifier, provider default when None
            deadline: Seconds allowed for the call, ``default_deadline`` when None

        Returns:
            InferenceOutcome with the parsed JSON object and token counts

        Raises:
            UpstreamTimeoutError: the deadline elapsed; the call was cancelled
            UpstreamFailureError: the service returned a non-success response
            MalformedOutputError: the output is not a JSON object
        """
        loop = asyncio.new_event_loop()
        try:
            return loop.run_until_complete(
                self.ainfer(system_prompt, user_prompt, model=model, deadline=deadline)
            )
        finally:
            # The provider's HTTP client is bound to this loop and closes with it
            try:
                loop.run_until_complete(self.provider.aclose())
            finally:
                loop.close()
