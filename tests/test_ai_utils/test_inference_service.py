"""
Unit tests for the bounded inference service.
"""

import asyncio
import json
import time

import pytest

from ai_utils.models import ChatResponse, ChatRole, ChatUsage
from ai_utils.services.inference_service import (
    InferenceService,
    parse_structured_output,
    strip_code_fences,
)
from telemetry.exceptions import MalformedOutputError, UpstreamFailureError, UpstreamTimeoutError


class FakeProvider:
    """LLM provider returning canned content after an optional delay"""

    def __init__(self, content=None, delay=0.0):
        self.content = content
        self.delay = delay
        self.calls = []
        self.cancelled = False
        self.closed = False

    async def aclose(self):
        self.closed = True

    def get_default_model(self):
        return "default/model"

    async def chat_completion(self, messages, model=None, temperature=None, max_tokens=None):
        self.calls.append({"messages": messages, "model": model})
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return ChatResponse(
            model=model,
            content=self.content,
            usage=ChatUsage(prompt_tokens=500, completion_tokens=80, total_tokens=580),
        )


VALID_OUTPUT = {"knowledge_gaps": [], "actionable_recommendations": ["Post more"]}


class TestStructuredOutput:
    """Test parsing of model text"""

    def test_strip_json_fence(self):
        """Test ```json fences are removed"""
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_strip_plain_fence(self):
        """Test bare ``` fences are removed"""
        assert strip_code_fences('```\n{"a": 1}```') == '{"a": 1}'

    def test_parse_fenced_output(self):
        """Test fenced JSON parses to a dict"""
        assert parse_structured_output('```json\n{"a": 1}\n```') == {"a": 1}

    def test_invalid_json(self):
        """Test non-JSON text carries the raw text"""
        with pytest.raises(MalformedOutputError) as exc_info:
            parse_structured_output("Here is your analysis: great video!")
        assert exc_info.value.message == "Failed to parse analysis results"
        assert exc_info.value.raw_text == "Here is your analysis: great video!"

    def test_json_array_rejected(self):
        """Test a JSON value that is not an object"""
        with pytest.raises(MalformedOutputError):
            parse_structured_output("[1, 2, 3]")


class TestInferenceService:
    """Test the bounded inference call"""

    def test_successful_inference(self):
        """Test output, model and token counts"""
        provider = FakeProvider(content=json.dumps(VALID_OUTPUT))
        service = InferenceService(provider, default_deadline=5.0)

        outcome = service.infer("system", "user", model="test/model")

        assert outcome.output == VALID_OUTPUT
        assert outcome.model == "test/model"
        assert outcome.token_counts.input == 500
        assert outcome.token_counts.output == 80
        messages = provider.calls[0]["messages"]
        assert [m.role for m in messages] == [ChatRole.SYSTEM, ChatRole.USER]

    def test_default_model(self):
        """Test the provider default is used when no model is requested"""
        provider = FakeProvider(content="{}")
        outcome = InferenceService(provider).infer("system", "user")
        assert outcome.model == "default/model"

    def test_deadline_cancels_slow_call(self):
        """Test the call returns within the deadline and the request is cancelled"""
        provider = FakeProvider(content="{}", delay=10.0)
        service = InferenceService(provider)
        deadline = 0.5

        start = time.perf_counter()
        with pytest.raises(UpstreamTimeoutError) as exc_info:
            service.infer("system", "user", deadline=deadline)
        elapsed = time.perf_counter() - start

        assert elapsed < deadline * 1.1
        assert provider.cancelled is True
        assert exc_info.value.status_code == 504
        assert exc_info.value.message == "Request timed out. Try a faster model or fewer comments."

    def test_spent_deadline_skips_call(self):
        """Test a zero deadline fails without calling the provider"""
        provider = FakeProvider(content="{}")
        with pytest.raises(UpstreamTimeoutError):
            InferenceService(provider).infer("system", "user", deadline=0)
        assert provider.calls == []

    def test_empty_content(self):
        """Test an empty completion"""
        provider = FakeProvider(content="")
        with pytest.raises(UpstreamFailureError) as exc_info:
            InferenceService(provider).infer("system", "user")
        assert exc_info.value.provider_message == "No analysis generated"

    def test_malformed_content(self):
        """Test unparseable completion"""
        provider = FakeProvider(content="not json")
        with pytest.raises(MalformedOutputError):
            InferenceService(provider).infer("system", "user")

    def test_provider_closed_after_call(self):
        """Test the provider client is released once the call returns"""
        provider = FakeProvider(content="{}")
        InferenceService(provider).infer("system", "user")
        assert provider.closed is True

    def test_provider_closed_after_timeout(self):
        """Test the provider client is released when the deadline cancels the call"""
        provider = FakeProvider(content="{}", delay=10.0)
        with pytest.raises(UpstreamTimeoutError):
            InferenceService(provider).infer("system", "user", deadline=0.05)
        assert provider.closed is True

    @pytest.mark.asyncio
    async def test_async_entry_point(self):
        """Test ainfer inside a running loop"""
        provider = FakeProvider(content='```json\n{"pain_points": []}\n```')
        outcome = await InferenceService(provider).ainfer("system", "user")
        assert outcome.output == {"pain_points": []}
