"""
Unit tests for Pydantic models.
"""

import pytest

from ai_utils.models import ChatMessage, ChatResponse, ChatRole, ChatUsage, InferenceOutcome, TokenCounts


class TestChatModels:
    """Test chat-related models"""

    def test_chat_message(self):
        """Test message role accepts the wire value"""
        message = ChatMessage(role="system", content="You are an analyst")
        assert message.role == ChatRole.SYSTEM

    def test_invalid_role(self):
        """Test unknown roles are rejected"""
        with pytest.raises(ValueError):
            ChatMessage(role="tool", content="hi")

    def test_chat_response_defaults(self):
        """Test response without usage or content"""
        response = ChatResponse(model="test/model")
        assert response.content is None
        assert response.usage.total_tokens == 0


class TestTokenCounts:
    """Test token count reporting"""

    def test_from_usage(self):
        """Test conversion from provider usage"""
        counts = TokenCounts.from_usage(ChatUsage(prompt_tokens=120, completion_tokens=30, total_tokens=150))
        assert counts.model_dump() == {"input": 120, "output": 30}

    def test_negative_counts_rejected(self):
        """Test counts must not be negative"""
        with pytest.raises(ValueError):
            TokenCounts(input=-1)

    def test_inference_outcome_defaults(self):
        """Test outcome defaults"""
        outcome = InferenceOutcome(output={"a": 1}, model="test/model")
        assert outcome.token_counts.input == 0
        assert outcome.raw_text == ""
