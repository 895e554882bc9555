"""
Abstract interface for LLM providers.
Defines the contract for chat completion used by the inference stage.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..models import ChatMessage, ChatResponse


class LLMProvider(ABC):
    """Abstract interface for LLM providers"""

    @abstractmethod
    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> ChatResponse:
        """
        Run one chat completion.

        Args:
            messages: Conversation to complete (system + user prompts)
            model: Model identifier, provider default when None
            temperature: Generation temperature
            max_tokens: Maximum tokens to generate

        Returns:
            Chat response with content and token usage

        Raises:
            UpstreamFailureError: the service answered with a non-success status
        """

    @abstractmethod
    def get_default_model(self) -> str:
        """Model used when the caller does not request one."""

    async def health_check(self) -> bool:
        """
        Check if the LLM provider is healthy.

        Returns:
            True if healthy, False otherwise
        """
        return True

    async def aclose(self) -> None:
        """Release network resources held by the provider."""
