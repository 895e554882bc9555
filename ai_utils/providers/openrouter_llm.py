"""
OpenRouter LLM Provider Implementation
Handles chat completions through OpenRouter's OpenAI-compatible API
"""

import json
import logging
from typing import Optional

from openai import APIConnectionError, APIStatusError, APITimeoutError, AsyncOpenAI

from telemetry.exceptions import UpstreamFailureError, UpstreamTimeoutError, extract_error_message

from ..config import AIConfig
from ..interfaces.llm import LLMProvider
from ..models import ChatMessage, ChatResponse, ChatUsage

logger = logging.getLogger(__name__)

SERVICE_NAME = "OpenRouter"
DEFAULT_ERROR_MESSAGE = "AI analysis failed. Please try again."


class OpenRouterLLMProvider(LLMProvider):
    """OpenRouter LLM provider for chat completions"""

    def __init__(self, config: AIConfig, client: Optional[AsyncOpenAI] = None):
        self.config = config
        # Retries stay off: a failed inference is terminal for the job
        self.client = client or AsyncOpenAI(
            api_key=config.openrouter.api_key,
            base_url=config.openrouter.base_url,
            timeout=config.openrouter.timeout,
            max_retries=0,
            default_headers={
                "HTTP-Referer": config.openrouter.referer,
                "X-Title": config.openrouter.app_title,
            },
        )
        self.default_model = config.openrouter.default_model
        self.default_temperature = config.openrouter.temperature
        self.default_max_tokens = config.openrouter.max_tokens

    def get_default_model(self) -> str:
        return self.default_model

    async def aclose(self) -> None:
        """Close the underlying httpx client while its event loop is still running."""
        await self.client.close()

    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> ChatResponse:
        """Complete a chat conversation"""
        model_name = model or self.default_model
        params = {
            "model": model_name,
            "messages": [
                {"role": msg.role.value, "content": msg.content} for msg in messages
            ],
            "temperature": temperature if temperature is not None else self.default_temperature,
        }
        if max_tokens is not None:
            params["max_tokens"] = max_tokens
        elif self.default_max_tokens is not None:
            params["max_tokens"] = self.default_max_tokens

        try:
            response = await self.client.chat.completions.create(**params)
        except APIStatusError as e:
            raw_body = _response_text(e)
            message = extract_error_message(raw_body, default=DEFAULT_ERROR_MESSAGE)
            logger.error(f"{SERVICE_NAME} error: HTTP {e.status_code} {raw_body[:500] if raw_body else ''}")
            raise UpstreamFailureError(SERVICE_NAME, message, status_code=e.status_code) from e
        except APITimeoutError as e:
            logger.error(f"{SERVICE_NAME} transport timeout for model {model_name}")
            raise UpstreamTimeoutError("inference", self.config.openrouter.timeout) from e
        except APIConnectionError as e:
            logger.error(f"{SERVICE_NAME} connection error: {e}")
            raise UpstreamFailureError(SERVICE_NAME, f"connection error: {e}") from e

        choice = response.choices[0] if response.choices else None
        usage = response.usage
        return ChatResponse(
            id=getattr(response, "id", None),
            model=getattr(response, "model", None) or model_name,
            content=choice.message.content if choice is not None else None,
            finish_reason=choice.finish_reason if choice is not None else None,
            usage=ChatUsage(
                prompt_tokens=getattr(usage, "prompt_tokens", 0) or 0,
                completion_tokens=getattr(usage, "completion_tokens", 0) or 0,
                total_tokens=getattr(usage, "total_tokens", 0) or 0,
            ),
        )


def _response_text(error: APIStatusError) -> str:
    """Raw body of a failed response, falling back to the SDK's parsed body."""
    try:
        return error.response.text
    except Exception:
        body = getattr(error, "body", None)
        if body is None:
            return ""
        return body if isinstance(body, str) else json.dumps(body)
