"""
AI service factory

Builds the inference service from explicit configuration. A fresh provider is
created per pipeline run: the async HTTP client is bound to the event loop that
first uses it, and each run drives its own loop.
"""

from typing import Optional

from ..config import AIConfig, get_config
from ..providers.openrouter_llm import OpenRouterLLMProvider
from .inference_service import InferenceService


def build_inference_service(
    config: Optional[AIConfig] = None,
    default_deadline: float = 55.0,
) -> InferenceService:
    """Return an InferenceService backed by OpenRouterLLMProvider."""
    config = config or get_config()
    provider = OpenRouterLLMProvider(config=config)
    return InferenceService(provider=provider, default_deadline=default_deadline)
