"""
AI Utils Package
Provides the LLM provider interface, the OpenRouter provider and the bounded inference service
"""

__version__ = "0.2.0"

from .config import AIConfig, OpenRouterConfig, get_config
from .models import (
    ChatMessage,
    ChatResponse,
    ChatRole,
    ChatUsage,
    InferenceOutcome,
    TokenCounts,
)
from .providers import OpenRouterLLMProvider
from .services import InferenceService, build_inference_service

__all__ = [
    # Configuration
    "get_config", "AIConfig", "OpenRouterConfig",

    # Providers
    "OpenRouterLLMProvider",

    # Services
    "InferenceService", "build_inference_service",

    # Models
    "ChatMessage", "ChatResponse", "ChatRole", "ChatUsage",
    "InferenceOutcome", "TokenCounts",
]
