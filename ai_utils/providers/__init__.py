"""
AI Providers
Concrete implementations of AI service interfaces
"""

from .openrouter_llm import OpenRouterLLMProvider

__all__ = [
    "OpenRouterLLMProvider",
]
