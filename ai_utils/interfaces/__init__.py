"""
Abstract interfaces for AI utilities.
These interfaces define contracts for different AI operations.
"""

from .llm import LLMProvider

__all__ = ["LLMProvider"]
