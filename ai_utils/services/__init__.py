"""
AI Utils Services Package
Contains high-level service layers for AI operations
"""

from .inference_service import InferenceService, parse_structured_output, strip_code_fences
from .registry import build_inference_service

__all__ = [
    "InferenceService",
    "build_inference_service",
    "parse_structured_output",
    "strip_code_fences",
]
