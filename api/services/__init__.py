"""
API Services Module

Available services:
- ResponseService: Uniform success and error envelopes
"""

from .response_service import ResponseService

__all__ = [
    "ResponseService",
]
