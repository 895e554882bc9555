"""
Pydantic models for type-safe data structures in AI utilities.
These models handle data validation, serialization, and type safety.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ChatRole(str, Enum):
    """Chat message roles"""
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """Chat message model"""
    role: ChatRole = Field(..., description="Message role")
    content: str = Field(..., description="Message content")


class ChatUsage(BaseModel):
    """Token usage statistics"""
    prompt_tokens: int = Field(default=0, description="Number of tokens in prompt")
    completion_tokens: int = Field(default=0, description="Number of tokens in completion")
    total_tokens: int = Field(default=0, description="Total number of tokens used")


class ChatResponse(BaseModel):
    """Chat completion response reduced to what the pipeline consumes"""
    id: Optional[str] = Field(None, description="Response identifier")
    model: str = Field(..., description="Model that produced the completion")
    content: Optional[str] = Field(None, description="Text of the first choice")
    finish_reason: Optional[str] = Field(None, description="Reason generation stopped")
    usage: ChatUsage = Field(default_factory=ChatUsage, description="Token usage")
    created_at: datetime = Field(default_factory=datetime.now, description="Response timestamp")


class TokenCounts(BaseModel):
    """Input/output token counts reported back to API callers"""
    input: int = Field(default=0, ge=0)
    output: int = Field(default=0, ge=0)

    @classmethod
    def from_usage(cls, usage: ChatUsage) -> "TokenCounts":
        return cls(input=usage.prompt_tokens, output=usage.completion_tokens)


class InferenceOutcome(BaseModel):
    """Parsed structured output of one bounded inference call"""
    output: Dict[str, Any] = Field(..., description="JSON object produced by the model")
    token_counts: TokenCounts = Field(default_factory=TokenCounts)
    model: str = Field(..., description="Model that was requested")
    raw_text: str = Field(default="", description="Unparsed model text, kept for diagnostics")
    elapsed_ms: float = Field(default=0.0, description="Wall-clock duration of the call")


__all__: List[str] = [
    "ChatRole",
    "ChatMessage",
    "ChatUsage",
    "ChatResponse",
    "TokenCounts",
    "InferenceOutcome",
]
