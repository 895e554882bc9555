"""
Configuration management for AI utilities.
Supports environment variables with fallback defaults.
"""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load environment variables
load_dotenv()


class OpenRouterConfig(BaseModel):
    """OpenRouter (OpenAI-compatible) configuration settings"""
    api_key: str = Field(default="", description="OpenRouter API key")
    base_url: str = Field(default="https://openrouter.ai/api/v1", description="OpenAI-compatible API base URL")

    # Chat/LLM model settings
    default_model: str = Field(default="google/gemini-2.5-flash-preview-05-20", description="Model used when the caller does not pick one")
    temperature: float = Field(default=0.3, ge=0.0, le=2.0, description="Generation temperature")
    max_tokens: Optional[int] = Field(default=8000, ge=1, description="Max tokens for generation")

    # Attribution headers OpenRouter shows on its dashboard
    referer: str = Field(default="http://localhost:8000", description="HTTP-Referer header")
    app_title: str = Field(default="YouTube Comment Analyzer", description="X-Title header")

    # API settings
    timeout: float = Field(default=55.0, gt=0, description="Transport timeout in seconds")


class AIConfig(BaseModel):
    """Main AI configuration container"""
    openrouter: OpenRouterConfig = Field(default_factory=OpenRouterConfig)

    # Feature flags
    enable_logging: bool = Field(default=True, description="Enable detailed logging")

    @classmethod
    def from_env(cls) -> "AIConfig":
        """Create configuration from environment variables"""
        return cls(
            openrouter=OpenRouterConfig(
                api_key=os.getenv("OPENROUTER_API_KEY", ""),
                base_url=os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1"),
                default_model=os.getenv("DEFAULT_MODEL", "google/gemini-2.5-flash-preview-05-20"),
                temperature=float(os.getenv("OPENROUTER_TEMPERATURE", "0.3")),
                max_tokens=int(os.getenv("OPENROUTER_MAX_TOKENS")) if os.getenv("OPENROUTER_MAX_TOKENS") else 8000,
                referer=os.getenv("APP_URL", "http://localhost:8000"),
                app_title=os.getenv("OPENROUTER_APP_TITLE", "YouTube Comment Analyzer"),
                timeout=float(os.getenv("OPENROUTER_TIMEOUT", "55")),
            ),
            enable_logging=os.getenv("AI_ENABLE_LOGGING", "true").lower() == "true",
        )

    def validate(self) -> None:
        """Validate configuration and raise errors for missing required fields"""
        if not self.openrouter.api_key:
            raise ValueError("OPENROUTER_API_KEY is required")


def get_config() -> AIConfig:
    """Build the AI configuration from the current environment"""
    return AIConfig.from_env()
