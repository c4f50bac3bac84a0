"""Relay configuration with environment variable loading.

Pydantic-based configuration for the upstream DeepSeek connection.
The credential always comes from the environment, never from source.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from deepchat.models.schemas import SamplingParams

# Load environment variables from .env file
load_dotenv()


def _timeout_from_env() -> float | None:
    raw = os.getenv("RELAY_TIMEOUT", "").strip()
    return float(raw) if raw else None


class RelayConfig(BaseModel):
    """Configuration for the upstream completion service.

    Attributes:
        api_key: Bearer token for the upstream API.
        base_url: API base URL; ``/chat/completions`` is appended.
        model_name: Model identifier sent with every request.
        timeout: Optional request timeout in seconds (None disables it).
        sampling: Fixed sampling parameters, not configurable per request.
    """

    api_key: str = Field(
        default_factory=lambda: os.getenv("DEEPSEEK_API_KEY", ""),
        description="API key for the upstream completion service",
    )
    base_url: str = Field(
        default_factory=lambda: os.getenv("DEEPSEEK_BASE_URL", "https://api.deepseek.com/v1"),
        description="Upstream API base URL",
    )
    model_name: str = Field(
        default_factory=lambda: os.getenv("DEEPSEEK_MODEL", "deepseek-chat"),
        description="Model to use",
    )
    timeout: float | None = Field(
        default_factory=_timeout_from_env,
        gt=0,
        description="Upstream request timeout in seconds, None for no timeout",
    )
    sampling: SamplingParams = Field(default_factory=SamplingParams)

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate that API key is provided and non-empty."""
        if not v or not v.strip():
            raise ValueError("API key required. Set DEEPSEEK_API_KEY in .env")
        return v.strip()

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def completions_url(self) -> str:
        return f"{self.base_url}/chat/completions"


def get_relay_config() -> RelayConfig:
    """Create relay configuration from environment.

    Returns:
        Configured RelayConfig instance.

    Raises:
        ValueError: If no API key is set.
    """
    return RelayConfig()
