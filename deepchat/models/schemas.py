from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["system", "user", "assistant"]


class Message(BaseModel):
    """A single message in the conversation transcript.

    Attributes:
        role: The speaker identifier (system, user, or assistant).
        content: The message text.
    """

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str


class ChatRequest(BaseModel):
    """Request payload for the relay endpoint.

    Attributes:
        messages: The full transcript, oldest message first.
    """

    messages: list[Message]


class SamplingParams(BaseModel):
    """Fixed sampling configuration sent with every upstream request."""

    model_config = ConfigDict(frozen=True)

    temperature: float = 0.8
    max_tokens: int = 3000
    presence_penalty: float = 0.6
    frequency_penalty: float = 0.7
    top_p: float = 0.9


class ErrorResponse(BaseModel):
    """Uniform error envelope returned by the relay.

    Attributes:
        error: Human readable message, safe to show to the user.
        code: Machine readable error code.
        details: Raw detail string describing the failure.
        timestamp: When the error was produced (ISO 8601).
    """

    error: str = Field(..., min_length=1)
    code: str
    details: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
