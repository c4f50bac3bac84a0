"""Pydantic models for API requests and responses.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - Message: Individual message in the transcript
    - ChatRequest: Incoming relay request payload
    - SamplingParams: Fixed upstream sampling configuration
    - ErrorResponse: Error envelope returned on failure
"""

from deepchat.models.schemas import (
    ChatRequest,
    ErrorResponse,
    Message,
    Role,
    SamplingParams,
)

__all__ = ["ChatRequest", "ErrorResponse", "Message", "Role", "SamplingParams"]
