"""Relay error taxonomy and the single error-response funnel.

Every failure on the relay path ends up in ``error_response``, which
classifies it into one of three tiers:

    - input validation  -> 400, message passed through verbatim
    - upstream failure  -> 502, generic localized message
    - anything else     -> 500, generic localized message

Upstream error payloads are logged here and never copied into the response.
"""

import logging

from fastapi import status
from fastapi.responses import JSONResponse

from deepchat.models.schemas import ErrorResponse

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "zh"

MESSAGES: dict[str, dict[str, str]] = {
    "zh": {
        "invalid_format": "无效的消息格式",
        "empty_content": "消息内容不能为空",
        "upstream_unavailable": "AI 服务暂时不可用，请稍后重试",
        "internal_error": "服务器内部错误",
    },
    "en": {
        "invalid_format": "Invalid message format",
        "empty_content": "Message content cannot be empty",
        "upstream_unavailable": "AI service is temporarily unavailable, please try again later",
        "internal_error": "Internal server error",
    },
}


def get_message(key: str, locale: str | None = None) -> str:
    """Look up a localized message, falling back to the default locale."""
    table = MESSAGES.get(locale or DEFAULT_LOCALE, MESSAGES[DEFAULT_LOCALE])
    return table[key]


class RelayError(Exception):
    """Base class for errors raised on the relay path."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "internal_error"


class TranscriptValidationError(RelayError):
    """Raised when the submitted transcript is malformed or empty."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_request"


class UpstreamError(RelayError):
    """Raised when the upstream completion service cannot serve the request.

    Attributes:
        upstream_status: HTTP status returned by the upstream, or None when
            no response was received at all.
        payload: The upstream error message, kept for server-side logs only.
    """

    status_code = status.HTTP_502_BAD_GATEWAY
    code = "upstream_unavailable"

    def __init__(
        self,
        message: str,
        upstream_status: int | None = None,
        payload: str | None = None,
    ) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status
        self.payload = payload


class RelayConfigError(RelayError):
    """Raised when the relay cannot be configured (e.g. missing API key)."""


def classify(exc: BaseException, locale: str | None = None) -> ErrorResponse:
    """Map an exception onto the error envelope, without leaking upstream detail."""
    if isinstance(exc, TranscriptValidationError):
        message = str(exc) or get_message("invalid_format", locale)
        return ErrorResponse(error=message, code=exc.code, details=message)

    if isinstance(exc, UpstreamError):
        return ErrorResponse(
            error=get_message("upstream_unavailable", locale),
            code=exc.code,
            details=str(exc),
        )

    code = exc.code if isinstance(exc, RelayError) else RelayError.code
    return ErrorResponse(
        error=get_message("internal_error", locale),
        code=code,
        details=str(exc) or type(exc).__name__,
    )


def status_for(exc: BaseException) -> int:
    """Return the HTTP status code an exception terminates the request with."""
    if isinstance(exc, RelayError):
        return exc.status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(exc: BaseException, locale: str | None = None) -> JSONResponse:
    """Log a failure and build the JSON error response for it.

    Args:
        exc: The exception that terminated the request.
        locale: Language for the user-facing message.

    Returns:
        JSONResponse carrying an ErrorResponse envelope.
    """
    status_code = status_for(exc)

    if isinstance(exc, TranscriptValidationError):
        logger.warning(f"Rejected transcript: {exc}")
    elif isinstance(exc, UpstreamError):
        logger.error(
            f"Upstream failure (status={exc.upstream_status}): {exc.payload or exc}"
        )
    else:
        logger.error("Unhandled relay error", exc_info=exc)

    envelope = classify(exc, locale)
    return JSONResponse(
        status_code=status_code,
        content=envelope.model_dump(mode="json"),
    )
