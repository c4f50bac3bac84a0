"""Streaming relay endpoint.

Validates the transcript, opens the upstream stream and pipes its body
back to the caller. Failures before the first byte go through the shared
error funnel so the caller always gets the JSON error envelope.
"""

import logging

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import StreamingResponse

from deepchat.errors import error_response
from deepchat.models.schemas import ChatRequest, ErrorResponse
from deepchat.relay.validation import validate_transcript

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/deepseek", tags=["chat"])


@router.post(
    "/chat",
    response_class=StreamingResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
        status.HTTP_502_BAD_GATEWAY: {"model": ErrorResponse},
    },
)
async def chat(
    payload: ChatRequest,
    request: Request,
) -> Response:
    """Relay a transcript to the upstream model and stream the reply.

    Args:
        payload: The transcript to forward.
        request: The inbound request, carrying the locale and relay factory.

    Returns:
        StreamingResponse with the upstream body, or a JSON error envelope.

    Raises:
        400: Empty transcript or blank final message.
        502: Upstream unreachable or returned a non-success status.
        500: Any other failure.
    """
    locale = request.app.state.locale

    try:
        validate_transcript(payload.messages, locale)
        relay = request.app.state.relay_factory()
        upstream = await relay.open_stream(payload.messages)
    except Exception as e:
        return error_response(e, locale)

    logger.info(f"Relaying completion for {len(payload.messages)} messages")
    return StreamingResponse(
        upstream.iter_bytes(),
        status_code=status.HTTP_200_OK,
        media_type=upstream.media_type,
    )
