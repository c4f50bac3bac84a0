"""Transcript checks applied before anything is sent upstream."""

from collections.abc import Sequence

from deepchat.errors import TranscriptValidationError, get_message
from deepchat.models.schemas import Message


def validate_transcript(messages: Sequence[Message], locale: str | None = None) -> None:
    """Reject transcripts the upstream should never see.

    Only the final message must carry content; earlier turns are forwarded
    as-is.

    Args:
        messages: The caller's transcript.
        locale: Language for the validation message.

    Raises:
        TranscriptValidationError: If the transcript is empty or the final
            message is blank.
    """
    if not messages:
        raise TranscriptValidationError(get_message("invalid_format", locale))

    if not messages[-1].content.strip():
        raise TranscriptValidationError(get_message("empty_content", locale))
