"""Upstream relay client with streaming pass-through.

Core module for forwarding a transcript to the DeepSeek completion API.

The relay builds one request per inbound call: the fixed system message
followed by the caller's transcript, the fixed sampling parameters and
``stream: true``. On success the upstream body is handed back untouched as
an async byte iterator; on failure an ``UpstreamError`` is raised before any
byte reaches the caller, so the route can still choose the status code.

When the caller goes away mid-stream the generator is closed, which closes
the upstream response and aborts the upstream call.
"""

import json
import logging
from collections.abc import AsyncGenerator, Sequence
from typing import Any

import httpx
from pydantic import ValidationError

from deepchat.errors import RelayConfigError, UpstreamError
from deepchat.models.schemas import Message
from deepchat.relay.config import RelayConfig, get_relay_config
from deepchat.relay.prompts import SYSTEM_MESSAGE

logger = logging.getLogger(__name__)

DEFAULT_MEDIA_TYPE = "text/event-stream"


class UpstreamStream:
    """A successful upstream response that has not been consumed yet."""

    def __init__(self, response: httpx.Response) -> None:
        self._response = response

    @property
    def media_type(self) -> str:
        return self._response.headers.get("content-type", DEFAULT_MEDIA_TYPE)

    async def iter_bytes(self) -> AsyncGenerator[bytes]:
        """Yield upstream body chunks verbatim, in arrival order.

        Yields:
            Raw response body chunks as they arrive from the upstream.
        """
        try:
            async for chunk in self._response.aiter_bytes():
                yield chunk
        except httpx.HTTPError as e:
            # Status line is already sent; all we can do is end the stream.
            logger.error(f"Upstream stream interrupted: {e!r}")
        finally:
            await self._response.aclose()


def _extract_error_message(body: bytes) -> str:
    """Pull a readable message out of an upstream error body."""
    text = body.decode("utf-8", errors="replace").strip()
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return text

    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if data.get("message"):
            return str(data["message"])
        if error:
            return str(error)
    return text


class DeepSeekRelay:
    """Forwards transcripts to the upstream completion API.

    Wraps an ``httpx.AsyncClient`` with:
    - Fixed system prompt and sampling parameters
    - Bearer token authentication from configuration
    - Streaming pass-through of the response body
    - Translation of upstream failures into ``UpstreamError``
    """

    def __init__(
        self,
        config: RelayConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the relay.

        Args:
            config: Optional relay configuration.
                    Loads from environment if not provided.
            client: Optional HTTP client, mainly for tests. A client created
                    here is owned and closed by the relay.
        """
        self._config = config or get_relay_config()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(self._config.timeout),
        )

    @property
    def config(self) -> RelayConfig:
        return self._config

    def build_payload(self, messages: Sequence[Message]) -> dict[str, Any]:
        """Build the upstream request body for a transcript.

        Args:
            messages: The caller's transcript, already validated.

        Returns:
            JSON-serializable request body.
        """
        return {
            "model": self._config.model_name,
            "messages": [m.model_dump() for m in (SYSTEM_MESSAGE, *messages)],
            "stream": True,
            **self._config.sampling.model_dump(),
        }

    async def open_stream(self, messages: Sequence[Message]) -> UpstreamStream:
        """Send the transcript upstream and wait for the response headers.

        Args:
            messages: The caller's transcript, already validated.

        Returns:
            UpstreamStream over the successful response body.

        Raises:
            UpstreamError: If the upstream is unreachable or answers with a
                non-success status.
        """
        request = self._client.build_request(
            "POST",
            self._config.completions_url,
            json=self.build_payload(messages),
            headers={"Authorization": f"Bearer {self._config.api_key}"},
        )

        try:
            response = await self._client.send(request, stream=True)
        except httpx.HTTPError as e:
            raise UpstreamError(
                f"upstream request failed: {type(e).__name__}",
                payload=str(e),
            ) from e

        if not response.is_success:
            try:
                body = await response.aread()
            finally:
                await response.aclose()
            raise UpstreamError(
                f"upstream responded with HTTP {response.status_code}",
                upstream_status=response.status_code,
                payload=_extract_error_message(body),
            )

        logger.debug(f"Upstream stream opened ({len(messages)} messages)")
        return UpstreamStream(response)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


# Module-level singleton instance
_relay: DeepSeekRelay | None = None


def get_relay() -> DeepSeekRelay:
    """Get or create the global relay.

    Returns:
        The DeepSeekRelay instance.

    Raises:
        RelayConfigError: If the configuration is invalid (e.g. no API key).
    """
    global _relay
    if _relay is None:
        try:
            _relay = DeepSeekRelay()
        except ValidationError as e:
            raise RelayConfigError(f"relay is not configured: {e.errors()[0]['msg']}") from e
    return _relay


async def close_relay() -> None:
    """Close the global relay if one was created."""
    global _relay
    if _relay is not None:
        await _relay.aclose()
        _relay = None
