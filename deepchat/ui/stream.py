"""Relay client for the chat page.

The relay passes the upstream body through unchanged, so the page decodes
the OpenAI-style SSE events itself and keeps only the text deltas.
"""

import json
import logging
import os
from collections.abc import Callable

import httpx

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "http://localhost:8000"
CHAT_PATH = "/api/deepseek/chat"
DONE_SENTINEL = "[DONE]"


def parse_sse_line(line: str) -> str | None:
    """Extract the text delta from one upstream SSE line.

    Args:
        line: A single line of the event stream.

    Returns:
        The delta content, or None for blank lines, comments, the
        ``[DONE]`` sentinel and events without content.
    """
    if not line.startswith("data:"):
        return None

    data = line[len("data:"):].strip()
    if not data or data == DONE_SENTINEL:
        return None

    try:
        event = json.loads(data)
    except json.JSONDecodeError:
        logger.warning(f"Skipping undecodable stream event: {data[:80]}")
        return None

    choices = event.get("choices") if isinstance(event, dict) else None
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return None
    delta = choices[0].get("delta")
    if not isinstance(delta, dict):
        return None
    content = delta.get("content")
    return content if isinstance(content, str) and content else None


def _error_message(status_code: int, body: bytes) -> str:
    """Read the relay's error envelope, falling back to the status code."""
    try:
        envelope = json.loads(body)
    except ValueError:
        # JSONDecodeError and UnicodeDecodeError both land here.
        return f"HTTP {status_code}"
    if isinstance(envelope, dict) and envelope.get("error"):
        return str(envelope["error"])
    return f"HTTP {status_code}"


def relay_base_url() -> str:
    """Return the relay URL, read at call time so the entry point can set it."""
    return os.getenv("API_BASE_URL", DEFAULT_API_BASE_URL).rstrip("/")


async def stream_completion(
    messages: list[dict[str, str]],
    on_chunk: Callable[[str], None],
    on_complete: Callable[[], None],
    on_error: Callable[[str], None],
    client: httpx.AsyncClient | None = None,
    base_url: str | None = None,
) -> None:
    """POST the transcript to the relay and feed text deltas to ``on_chunk``.

    Exactly one of ``on_complete`` or ``on_error`` is called at the end,
    whatever goes wrong while the stream is read.

    Args:
        messages: Transcript in request format.
        on_chunk: Called with each text delta, in order.
        on_complete: Called once the stream ends normally.
        on_error: Called with a user-facing message on failure.
        client: Optional HTTP client; a temporary one is created otherwise.
        base_url: Relay base URL, defaults to API_BASE_URL.
    """
    url = f"{base_url or relay_base_url()}{CHAT_PATH}"
    owns_client = client is None
    client = client or httpx.AsyncClient(timeout=None)
    error: str | None = None

    try:
        async with client.stream("POST", url, json={"messages": messages}) as response:
            if response.status_code != httpx.codes.OK:
                body = await response.aread()
                error = _error_message(response.status_code, body)
            else:
                async for line in response.aiter_lines():
                    if (content := parse_sse_line(line)) is not None:
                        on_chunk(content)
    except httpx.RequestError as e:
        logger.warning(f"Relay request failed: {e!r}")
        error = f"连接失败: {e}"
    except Exception:
        logger.exception("Relay stream failed")
        error = "响应处理失败"
    finally:
        if owns_client:
            await client.aclose()

    if error is None:
        on_complete()
    else:
        on_error(error)
