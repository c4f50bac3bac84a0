"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - upstream: Scriptable stand-in for the DeepSeek completion API
    - relay_config: Relay configuration pointing at the fake upstream
    - relay: DeepSeekRelay wired to the fake upstream via httpx.MockTransport
    - app: FastAPI app whose relay factory returns the fake relay
    - async_client: HTTPX client for API testing
"""

import json
from collections.abc import AsyncGenerator, AsyncIterator
from typing import Any

import httpx
import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from deepchat.api.app import create_app
from deepchat.relay.client import DeepSeekRelay
from deepchat.relay.config import RelayConfig

UPSTREAM_CHUNKS: list[bytes] = [
    b'data: {"id":"1","choices":[{"index":0,"delta":{"role":"assistant","content":""}}]}\n\n',
    b'data: {"id":"1","choices":[{"index":0,"delta":{"content":"Hel"}}]}\n\n',
    b'data: {"id":"1","choices":[{"index":0,"delta":{"content":"lo, "}}]}\n\n',
    b'data: {"id":"1","choices":[{"index":0,"delta":{"content":"world"}}]}\n\n',
    b'data: {"id":"1","choices":[{"index":0,"delta":{},"finish_reason":"stop"}]}\n\n',
    b"data: [DONE]\n\n",
]


class FakeUpstream:
    """In-process upstream completion service for httpx.MockTransport.

    Attributes:
        requests: Every request received, in order.
        status_code: Status to answer with.
        chunks: Body chunks streamed on success.
        error_body: JSON body returned on non-success status.
        exc: Exception raised instead of answering (transport failure).
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.chunks: list[bytes] = list(UPSTREAM_CHUNKS)
        self.error_body: Any = None
        self.exc: Exception | None = None

    async def _body(self) -> AsyncIterator[bytes]:
        for chunk in self.chunks:
            yield chunk

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        if self.status_code != 200:
            return httpx.Response(self.status_code, json=self.error_body)
        return httpx.Response(
            200,
            headers={"content-type": "text/event-stream"},
            content=self._body(),
        )

    @property
    def last_payload(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def upstream() -> FakeUpstream:
    """Return a fresh fake upstream that streams UPSTREAM_CHUNKS."""
    return FakeUpstream()


@pytest.fixture
def relay_config() -> RelayConfig:
    """Return relay configuration pointing at the fake upstream host."""
    return RelayConfig(
        api_key="sk-test-key",
        base_url="https://upstream.test/v1",
        model_name="deepseek-chat",
        timeout=None,
    )


@pytest.fixture
async def relay(
    relay_config: RelayConfig, upstream: FakeUpstream
) -> AsyncGenerator[DeepSeekRelay]:
    """Create a relay whose HTTP client talks to the fake upstream.

    Yields:
        DeepSeekRelay using httpx.MockTransport.
    """
    client = httpx.AsyncClient(transport=httpx.MockTransport(upstream.handler))
    yield DeepSeekRelay(config=relay_config, client=client)
    await client.aclose()


@pytest.fixture
def app(relay: DeepSeekRelay) -> FastAPI:
    """Create the FastAPI app with English messages and the fake relay."""
    return create_app(locale="en", relay_factory=lambda: relay)


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
