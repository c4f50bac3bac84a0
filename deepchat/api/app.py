"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
exception handlers and router registration.
"""

import logging
import os
from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from deepchat.api.chat import router as chat_router
from deepchat.errors import (
    DEFAULT_LOCALE,
    TranscriptValidationError,
    error_response,
    get_message,
)
from deepchat.relay.client import DeepSeekRelay, close_relay, get_relay

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    logger.info("Starting DeepChat relay...")
    yield
    await close_relay()
    logger.info("Shutting down DeepChat relay...")


async def request_validation_handler(request: Request, exc: Exception) -> JSONResponse:
    """Turn malformed request bodies into the 400 error envelope."""
    locale = request.app.state.locale
    logger.debug(f"Request validation failed: {exc}")
    return error_response(
        TranscriptValidationError(get_message("invalid_format", locale)),
        locale,
    )


def create_app(
    locale: str | None = None,
    relay_factory: Callable[[], DeepSeekRelay] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        locale: Language for user-facing error messages.
                Reads RELAY_LOCALE if not provided.
        relay_factory: Returns the relay for a request. Called only after the
                       transcript is validated; defaults to the global relay.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="DeepChat Relay API",
        description=(
            "Streaming relay between the chat page and the DeepSeek completion API. "
            "Forwards the transcript with a fixed system prompt and sampling "
            "parameters and streams the upstream response back unchanged."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    application.state.locale = locale or os.getenv("RELAY_LOCALE", DEFAULT_LOCALE)
    application.state.relay_factory = relay_factory or get_relay

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    application.add_exception_handler(RequestValidationError, request_validation_handler)

    application.include_router(chat_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "deepchat"}

    return application


app = create_app()
