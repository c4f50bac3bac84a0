"""FastAPI endpoints for the DeepChat relay.

HTTP and streaming routes with async request handling.

Endpoints:
    - GET /health: Service health status
    - POST /api/deepseek/chat: Streaming completion relay
"""

from deepchat.api.app import app, create_app

__all__ = ["app", "create_app"]
