"""DeepChat - streaming chat relay for the DeepSeek completion API.

Combines FastAPI for HTTP streaming, httpx for the upstream call,
NiceGUI for the chat page, and Pydantic for data validation.

Components:
    - api: HTTP endpoints and the streaming relay route
    - relay: upstream client, fixed prompt and sampling configuration
    - models: Request/response schemas
    - ui: Web interface for chat interactions
"""

__version__ = "0.1.0"
