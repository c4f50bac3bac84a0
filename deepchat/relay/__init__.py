"""Relay logic for the upstream completion service.

Responsibilities:
    - Relay configuration from the environment
    - Fixed system prompt and sampling parameters
    - Transcript validation
    - Streaming pass-through of the upstream response

Maintains clean separation from the HTTP layer.
"""

from deepchat.relay.client import DeepSeekRelay, UpstreamStream, close_relay, get_relay
from deepchat.relay.config import RelayConfig, get_relay_config
from deepchat.relay.validation import validate_transcript

__all__ = [
    "DeepSeekRelay",
    "RelayConfig",
    "UpstreamStream",
    "close_relay",
    "get_relay",
    "get_relay_config",
    "validate_transcript",
]
