"""Unit tests for individual components in isolation.

Coverage:
    - relay/: Configuration, payload building and upstream streaming
    - errors: Error classification and envelopes
    - ui/: Transcript state and stream decoding
"""
