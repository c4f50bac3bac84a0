"""Test package for DeepChat.

Unit tests for isolated logic and integration tests that drive the
FastAPI app end to end.

Structure:
    - unit/: Individual function and class tests
    - integration/: End-to-end relay and UI client tests

The upstream completion API is replaced with httpx.MockTransport; no test
talks to the network.
"""
