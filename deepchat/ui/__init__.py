"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - Transcript state held in page memory
    - Incremental rendering of streamed replies
    - Copy and share actions on completed replies
    - Transient error banners

Contains no relay logic. Talks to the relay over HTTP only.
"""
