"""
Error types for search fence processing.

Both kinds of failure end up rendered as text inside the document; neither
is fatal to the host process.
"""


class SpecError(ValueError):
    """Raised when a search block violates the block grammar or its validation rules."""


class FetchError(Exception):
    """Raised when the remote search service cannot produce results."""
