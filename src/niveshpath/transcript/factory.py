"""Factory for creating transcript stores."""

from typing import Any

from .base import TranscriptStore


def create_transcript_store(backend: str = "memory", **kwargs: Any) -> TranscriptStore:
    """Create a transcript store.

    Args:
        backend: Backend type (only "memory"; persistence belongs to the host app)
        **kwargs: Backend-specific configuration

    Returns:
        TranscriptStore instance

    Raises:
        ValueError: If backend type is not supported
    """
    if backend == "memory":
        from .in_memory import InMemoryTranscript
        return InMemoryTranscript(**kwargs)

    raise ValueError(
        f"Unsupported transcript backend: {backend}. "
        f"Supported backends: memory"
    )
