"""Transcript module for niveshpath.

Holds the ordered messages of one conversation and guards the
one-active-entry invariant.
"""

from .base import TranscriptStore
from .factory import create_transcript_store
from .in_memory import InMemoryTranscript
from .models import ACTIVE_PHASES, Message, Phase, Sender

__all__ = [
    "ACTIVE_PHASES",
    "InMemoryTranscript",
    "Message",
    "Phase",
    "Sender",
    "TranscriptStore",
    "create_transcript_store",
]
