"""
NiveshPath: rendering and playback core of a fintech chat assistant.

This package follows Parnas's information hiding principles,
where each module hides a specific design decision.
"""

__version__ = "0.1.0"

from .config import PlaybackSettings, RenderSettings, Settings, load_settings
from .errors import (
    MalformedBlockError,
    NiveshPathError,
    PlaybackError,
    SanitizerConfigError,
    TranscriptStateError,
)
from .playback import PlaybackController
from .render import MessageRenderer, RenderedMessage, render_message
from .transcript import Message, create_transcript_store

__all__ = [
    "MalformedBlockError",
    "Message",
    "MessageRenderer",
    "NiveshPathError",
    "PlaybackController",
    "PlaybackError",
    "PlaybackSettings",
    "RenderSettings",
    "RenderedMessage",
    "SanitizerConfigError",
    "Settings",
    "TranscriptStateError",
    "create_transcript_store",
    "load_settings",
    "render_message",
]
