"""Playback module for niveshpath.

Runs the Thinking -> Typing -> Complete lifecycle of assistant replies
on an injected scheduler.
"""

from .callbacks import PlaybackCallback, RecordingCallback, ThinkingStatus
from .controller import PlaybackController, reveal_delay
from .scheduler import AsyncioScheduler, ManualScheduler, Scheduler, TimerHandle

__all__ = [
    "AsyncioScheduler",
    "ManualScheduler",
    "PlaybackCallback",
    "PlaybackController",
    "RecordingCallback",
    "Scheduler",
    "ThinkingStatus",
    "TimerHandle",
    "reveal_delay",
]
