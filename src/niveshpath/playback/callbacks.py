"""Listener interface for playback updates.

Hides how a display layer learns about phase changes. The controller
calls these hooks synchronously from its timer callbacks.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..render import RenderedMessage
    from ..transcript import Message


@dataclass(frozen=True)
class ThinkingStatus:
    """What the thinking indicator currently shows."""

    phrase: str
    dots: int = 0

    @property
    def text(self) -> str:
        return self.phrase + "." * self.dots


class PlaybackCallback:
    """No-op base; subclasses override the hooks they need."""

    def on_thinking(self, message: "Message", status: ThinkingStatus) -> None:
        """Called when the thinking indicator changes phrase or dots."""

    def on_reveal(self, message: "Message") -> None:
        """Called after each growth of the visible text."""

    def on_complete(self, message: "Message", rendered: "RenderedMessage") -> None:
        """Called once, after the full text is shown and rendered."""


class RecordingCallback(PlaybackCallback):
    """Keeps every update it receives, in order.

    Useful for driving a display from a log, or for inspecting a
    playback after the fact.
    """

    def __init__(self) -> None:
        self.statuses: list[ThinkingStatus] = []
        self.reveals: list[str] = []
        self.completed: list[tuple["Message", "RenderedMessage"]] = []

    def on_thinking(self, message: "Message", status: ThinkingStatus) -> None:
        self.statuses.append(status)

    def on_reveal(self, message: "Message") -> None:
        self.reveals.append(message.visible_text)

    def on_complete(self, message: "Message", rendered: "RenderedMessage") -> None:
        self.completed.append((message, rendered))
