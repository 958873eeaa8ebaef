"""Terminal display of a playback.

Hides how playback updates map onto a rich Live region.
"""

import asyncio

from rich.live import Live
from rich.text import Text

from ..playback import PlaybackCallback, ThinkingStatus
from ..render import RenderedMessage
from ..transcript import Message


class LiveCallback(PlaybackCallback):
    """Shows the thinking indicator and the typed text in a Live region."""

    def __init__(self, live: Live, done: asyncio.Event | None = None) -> None:
        self.live = live
        self.done = done
        self.rendered: RenderedMessage | None = None

    def on_thinking(self, message: Message, status: ThinkingStatus) -> None:
        self.live.update(Text(status.text, style="dim italic cyan"))

    def on_reveal(self, message: Message) -> None:
        self.live.update(Text(message.visible_text))

    def on_complete(self, message: Message, rendered: RenderedMessage) -> None:
        self.rendered = rendered
        self.live.update(Text(message.full_text))
        if self.done is not None:
            self.done.set()
