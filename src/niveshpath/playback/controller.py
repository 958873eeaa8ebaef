"""Thinking -> Typing -> Complete playback of assistant replies.

The controller owns the timers of the one active message. It reveals
the reply character by character and renders it once the full text
is visible.

Hidden design decisions:
- Randomness and time are injected (random.Random, Scheduler)
- Every timer carries the transcript generation and the message id;
  a timer whose generation is stale or whose message is no longer
  last does nothing
- A transcript cleared behind the controller's back abandons the
  active message the next time the controller looks at it
- Rendering happens exactly once per message, on completion
"""

import logging
import random
from collections.abc import Callable

from ..config import PlaybackSettings
from ..errors import PlaybackError
from ..render import MessageRenderer, RenderedMessage
from ..transcript import Message, Phase, TranscriptStore
from .callbacks import PlaybackCallback, ThinkingStatus
from .scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

SENTENCE_END = frozenset(".!?")
PAUSE_CHARS = frozenset(",;:\n")


def reveal_delay(char: str, settings: PlaybackSettings, rng: random.Random) -> float:
    """Delay to wait after revealing a character.

    Args:
        char: The character just revealed
        settings: Playback timing
        rng: Source of jitter

    Returns:
        Delay in seconds
    """
    if char in SENTENCE_END:
        return settings.sentence_delay
    if char in PAUSE_CHARS:
        return settings.pause_delay
    if settings.jitter:
        return settings.char_delay + rng.uniform(0.0, settings.jitter)
    return settings.char_delay


class PlaybackController:
    """Drives the playback of assistant messages over a transcript.

    Example:
        controller = PlaybackController(InMemoryTranscript(), AsyncioScheduler())
        message = controller.play("Hello **there**", query="hi")
        # ... event loop runs ...
        controller.rendered_for(message.id).html
    """

    def __init__(
        self,
        transcript: TranscriptStore,
        scheduler: Scheduler,
        renderer: MessageRenderer | None = None,
        rng: random.Random | None = None,
        settings: PlaybackSettings | None = None,
        callback: PlaybackCallback | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            transcript: Store the messages are appended to
            scheduler: Timer source
            renderer: Pipeline used on completion (default: MessageRenderer())
            rng: Random source for phrases, dwell and jitter
            settings: Playback timing (default: PlaybackSettings())
            callback: Listener for display updates
        """
        self._transcript = transcript
        self._scheduler = scheduler
        self._renderer = renderer or MessageRenderer()
        self._rng = rng or random.Random()
        self._settings = settings or PlaybackSettings()
        self._callback = callback or PlaybackCallback()

        self._active_id: str | None = None
        self._generation: int | None = None
        self._status: ThinkingStatus | None = None
        self._timers: dict[str, TimerHandle] = {}
        self._rendered: dict[str, RenderedMessage] = {}

    @property
    def transcript(self) -> TranscriptStore:
        return self._transcript

    @property
    def settings(self) -> PlaybackSettings:
        return self._settings

    @property
    def active_id(self) -> str | None:
        """Id of the message being played, if any."""
        self._sync_generation()
        return self._active_id

    @property
    def status(self) -> ThinkingStatus | None:
        """Current thinking indicator, while thinking."""
        return self._status

    @property
    def is_playing(self) -> bool:
        return self.active_id is not None

    def rendered_for(self, message_id: str) -> RenderedMessage | None:
        """Get the rendered markup of a completed message."""
        return self._rendered.get(message_id)

    def play(self, full_text: str, query: str | None = None) -> Message:
        """Append an assistant message and start its thinking phase.

        Args:
            full_text: The complete reply
            query: The user query the reply answers

        Returns:
            Snapshot of the appended message

        Raises:
            PlaybackError: If another message is still playing
        """
        self._sync_generation()
        if self._active_id is not None or self._transcript.active() is not None:
            raise PlaybackError("another message is still playing")

        message = self._transcript.append(Message.pending_reply(full_text, query=query))
        self._active_id = message.id
        generation = self._transcript.generation
        self._generation = generation
        logger.info("Message %s: thinking", message.id)

        self._status = ThinkingStatus(phrase=self._rng.choice(self._settings.thinking_phrases))
        self._callback.on_thinking(message, self._status)

        dwell = self._rng.uniform(self._settings.min_dwell, self._settings.max_dwell)
        self._schedule("phrase", self._settings.phrase_interval, self._rotate_phrase, generation, message.id)
        self._schedule("dots", self._settings.dot_interval, self._tick_dots, generation, message.id)
        self._schedule("dwell", dwell, self._start_typing, generation, message.id)
        return message

    def fast_forward(self) -> RenderedMessage | None:
        """Show the rest of the active message at once and complete it.

        Returns:
            The rendered message, or None if nothing is playing
        """
        self._sync_generation()
        message_id = self._active_id
        if message_id is None:
            return None

        self._cancel_timers()
        message = self._transcript.get(message_id)
        if message is None:
            self._active_id = None
            return None

        if message.phase is Phase.THINKING:
            self._transcript.set_phase(message_id, Phase.TYPING)
            self._status = None
        if message.visible_text != message.full_text:
            self._transcript.reveal(message_id, message.full_text)
            self._callback.on_reveal(self._transcript.get(message_id))
        return self._complete(message_id)

    def reset(self) -> int:
        """Cancel every pending timer, then clear the transcript.

        Returns:
            The transcript's new generation
        """
        self._cancel_timers()
        self._active_id = None
        self._status = None
        self._rendered.clear()
        generation = self._transcript.clear()
        self._generation = generation
        logger.info("Transcript cleared (generation %d)", generation)
        return generation

    def _schedule(
        self,
        slot: str,
        delay: float,
        callback: Callable[[int, str], None],
        generation: int,
        message_id: str,
    ) -> None:
        self._timers[slot] = self._scheduler.call_later(delay, callback, generation, message_id)

    def _cancel_timers(self, *slots: str) -> None:
        for slot in slots or tuple(self._timers):
            timer = self._timers.pop(slot, None)
            if timer is not None:
                timer.cancel()

    def _sync_generation(self) -> None:
        generation = self._transcript.generation
        if self._generation is None or self._generation == generation:
            return
        logger.info("Transcript cleared elsewhere (generation %d); dropping playback state", generation)
        self._cancel_timers()
        self._active_id = None
        self._status = None
        self._rendered.clear()
        self._generation = generation

    def _is_current(self, generation: int, message_id: str) -> bool:
        self._sync_generation()
        if (
            generation != self._transcript.generation
            or message_id != self._active_id
            or not self._transcript.is_last(message_id)
        ):
            logger.debug("Dropping stale timer for message %s", message_id)
            return False
        return True

    def _rotate_phrase(self, generation: int, message_id: str) -> None:
        if not self._is_current(generation, message_id) or self._status is None:
            return
        self._status = ThinkingStatus(
            phrase=self._rng.choice(self._settings.thinking_phrases),
            dots=self._status.dots,
        )
        self._callback.on_thinking(self._transcript.get(message_id), self._status)
        self._schedule("phrase", self._settings.phrase_interval, self._rotate_phrase, generation, message_id)

    def _tick_dots(self, generation: int, message_id: str) -> None:
        if not self._is_current(generation, message_id) or self._status is None:
            return
        dots = (self._status.dots + 1) % (self._settings.max_dots + 1)
        self._status = ThinkingStatus(phrase=self._status.phrase, dots=dots)
        self._callback.on_thinking(self._transcript.get(message_id), self._status)
        self._schedule("dots", self._settings.dot_interval, self._tick_dots, generation, message_id)

    def _start_typing(self, generation: int, message_id: str) -> None:
        if not self._is_current(generation, message_id):
            return
        self._cancel_timers("phrase", "dots")
        self._timers.pop("dwell", None)
        self._status = None
        self._transcript.set_phase(message_id, Phase.TYPING)
        logger.info("Message %s: typing", message_id)

        message = self._transcript.get(message_id)
        if not message.full_text:
            self._complete(message_id)
            return
        self._schedule("reveal", self._settings.char_delay, self._reveal_next, generation, message_id)

    def _reveal_next(self, generation: int, message_id: str) -> None:
        if not self._is_current(generation, message_id):
            return
        message = self._transcript.get(message_id)
        end = len(message.visible_text) + 1
        self._transcript.reveal(message_id, message.full_text[:end])
        self._callback.on_reveal(self._transcript.get(message_id))

        if end >= len(message.full_text):
            self._timers.pop("reveal", None)
            self._complete(message_id)
            return
        delay = reveal_delay(message.full_text[end - 1], self._settings, self._rng)
        self._schedule("reveal", delay, self._reveal_next, generation, message_id)

    def _complete(self, message_id: str) -> RenderedMessage:
        self._transcript.set_phase(message_id, Phase.COMPLETE)
        self._active_id = None
        message = self._transcript.get(message_id)

        rendered = self._rendered.get(message_id)
        if rendered is None:
            rendered = self._renderer.render(message.full_text)
            self._rendered[message_id] = rendered
        logger.info("Message %s: complete (%d characters)", message_id, len(message.full_text))
        self._callback.on_complete(message, rendered)
        return rendered
