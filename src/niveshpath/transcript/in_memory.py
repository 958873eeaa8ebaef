"""In-memory transcript store.

List-based storage for one conversation. Readers get copies, so a
snapshot never changes under them.
"""

import logging

from ..errors import TranscriptStateError
from .base import TranscriptStore
from .models import PHASE_TRANSITIONS, Message, Phase

logger = logging.getLogger(__name__)


class InMemoryTranscript(TranscriptStore):
    """Transcript kept in a Python list (session-only)."""

    def __init__(self) -> None:
        self._messages: list[Message] = []
        self._ids: set[str] = set()
        self._generation = 0

    def append(self, message: Message) -> Message:
        """Append a message.

        Raises:
            TranscriptStateError: If the last entry is still active or the id is taken
        """
        if self._messages and self._messages[-1].is_active:
            raise TranscriptStateError(
                "cannot append while the last message is still playing",
                message_id=self._messages[-1].id,
            )
        if message.id in self._ids:
            raise TranscriptStateError("duplicate message id", message_id=message.id)

        stored = message.model_copy()
        self._messages.append(stored)
        self._ids.add(stored.id)
        return stored.model_copy()

    def messages(self) -> list[Message]:
        return [message.model_copy() for message in self._messages]

    def get(self, message_id: str) -> Message | None:
        for message in self._messages:
            if message.id == message_id:
                return message.model_copy()
        return None

    def last(self) -> Message | None:
        return self._messages[-1].model_copy() if self._messages else None

    def _current(self, message_id: str) -> Message | None:
        if not self._messages or self._messages[-1].id != message_id:
            logger.debug("Ignoring update for %s: not the last message", message_id)
            return None
        return self._messages[-1]

    def reveal(self, message_id: str, visible_text: str) -> bool:
        """Grow the visible text of the last message.

        Raises:
            TranscriptStateError: If the text is not a prefix of the full text
                or is shorter than what is already visible
        """
        message = self._current(message_id)
        if message is None:
            return False
        if message.phase is not Phase.TYPING:
            logger.debug("Ignoring reveal for %s in phase %s", message_id, message.phase.value)
            return False

        if not message.full_text.startswith(visible_text):
            raise TranscriptStateError("revealed text is not a prefix", message_id=message_id)
        if len(visible_text) < len(message.visible_text):
            raise TranscriptStateError("revealed text cannot shrink", message_id=message_id)

        message.visible_text = visible_text
        return True

    def set_phase(self, message_id: str, phase: Phase) -> bool:
        """Move the last message forward.

        Raises:
            TranscriptStateError: If the transition is not allowed, or the
                message would complete before its text is fully visible
        """
        message = self._current(message_id)
        if message is None:
            return False

        if phase not in PHASE_TRANSITIONS[message.phase]:
            raise TranscriptStateError(
                f"cannot move from {message.phase.value} to {phase.value}",
                message_id=message_id,
            )
        if phase is Phase.COMPLETE and message.visible_text != message.full_text:
            raise TranscriptStateError("cannot complete before full reveal", message_id=message_id)

        message.phase = phase
        return True

    def clear(self) -> int:
        self._messages = []
        self._ids = set()
        self._generation += 1
        return self._generation

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def backend_type(self) -> str:
        return "memory"
