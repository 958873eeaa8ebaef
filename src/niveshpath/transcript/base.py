"""Abstract base class for transcript stores.

The abstraction hides:
- Where the ordered message sequence lives
- How snapshots are handed to readers
- How the one-active-entry invariant is enforced
"""

from abc import ABC, abstractmethod

from .models import Message, Phase


class TranscriptStore(ABC):
    """Ordered, append-mostly sequence of messages.

    Invariants kept by every implementation:
    - at most one message is thinking/typing, and only as the last entry
    - visible text only grows, and only while typing
    - clear() empties the sequence atomically and bumps the generation
    """

    @abstractmethod
    def append(self, message: Message) -> Message:
        """Append a message; rejected while the last entry is active."""

    @abstractmethod
    def messages(self) -> list[Message]:
        """Get a snapshot of all messages, oldest first."""

    @abstractmethod
    def get(self, message_id: str) -> Message | None:
        """Get a snapshot of one message."""

    @abstractmethod
    def last(self) -> Message | None:
        """Get a snapshot of the last message."""

    @abstractmethod
    def reveal(self, message_id: str, visible_text: str) -> bool:
        """Grow the visible text of the last, typing message.

        Returns:
            False if the update was ignored because the id is not the
            last entry or the entry is no longer typing
        """

    @abstractmethod
    def set_phase(self, message_id: str, phase: Phase) -> bool:
        """Move the last message forward to the given phase.

        Returns:
            False if the update was ignored because the id is not the last entry
        """

    @abstractmethod
    def clear(self) -> int:
        """Drop every message and return the new generation."""

    @property
    @abstractmethod
    def generation(self) -> int:
        """Counter bumped on every clear()."""

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """Get the backend type identifier."""

    def active(self) -> Message | None:
        """Get the thinking/typing message, if any."""
        last = self.last()
        return last if last is not None and last.is_active else None

    def is_last(self, message_id: str) -> bool:
        """Check whether a message is the last entry."""
        last = self.last()
        return last is not None and last.id == message_id

    def __len__(self) -> int:
        return len(self.messages())
