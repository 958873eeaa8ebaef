"""Data models for chat transcripts.

These models define a transcript entry independently of where the
surrounding application keeps the conversation.
"""

from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator


class Sender(str, Enum):
    """Author of a message."""

    USER = "user"
    ASSISTANT = "assistant"


class Phase(str, Enum):
    """Playback phase of a message."""

    THINKING = "thinking"
    TYPING = "typing"
    COMPLETE = "complete"


ACTIVE_PHASES = frozenset({Phase.THINKING, Phase.TYPING})

# Allowed forward transitions; there are no loops and nothing leaves COMPLETE.
PHASE_TRANSITIONS = {
    Phase.THINKING: frozenset({Phase.TYPING}),
    Phase.TYPING: frozenset({Phase.COMPLETE}),
    Phase.COMPLETE: frozenset(),
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Message(BaseModel):
    """One entry of a transcript.

    ``visible_text`` is always a prefix of ``full_text``; it equals
    ``full_text`` once the message is complete.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    sender: Sender
    query: str | None = Field(default=None, description="User query an assistant reply answers")
    full_text: str = Field(description="The complete text of the message")
    visible_text: str = Field(default="", description="Revealed prefix of full_text")
    phase: Phase = Field(default=Phase.COMPLETE)
    timestamp: datetime = Field(default_factory=_utcnow)

    model_config = {"json_encoders": {datetime: lambda v: v.isoformat()}}

    @model_validator(mode="after")
    def _check_visible_prefix(self) -> "Message":
        if not self.full_text.startswith(self.visible_text):
            raise ValueError("visible_text must be a prefix of full_text")
        if self.phase is Phase.COMPLETE and self.visible_text != self.full_text:
            raise ValueError("a complete message must show its full text")
        return self

    @property
    def is_active(self) -> bool:
        """True while thinking or typing."""
        return self.phase in ACTIVE_PHASES

    @property
    def remaining(self) -> int:
        """Characters still to be revealed."""
        return len(self.full_text) - len(self.visible_text)

    @classmethod
    def from_user(cls, text: str) -> "Message":
        """Create a complete user message."""
        return cls(sender=Sender.USER, full_text=text, visible_text=text)

    @classmethod
    def pending_reply(cls, full_text: str, query: str | None = None) -> "Message":
        """Create an assistant message that starts in the thinking phase."""
        return cls(sender=Sender.ASSISTANT, query=query, full_text=full_text, phase=Phase.THINKING)
