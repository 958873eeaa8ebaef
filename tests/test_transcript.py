"""Unit and property-based tests for the transcript module."""
import pytest
from hypothesis import given
from hypothesis import strategies as st
from pydantic import ValidationError

from niveshpath.errors import TranscriptStateError
from niveshpath.transcript import (
    InMemoryTranscript,
    Message,
    Phase,
    Sender,
    create_transcript_store,
)


class TestMessage:
    """Tests for the Message model."""

    def test_user_message_is_complete(self):
        """User messages are shown in full immediately."""
        message = Message.from_user("What is an SIP?")

        assert message.sender == Sender.USER
        assert message.phase == Phase.COMPLETE
        assert message.visible_text == message.full_text
        assert not message.is_active

    def test_pending_reply(self):
        """Assistant replies start thinking with nothing visible."""
        message = Message.pending_reply("An SIP is...", query="What is an SIP?")

        assert message.sender == Sender.ASSISTANT
        assert message.phase == Phase.THINKING
        assert message.visible_text == ""
        assert message.remaining == len("An SIP is...")
        assert message.is_active

    def test_ids_are_unique(self):
        """Test default id generation."""
        assert Message.from_user("a").id != Message.from_user("a").id

    def test_visible_text_must_be_prefix(self):
        """Test the prefix invariant at construction."""
        with pytest.raises(ValidationError):
            Message(sender=Sender.ASSISTANT, full_text="abc", visible_text="xb", phase=Phase.TYPING)

    def test_complete_requires_full_text(self):
        """Test that complete messages show everything."""
        with pytest.raises(ValidationError):
            Message(sender=Sender.ASSISTANT, full_text="abc", visible_text="a", phase=Phase.COMPLETE)


class TestInMemoryTranscript:
    """Tests for InMemoryTranscript."""

    @pytest.fixture
    def store(self):
        """Create an empty store."""
        return create_transcript_store("memory")

    def _typing(self, store, text="Hello there"):
        message = store.append(Message.pending_reply(text))
        store.set_phase(message.id, Phase.TYPING)
        return message

    def test_factory(self, store):
        """Test the memory backend."""
        assert isinstance(store, InMemoryTranscript)
        assert store.backend_type == "memory"
        with pytest.raises(ValueError):
            create_transcript_store("redis")

    def test_append_and_order(self, store):
        """Messages are kept oldest first."""
        first = store.append(Message.from_user("one"))
        second = store.append(Message.from_user("two"))

        assert [m.id for m in store.messages()] == [first.id, second.id]
        assert store.last().id == second.id
        assert len(store) == 2

    def test_snapshots_are_copies(self, store):
        """Changing a snapshot does not change the store."""
        message = store.append(Message.from_user("one"))
        snapshot = store.get(message.id)
        snapshot.full_text = "changed"

        assert store.get(message.id).full_text == "one"

    def test_append_while_active_is_rejected(self, store):
        """Only one message may be thinking or typing."""
        store.append(Message.pending_reply("reply"))

        with pytest.raises(TranscriptStateError):
            store.append(Message.from_user("impatient"))

    def test_duplicate_id_is_rejected(self, store):
        """Test that ids are unique within a store."""
        message = store.append(Message.from_user("one"))
        with pytest.raises(TranscriptStateError):
            store.append(message)

    def test_phases_move_forward_only(self, store):
        """Test the thinking -> typing -> complete order."""
        message = store.append(Message.pending_reply(""))

        with pytest.raises(TranscriptStateError):
            store.set_phase(message.id, Phase.COMPLETE)
        assert store.set_phase(message.id, Phase.TYPING)
        assert store.set_phase(message.id, Phase.COMPLETE)
        with pytest.raises(TranscriptStateError):
            store.set_phase(message.id, Phase.TYPING)

    def test_cannot_complete_before_full_reveal(self, store):
        """Test completion with text still hidden."""
        message = self._typing(store)
        with pytest.raises(TranscriptStateError):
            store.set_phase(message.id, Phase.COMPLETE)

    def test_reveal_grows(self, store):
        """Visible text grows and completion follows a full reveal."""
        message = self._typing(store, "Hi!")

        assert store.reveal(message.id, "H")
        assert store.reveal(message.id, "Hi!")
        assert store.set_phase(message.id, Phase.COMPLETE)
        assert store.last().visible_text == "Hi!"
        assert store.active() is None

    def test_reveal_cannot_shrink(self, store):
        """Test the monotonic reveal."""
        message = self._typing(store, "Hello")
        store.reveal(message.id, "Hel")

        with pytest.raises(TranscriptStateError):
            store.reveal(message.id, "He")

    def test_reveal_must_be_prefix(self, store):
        """Test the prefix check on reveal."""
        message = self._typing(store, "Hello")
        with pytest.raises(TranscriptStateError):
            store.reveal(message.id, "Help")

    def test_reveal_while_thinking_is_ignored(self, store):
        """Test that nothing is revealed before typing starts."""
        message = store.append(Message.pending_reply("Hello"))

        assert not store.reveal(message.id, "H")
        assert store.get(message.id).visible_text == ""

    def test_updates_for_non_last_message_are_ignored(self, store):
        """Only the last message can be updated."""
        old = store.append(Message.from_user("one"))
        store.append(Message.from_user("two"))

        assert not store.reveal(old.id, "one")
        assert not store.set_phase(old.id, Phase.TYPING)
        assert not store.reveal("missing", "x")

    def test_clear_bumps_generation(self, store):
        """Clearing empties the store and starts a new generation."""
        store.append(Message.pending_reply("reply"))
        before = store.generation

        assert store.clear() == before + 1
        assert store.messages() == []
        assert store.last() is None
        assert store.active() is None

    def test_is_last(self, store):
        """Test the last-entry check."""
        assert not store.is_last("anything")
        message = store.append(Message.from_user("one"))
        assert store.is_last(message.id)

    @given(st.lists(st.sampled_from(["user", "reply", "type", "reveal", "complete", "clear"]), max_size=40))
    def test_at_most_one_active(self, operations: list[str]):
        """Property test: any sequence of operations keeps one active entry at most, at the end."""
        store = InMemoryTranscript()

        for operation in operations:
            last = store.last()
            try:
                if operation == "user":
                    store.append(Message.from_user("question"))
                elif operation == "reply":
                    store.append(Message.pending_reply("answer"))
                elif operation == "type" and last is not None:
                    store.set_phase(last.id, Phase.TYPING)
                elif operation == "reveal" and last is not None:
                    store.reveal(last.id, last.full_text[: len(last.visible_text) + 1])
                elif operation == "complete" and last is not None:
                    store.set_phase(last.id, Phase.COMPLETE)
                elif operation == "clear":
                    store.clear()
            except TranscriptStateError:
                pass

            messages = store.messages()
            active = [m for m in messages if m.is_active]
            assert len(active) <= 1
            if active:
                assert active[0].id == messages[-1].id
            for message in messages:
                assert message.full_text.startswith(message.visible_text)
