"""Pytest configuration and shared fixtures."""
import random
from datetime import date

import pytest

from niveshpath.config import PlaybackSettings, RenderSettings
from niveshpath.playback import ManualScheduler, PlaybackController, RecordingCallback
from niveshpath.render import MessageRenderer, SequentialIdMinter
from niveshpath.transcript import InMemoryTranscript

FIXED_DAY = date(2024, 3, 15)


@pytest.fixture
def fixed_today():
    """Return a clock pinned to a known day."""
    return lambda: FIXED_DAY


@pytest.fixture
def renderer(fixed_today):
    """Create a renderer with sequential ids and a fixed clock."""
    return MessageRenderer(
        settings=RenderSettings(),
        minter_factory=SequentialIdMinter,
        today=fixed_today,
    )


@pytest.fixture
def scheduler():
    """Create a virtual clock starting at zero."""
    return ManualScheduler()


@pytest.fixture
def rng():
    """Return a seeded random source."""
    return random.Random(1234)


@pytest.fixture
def playback_settings():
    """Return playback timing with round numbers."""
    return PlaybackSettings(
        phrase_interval=1.5,
        dot_interval=0.4,
        min_dwell=1.0,
        max_dwell=3.0,
        char_delay=0.01,
        pause_delay=0.1,
        sentence_delay=0.3,
    )


@pytest.fixture
def transcript():
    """Create an empty in-memory transcript."""
    return InMemoryTranscript()


@pytest.fixture
def recorder():
    """Create a callback that records every update."""
    return RecordingCallback()


@pytest.fixture
def controller(transcript, scheduler, renderer, rng, playback_settings, recorder):
    """Create a controller wired to the manual scheduler."""
    return PlaybackController(
        transcript=transcript,
        scheduler=scheduler,
        renderer=renderer,
        rng=rng,
        settings=playback_settings,
        callback=recorder,
    )


@pytest.fixture
def investment_reply():
    """Return a reply with an investment comparison table."""
    return (
        "Here are some options:\n"
        "\n"
        "| Investment | Risk Level | Returns | Minimum |\n"
        "| :--- | :-: | --: | --- |\n"
        "| **Index Fund** | High | 12% | ₹500 |\n"
        "| FD | Low | 7% | ₹1,000 |\n"
        "\n"
        "> Past returns do not guarantee future results.\n"
    )
