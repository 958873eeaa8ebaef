"""Provider factory functions for CLI.

Centralizes creation of settings, renderer and playback controller.
Hides configuration details from command implementations.
"""

import random

from ..config import Settings, load_settings
from ..logging_setup import configure
from ..playback import PlaybackCallback, PlaybackController, Scheduler
from ..render import MessageRenderer, SequentialIdMinter
from ..transcript import create_transcript_store


def get_settings() -> Settings:
    """Load settings from the environment and wire logging.

    Environment variables:
        NIVESHPATH_LOG_LEVEL: Package log level (default: WARNING)
        See niveshpath.config.load_settings for the timing variables
    """
    settings = load_settings()
    configure(settings.log_level)
    return settings


def get_renderer(settings: Settings) -> MessageRenderer:
    """Create a renderer with sequential ids.

    Sequential ids make the ids printed by `render --hooks` valid
    input for `copy` on the same file.
    """
    return MessageRenderer(settings=settings.render, minter_factory=SequentialIdMinter)


def get_controller(
    settings: Settings,
    scheduler: Scheduler,
    callback: PlaybackCallback | None = None,
    seed: int | None = None,
) -> PlaybackController:
    """Create a playback controller over a fresh in-memory transcript.

    Args:
        settings: Loaded settings
        scheduler: Timer source
        callback: Display listener
        seed: Seed for phrases, dwell and jitter (default: unseeded)
    """
    return PlaybackController(
        transcript=create_transcript_store("memory"),
        scheduler=scheduler,
        renderer=get_renderer(settings),
        rng=random.Random(seed),
        settings=settings.playback,
        callback=callback,
    )
