"""Configuration for rendering and playback.

Centralizes the tunable numbers of the core and how they are read
from the environment.

Hidden design decisions:
- Defaults mirror the pacing and heuristics of the chat screen
- Environment variables override defaults (NIVESHPATH_* prefix)
- Settings are immutable pydantic models passed explicitly, never globals
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, model_validator

DEFAULT_DOMAIN_KEYWORDS = ("investment", "fund", "risk", "returns", "minimum")

DEFAULT_THINKING_PHRASES = (
    "Analyzing your question",
    "Reviewing your financial profile",
    "Checking market insights",
    "Comparing investment options",
    "Preparing your answer",
)


class RenderSettings(BaseModel):
    """Settings that shape the generated markup."""

    domain_keywords: tuple[str, ...] = Field(
        default=DEFAULT_DOMAIN_KEYWORDS,
        description="Header keywords that flag an investment table"
    )
    copy_min_message_length: int = Field(
        default=20,
        ge=0,
        description="Messages shorter than this get no code copy button"
    )
    list_indent_rem: float = Field(
        default=1.5,
        gt=0,
        description="Left margin per list depth level, in rem"
    )
    date_format: str = Field(
        default="%B %Y",
        description="strftime format of the 'Data as of' table footer"
    )

    model_config = {"frozen": True}


class PlaybackSettings(BaseModel):
    """Timing of the thinking indicator and the typing reveal (seconds)."""

    thinking_phrases: tuple[str, ...] = Field(
        default=DEFAULT_THINKING_PHRASES,
        min_length=1,
        description="Status phrases rotated while thinking"
    )
    phrase_interval: float = Field(default=1.5, gt=0, description="Phrase rotation tick")
    dot_interval: float = Field(default=0.4, gt=0, description="Dot animation tick")
    max_dots: int = Field(default=3, ge=0, description="Dots before the cycle restarts")
    min_dwell: float = Field(default=1.0, ge=0, description="Shortest thinking dwell")
    max_dwell: float = Field(default=3.0, ge=0, description="Longest thinking dwell")
    char_delay: float = Field(default=0.015, ge=0, description="Delay after ordinary characters")
    pause_delay: float = Field(default=0.12, ge=0, description="Delay after commas and newlines")
    sentence_delay: float = Field(default=0.35, ge=0, description="Delay after . ! ?")
    jitter: float = Field(default=0.0, ge=0, description="Random extra delay per character")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_dwell_range(self) -> "PlaybackSettings":
        if self.min_dwell > self.max_dwell:
            raise ValueError(
                f"min_dwell ({self.min_dwell}) must not exceed max_dwell ({self.max_dwell})"
            )
        return self


class Settings(BaseModel):
    """All settings of the core."""

    render: RenderSettings = Field(default_factory=RenderSettings)
    playback: PlaybackSettings = Field(default_factory=PlaybackSettings)
    log_level: str = Field(default="WARNING", description="Package log level")


def _env_float(name: str) -> float | None:
    value = os.getenv(name)
    return float(value) if value not in (None, "") else None


def load_settings(env_file: str | None = None) -> Settings:
    """Build settings from defaults overridden by environment variables.

    Args:
        env_file: Optional .env file to load first (default: search cwd)

    Returns:
        Settings instance

    Environment variables:
        NIVESHPATH_LOG_LEVEL: Package log level (default: WARNING)
        NIVESHPATH_MIN_DWELL / NIVESHPATH_MAX_DWELL: Thinking dwell bounds
        NIVESHPATH_CHAR_DELAY: Delay after ordinary characters
        NIVESHPATH_PAUSE_DELAY: Delay after commas and newlines
        NIVESHPATH_SENTENCE_DELAY: Delay after sentence punctuation
        NIVESHPATH_COPY_MIN_LENGTH: Minimum message length for code copy buttons
    """
    load_dotenv(env_file)

    playback_overrides = {
        field: value
        for field, value in (
            ("min_dwell", _env_float("NIVESHPATH_MIN_DWELL")),
            ("max_dwell", _env_float("NIVESHPATH_MAX_DWELL")),
            ("char_delay", _env_float("NIVESHPATH_CHAR_DELAY")),
            ("pause_delay", _env_float("NIVESHPATH_PAUSE_DELAY")),
            ("sentence_delay", _env_float("NIVESHPATH_SENTENCE_DELAY")),
        )
        if value is not None
    }

    render_overrides = {}
    copy_min = os.getenv("NIVESHPATH_COPY_MIN_LENGTH")
    if copy_min:
        render_overrides["copy_min_message_length"] = int(copy_min)

    return Settings(
        render=RenderSettings(**render_overrides),
        playback=PlaybackSettings(**playback_overrides),
        log_level=os.getenv("NIVESHPATH_LOG_LEVEL", "WARNING"),
    )
