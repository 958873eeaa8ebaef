"""Logger wiring for command-line use.

Library modules only create loggers with logging.getLogger(__name__);
handlers are attached here, once, on the package logger.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "niveshpath"

_configured = False


def _parse_level(raw: str | None) -> int:
    normalized = str(raw or "WARNING").strip().upper()
    level = logging.getLevelName(normalized)
    return level if isinstance(level, int) else logging.WARNING


def configure(level: str | None = None, console: Console | None = None) -> logging.Logger:
    """Attach a rich handler to the package logger.

    Idempotent: later calls only adjust the level.

    Args:
        level: Level name such as "DEBUG" or "info" (default: WARNING)
        console: Console to log to (default: stderr)

    Returns:
        The package logger
    """
    global _configured
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(_parse_level(level))

    if not _configured:
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
        logger.propagate = False
        _configured = True

    return logger
