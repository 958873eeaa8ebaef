"""Exception taxonomy for the rendering and playback core.

Only configuration and invariant violations ever reach a caller.
Malformed assistant text is recovered inside the renderer.
"""


class NiveshPathError(Exception):
    """Base class for all errors raised by this package."""


class MalformedBlockError(NiveshPathError):
    """A block-start pattern matched but the body has the wrong shape.

    Raised by block parsers and always caught by the classifier,
    which falls back to paragraph treatment of the offending span.
    """

    def __init__(self, message: str, kind: str | None = None):
        msg = f"Malformed block: {message}"
        if kind:
            msg += f" (kind: {kind})"
        super().__init__(msg)
        self.kind = kind


class SanitizerConfigError(NiveshPathError):
    """The sanitizer allow-list would admit executable content."""

    def __init__(self, message: str):
        super().__init__(f"Invalid sanitizer configuration: {message}")


class TranscriptStateError(NiveshPathError):
    """A transcript invariant would be violated by the requested change."""

    def __init__(self, message: str, message_id: str | None = None):
        msg = f"Transcript state error: {message}"
        if message_id:
            msg += f" (message: {message_id})"
        super().__init__(msg)
        self.message_id = message_id


class PlaybackError(NiveshPathError):
    """The playback controller was asked to do something out of order."""

    def __init__(self, message: str):
        super().__init__(f"Playback error: {message}")
