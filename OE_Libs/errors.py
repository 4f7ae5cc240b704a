"""
Error taxonomy for Open Editor.

Every failure raised by the editing core derives from EditorError so callers
can catch one type at the session boundary. Parameter errors also derive
from ValueError.
"""


class EditorError(Exception):
    """Base class for all editor errors."""


class DecodeError(EditorError):
    """Input bytes could not be decoded into an image."""


class UnsupportedFormat(DecodeError):
    """Input bytes are not in a recognized raster format."""


class InvalidDimensions(EditorError, ValueError):
    """A width or height is outside its domain."""


class InvalidRatio(EditorError, ValueError):
    """A crop aspect ratio is not a positive number."""


class InvalidQuality(EditorError, ValueError):
    """An export quality is outside [0.1, 1.0]."""


class OperationInProgress(EditorError):
    """A destructive operation was issued while another was still running."""

    def __init__(self, requested: str, running: str):
        super().__init__(
            f"Cannot start '{requested}' while '{running}' is in progress; "
            f"retry after it completes"
        )
        self.requested = requested
        self.running = running


class EncodeError(EditorError):
    """The image could not be encoded to the requested format."""


class ContextUnavailable(EditorError):
    """A drawing surface could not be acquired for a render call."""


class NoImageLoaded(EditorError):
    """The operation needs an image but the session has none."""
