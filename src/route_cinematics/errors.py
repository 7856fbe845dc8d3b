"""Exception types raised by the route-to-camera-path pipeline."""

from __future__ import annotations


class DecodeError(ValueError):
    """Encoded polyline text is malformed."""


class InsufficientPathError(ValueError):
    """A route has fewer than two usable points.

    The pipeline treats this condition as empty output and does not raise
    it; callers that need at least one waypoint may raise it themselves.
    """


class BufferLengthMismatch(ValueError):
    """Two frames cannot be composited because their buffers differ in size."""


def recoverable_payload_exceptions() -> tuple[type[BaseException], ...]:
    """Return exceptions that signal a malformed-but-skippable payload entry."""
    return (KeyError, TypeError, AttributeError, IndexError)
