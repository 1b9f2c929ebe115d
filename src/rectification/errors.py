"""
Exception types for the rectification core.

Only DecodeError is a hard failure. The remaining kinds are raised by the
individual stages and converted into a fallback result by the processor.
"""


class RectificationError(Exception):
    """Base class for all rectification failures."""


class DecodeError(RectificationError):
    """Input image is unreadable, corrupt, empty or has an unsupported layout."""


class NoBoundaryFound(RectificationError):
    """No contour approximated to a 4-vertex polygon."""


class DegenerateGeometry(RectificationError):
    """Corners collapse to a zero-sized or zero-area target rectangle."""


class TransformSolveFailure(RectificationError):
    """The projective transform system is singular or produced non-finite values."""
