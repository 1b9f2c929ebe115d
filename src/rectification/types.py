"""
Data types and structures for the Rectification module.

Provides type-safe containers for detected boundaries and pipeline results.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from src.common.types import Point


class RectificationStatus(Enum):
    """Pipeline outcomes."""

    RECTIFIED = "RECTIFIED"
    NOT_FOUND = "NOT_FOUND"  # No document boundary, original returned
    FAILED = "FAILED"  # Boundary found but could not be warped, original returned


class FailureReason(Enum):
    """Specific reasons for falling back to the original image."""

    NO_BOUNDARY_FOUND = "No Boundary Found"
    DEGENERATE_GEOMETRY = "Degenerate Geometry"
    TRANSFORM_SOLVE_FAILURE = "Transform Solve Failure"
    NONE = "None"


@dataclass
class Quadrilateral:
    """
    A 4-vertex polygon produced by the polygon approximator.

    Attributes:
        points: Vertices in contour trace order, shape (4, 2), float32.
        area: Enclosed area in square pixels (used for candidate ranking).
    """

    points: np.ndarray
    area: float

    def __post_init__(self):
        self.points = np.asarray(self.points, dtype=np.float32).reshape(-1, 2)
        if self.points.shape != (4, 2):
            raise ValueError(
                f"Quadrilateral requires 4 points, got shape {self.points.shape}"
            )


@dataclass(frozen=True)
class OrderedCorners:
    """Quadrilateral vertices labeled top-left, top-right, bottom-right, bottom-left."""

    tl: Point
    tr: Point
    br: Point
    bl: Point

    def to_numpy(self) -> np.ndarray:
        """Return corners as a (4, 2) float32 array in TL, TR, BR, BL order."""
        return np.array(
            [p.to_tuple() for p in (self.tl, self.tr, self.br, self.bl)],
            dtype=np.float32,
        )

    @classmethod
    def from_numpy(cls, arr: np.ndarray) -> "OrderedCorners":
        """Build from a (4, 2) array already in TL, TR, BR, BL order."""
        arr = np.asarray(arr, dtype=np.float32)
        if arr.shape != (4, 2):
            raise ValueError(f"Expected shape (4, 2), got {arr.shape}")
        tl, tr, br, bl = (Point.from_numpy(p) for p in arr)
        return cls(tl=tl, tr=tr, br=br, bl=bl)


@dataclass
class RectificationResult:
    """
    Output from the rectification pipeline.

    Attributes:
        status: RECTIFIED, NOT_FOUND or FAILED.
        image: The flattened page when rectified, otherwise the original input.
        failure_reason: Why the original was returned (NONE when rectified).
        corners: Ordered corners of the detected page, if one was found.
        message: Diagnostic detail from the failing stage.
    """

    status: RectificationStatus
    image: np.ndarray
    failure_reason: FailureReason = FailureReason.NONE
    corners: Optional[OrderedCorners] = None
    message: str = ""

    def is_rectified(self) -> bool:
        """Check whether the page was flattened."""
        return self.status == RectificationStatus.RECTIFIED

    def get_message(self) -> str:
        """Get human-readable outcome description."""
        if self.is_rectified():
            height, width = self.image.shape[:2]
            return f"Rectified to {width}x{height}"

        reason_messages = {
            FailureReason.NO_BOUNDARY_FOUND: "No document boundary found",
            FailureReason.DEGENERATE_GEOMETRY: "Document corners are degenerate",
            FailureReason.TRANSFORM_SOLVE_FAILURE: (
                "Perspective transform could not be solved"
            ),
        }
        text = reason_messages.get(
            self.failure_reason, f"Fallback: {self.failure_reason.value}"
        )
        if self.message:
            text = f"{text}: {self.message}"
        return text
