"""
Corner ordering for perspective rectification.
"""

import logging
from typing import Union

import numpy as np

from src.rectification.types import OrderedCorners

logger = logging.getLogger(__name__)


def order_points(pts: Union[np.ndarray, list]) -> np.ndarray:
    """
    Order 4 points as Top-Left, Top-Right, Bottom-Right, Bottom-Left.

    The labeling depends only on geometry, never on input order or winding:
    - Top-Left: smallest sum (x + y)
    - Bottom-Right: largest sum (x + y)
    - Top-Right: smallest difference (y - x)
    - Bottom-Left: largest difference (y - x)

    On an exact tie the first point encountered wins.

    Args:
        pts: Array or list of 4 [x, y] points, shape (4, 2) or (4, 1, 2).

    Returns:
        Array of shape (4, 2), float32, in TL, TR, BR, BL order.

    Raises:
        ValueError: If input does not contain exactly 4 points.

    Example:
        >>> pts = np.array([[100, 200], [300, 150], [320, 400], [80, 380]])
        >>> ordered = order_points(pts)
        >>> # ordered[0] is Top-Left, ordered[1] is Top-Right, etc.
    """
    pts = np.array(pts, dtype=np.float32)
    if pts.shape == (4, 1, 2):
        pts = pts.reshape(4, 2)

    if pts.shape != (4, 2):
        raise ValueError(
            f"Expected exactly 4 points with shape (4, 2), got shape {pts.shape}"
        )

    rect = np.zeros((4, 2), dtype=np.float32)

    s = pts.sum(axis=1)  # x + y
    diff = pts[:, 1] - pts[:, 0]  # y - x

    rect[0] = pts[np.argmin(s)]
    rect[2] = pts[np.argmax(s)]
    rect[1] = pts[np.argmin(diff)]
    rect[3] = pts[np.argmax(diff)]

    logger.debug(
        f"Ordered points: TL={rect[0]}, TR={rect[1]}, BR={rect[2]}, BL={rect[3]}"
    )
    return rect


def order_corners(pts: Union[np.ndarray, list]) -> OrderedCorners:
    """Order 4 points and return them as labeled corners."""
    return OrderedCorners.from_numpy(order_points(pts))
