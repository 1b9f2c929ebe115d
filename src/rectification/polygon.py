"""
Polygon approximator.

Simplifies traced contours with Douglas-Peucker and picks the largest
4-vertex candidate as the document boundary.
"""

import logging
from typing import Iterable, Optional

import cv2
import numpy as np

from src.rectification.config_loader import ApproximationConfig
from src.rectification.types import Quadrilateral

logger = logging.getLogger(__name__)


def approximate_polygon(contour: np.ndarray, epsilon_ratio: float = 0.02) -> np.ndarray:
    """
    Simplify a closed contour.

    A vertex survives only if dropping it would move the boundary by more than
    ``epsilon_ratio`` times the contour perimeter.

    Args:
        contour: Contour of shape (N, 1, 2) or (N, 2).
        epsilon_ratio: Tolerance as a fraction of the closed perimeter.

    Returns:
        Polygon vertices of shape (K, 1, 2), same dtype as the contour.
    """
    contour = np.asarray(contour)
    if contour.ndim == 2:
        contour = contour.reshape(-1, 1, 2)
    if contour.dtype not in (np.int32, np.float32):
        contour = contour.astype(np.float32)

    perimeter = cv2.arcLength(contour, True)
    return cv2.approxPolyDP(contour, epsilon_ratio * perimeter, True)


def find_document_quadrilateral(
    contours: Iterable[np.ndarray],
    config: Optional[ApproximationConfig] = None,
    image_area: Optional[float] = None,
) -> Optional[Quadrilateral]:
    """
    Select the maximum-area contour that simplifies to exactly 4 vertices.

    Ties keep the first candidate seen. Approximations enclosing no area are
    never selected.

    Args:
        contours: Contours in any order (consumed once).
        config: Approximation tolerance and area filter.
        image_area: Source image area, required for ``min_area_ratio`` filtering.

    Returns:
        The winning Quadrilateral, or None when no contour qualifies.
    """
    config = config or ApproximationConfig()

    min_area = 0.0
    if image_area and config.min_area_ratio > 0:
        min_area = config.min_area_ratio * image_area

    best: Optional[Quadrilateral] = None
    candidates = 0

    for contour in contours:
        approx = approximate_polygon(contour, config.epsilon_ratio)
        if len(approx) != 4:
            continue

        candidates += 1
        area = float(cv2.contourArea(approx))
        # Zero-area loops retrace an open edge
        if area <= 0 or area < min_area:
            continue
        if best is None or area > best.area:
            best = Quadrilateral(points=approx.reshape(4, 2), area=area)

    if best is None:
        logger.debug(f"No quadrilateral selected ({candidates} 4-vertex candidates)")
    else:
        logger.debug(
            f"Selected quadrilateral with area {best.area:.1f} "
            f"out of {candidates} candidates"
        )
    return best
