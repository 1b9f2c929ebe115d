"""
Contour extractor.

Traces connected boundary curves in a binary edge map.
"""

import logging
from typing import Iterator, Optional

import cv2
import numpy as np

from src.rectification.config_loader import ContourConfig
from src.rectification.errors import DecodeError

logger = logging.getLogger(__name__)


def iter_contours(
    edge_map: np.ndarray, config: Optional[ContourConfig] = None
) -> Iterator[np.ndarray]:
    """
    Yield every traced contour of the edge map.

    All contours are retrieved (RETR_LIST), not only the outermost ones, so a
    page boundary nested inside background clutter is still reported.
    Contours with fewer than ``config.min_points`` points are skipped.

    Args:
        edge_map: 2D uint8 binary edge map.
        config: Contour filtering parameters.

    Yields:
        Contours of shape (N, 1, 2), int32, in trace order.

    Raises:
        DecodeError: If the edge map is not a 2D uint8 array.
    """
    config = config or ContourConfig()

    if edge_map is None or edge_map.size == 0 or edge_map.ndim != 2:
        raise DecodeError("Edge map must be a non-empty 2D array")

    contours, _ = cv2.findContours(
        edge_map.astype(np.uint8), cv2.RETR_LIST, cv2.CHAIN_APPROX_SIMPLE
    )
    logger.debug(f"Traced {len(contours)} contours")

    skipped = 0
    for contour in contours:
        if len(contour) < config.min_points:
            skipped += 1
            continue
        yield contour

    if skipped:
        logger.debug(f"Skipped {skipped} contours with < {config.min_points} points")
