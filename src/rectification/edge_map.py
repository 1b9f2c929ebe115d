"""
Edge map builder.

Converts a raster to single-channel intensity, smooths sensor noise and
extracts a binary edge map with Canny hysteresis thresholding.
"""

import logging
from typing import Optional

import cv2
import numpy as np

from src.rectification.config_loader import EdgeConfig
from src.rectification.errors import DecodeError

logger = logging.getLogger(__name__)


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """
    Convert a BGR, BGRA or single-channel image to a 2D intensity image.

    Raises:
        DecodeError: If the image is missing, empty or has an unsupported layout.
    """
    if image is None or not isinstance(image, np.ndarray) or image.size == 0:
        raise DecodeError("Invalid input image: image is None or empty")

    if image.dtype != np.uint8:
        raise DecodeError(f"Expected 8-bit image, got dtype {image.dtype}")

    if image.ndim == 2:
        return image.copy()

    if image.ndim != 3:
        raise DecodeError(f"Expected 2D or 3D image, got shape {image.shape}")

    channels = image.shape[2]
    if channels == 1:
        return image[:, :, 0].copy()
    if channels == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    if channels == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)

    raise DecodeError(f"Unsupported channel count: {channels}")


def build_edge_map(
    image: np.ndarray, config: Optional[EdgeConfig] = None
) -> np.ndarray:
    """
    Build a binary edge map for boundary detection.

    Args:
        image: Input raster (H, W), (H, W, 1), (H, W, 3) BGR or (H, W, 4) BGRA.
        config: Blur kernel and hysteresis thresholds. Defaults to 5x5 / 75 / 200.

    Returns:
        uint8 array of shape (H, W) with edge pixels set to 255.

    Raises:
        DecodeError: If the image is malformed.
    """
    config = config or EdgeConfig()

    gray = to_grayscale(image)
    k = config.blur_kernel_size
    blurred = cv2.GaussianBlur(gray, (k, k), 0)
    edges = cv2.Canny(blurred, config.canny_low, config.canny_high)

    logger.debug(
        f"Edge map {edges.shape[1]}x{edges.shape[0]}: "
        f"{int(np.count_nonzero(edges))} edge pixels"
    )
    return edges
