"""
Projective Rectifier

Computes the target rectangle for a labeled quadrilateral, solves the
homography mapping it onto that rectangle and resamples the source image
into a new, axis-aligned buffer.
"""

import logging
from typing import Optional, Tuple, Union

import cv2
import numpy as np

from src.rectification.config_loader import WarpConfig
from src.rectification.errors import DegenerateGeometry, TransformSolveFailure
from src.rectification.types import OrderedCorners

logger = logging.getLogger(__name__)

INTERPOLATION_FLAGS = {
    "nearest": cv2.INTER_NEAREST,
    "linear": cv2.INTER_LINEAR,
    "cubic": cv2.INTER_CUBIC,
    "area": cv2.INTER_AREA,
    "lanczos": cv2.INTER_LANCZOS4,
}


def _as_corner_array(corners: Union[OrderedCorners, np.ndarray, list]) -> np.ndarray:
    if isinstance(corners, OrderedCorners):
        return corners.to_numpy().astype(np.float64)
    arr = np.asarray(corners, dtype=np.float64)
    if arr.shape != (4, 2):
        raise ValueError(f"Expected corners with shape (4, 2), got {arr.shape}")
    return arr


def compute_target_size(
    corners: Union[OrderedCorners, np.ndarray, list],
) -> Tuple[int, int]:
    """
    Calculate the output rectangle size for ordered corners.

    Width is the longer of the top and bottom edges, height the longer of the
    left and right edges, each rounded to the nearest integer.

    Args:
        corners: Corners in TL, TR, BR, BL order.

    Returns:
        Tuple of (max_width, max_height).

    Example:
        >>> compute_target_size([[0, 0], [100, 0], [100, 50], [0, 50]])
        (100, 50)
    """
    tl, tr, br, bl = _as_corner_array(corners)

    width_a = np.linalg.norm(br - bl)
    width_b = np.linalg.norm(tr - tl)
    max_width = int(round(max(width_a, width_b)))

    height_a = np.linalg.norm(tr - br)
    height_b = np.linalg.norm(tl - bl)
    max_height = int(round(max(height_a, height_b)))

    logger.debug(f"Target dimensions: {max_width}x{max_height}")
    return max_width, max_height


def quadrilateral_area(corners: Union[OrderedCorners, np.ndarray, list]) -> float:
    """Absolute shoelace area of the corner loop TL -> TR -> BR -> BL."""
    pts = _as_corner_array(corners)
    x, y = pts[:, 0], pts[:, 1]
    return float(abs(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1))) / 2.0)


def solve_perspective_transform(src: np.ndarray, dst: np.ndarray) -> np.ndarray:
    """
    Solve the 3x3 homography mapping 4 source points onto 4 destination points.

    Uses the standard 8x8 linear system with the bottom-right entry fixed at 1.

    Args:
        src: Source points, shape (4, 2).
        dst: Destination points, shape (4, 2).

    Returns:
        Homography matrix of shape (3, 3), float64.

    Raises:
        TransformSolveFailure: If the system is singular or the result is not
            finite and invertible.
    """
    src = np.asarray(src, dtype=np.float64)
    dst = np.asarray(dst, dtype=np.float64)

    A = np.zeros((8, 8), dtype=np.float64)
    b = np.zeros(8, dtype=np.float64)

    for i in range(4):
        x_s, y_s = src[i]
        x_d, y_d = dst[i]
        A[2 * i] = [x_s, y_s, 1, 0, 0, 0, -x_d * x_s, -x_d * y_s]
        A[2 * i + 1] = [0, 0, 0, x_s, y_s, 1, -y_d * x_s, -y_d * y_s]
        b[2 * i] = x_d
        b[2 * i + 1] = y_d

    try:
        h = np.linalg.solve(A, b)
    except np.linalg.LinAlgError as e:
        raise TransformSolveFailure(f"Singular perspective system: {e}") from e

    M = np.append(h, 1.0).reshape(3, 3)

    if not np.all(np.isfinite(M)):
        raise TransformSolveFailure("Perspective transform has non-finite entries")

    try:
        np.linalg.inv(M)
    except np.linalg.LinAlgError as e:
        raise TransformSolveFailure(f"Perspective transform is not invertible: {e}") from e

    return M


def warp_to_rectangle(
    image: np.ndarray,
    corners: Union[OrderedCorners, np.ndarray, list],
    config: Optional[WarpConfig] = None,
) -> np.ndarray:
    """
    Flatten the quadrilateral region of ``image`` into an axis-aligned rectangle.

    Every destination pixel is inverse-mapped into the source and sampled with
    the configured interpolation (bilinear by default). Pixels landing outside
    the source are filled with ``config.border_value``.

    Args:
        image: Source image (H, W) or (H, W, C). Not modified.
        corners: Corners in TL, TR, BR, BL order.
        config: Resampling options.

    Returns:
        New image of shape (max_height, max_width[, C]).

    Raises:
        DegenerateGeometry: If the target size collapses or the corners enclose
            no area.
        TransformSolveFailure: If the homography cannot be solved.

    Example:
        >>> image = cv2.imread("page.jpg")
        >>> corners = order_corners([[120, 80], [870, 95], [900, 1150], [90, 1120]])
        >>> flat = warp_to_rectangle(image, corners)
    """
    config = config or WarpConfig()
    src = _as_corner_array(corners)

    max_width, max_height = compute_target_size(src)
    if max_width <= 0 or max_height <= 0:
        raise DegenerateGeometry(
            f"Target size collapsed: width={max_width}, height={max_height}"
        )

    area = quadrilateral_area(src)
    if area < config.min_corner_area:
        raise DegenerateGeometry(
            f"Corners enclose {area:.2f}px^2 (< {config.min_corner_area}px^2)"
        )

    dst = np.array(
        [
            [0, 0],  # Top-Left
            [max_width - 1, 0],  # Top-Right
            [max_width - 1, max_height - 1],  # Bottom-Right
            [0, max_height - 1],  # Bottom-Left
        ],
        dtype=np.float64,
    )

    M = solve_perspective_transform(src, dst)

    channels = 1 if image.ndim == 2 else image.shape[2]
    border = tuple([config.border_value] * max(channels, 1))

    rectified = cv2.warpPerspective(
        image,
        M,
        (max_width, max_height),
        flags=INTERPOLATION_FLAGS[config.interpolation],
        borderMode=cv2.BORDER_CONSTANT,
        borderValue=border,
    )

    # warpPerspective drops a trailing singleton channel axis
    if image.ndim == 3 and rectified.ndim == 2:
        rectified = rectified[:, :, np.newaxis]

    logger.info(f"Rectified quadrilateral to {max_width}x{max_height} rectangle")
    return rectified
