"""
Document perspective rectification.

Finds a photographed page's quadrilateral boundary and warps it to an
axis-aligned rectangle, as if the page had been scanned head-on.

Pipeline stages:
1. Edge map (grayscale, Gaussian blur, Canny)
2. Contour extraction (all contours, not only outermost)
3. Polygon approximation (largest 4-vertex candidate)
4. Corner ordering (TL, TR, BR, BL)
5. Perspective rectification (homography + bilinear resampling)
"""

from src.rectification.codec import decode_image, encode_image, load_image, save_image
from src.rectification.config_loader import RectificationConfig, load_config
from src.rectification.corner_ordering import order_corners, order_points
from src.rectification.errors import (
    DecodeError,
    DegenerateGeometry,
    NoBoundaryFound,
    RectificationError,
    TransformSolveFailure,
)
from src.rectification.processor import DocumentRectifier, rectify
from src.rectification.projective import compute_target_size, warp_to_rectangle
from src.rectification.types import (
    FailureReason,
    OrderedCorners,
    Quadrilateral,
    RectificationResult,
    RectificationStatus,
)

__all__ = [
    "DocumentRectifier",
    "rectify",
    "load_config",
    "order_points",
    "order_corners",
    "compute_target_size",
    "warp_to_rectangle",
    "decode_image",
    "encode_image",
    "load_image",
    "save_image",
    "RectificationConfig",
    "RectificationResult",
    "RectificationStatus",
    "FailureReason",
    "OrderedCorners",
    "Quadrilateral",
    "RectificationError",
    "DecodeError",
    "NoBoundaryFound",
    "DegenerateGeometry",
    "TransformSolveFailure",
]
