"""
Main processor for the Rectification module.

Orchestrates the complete pipeline:
1. Edge map (grayscale + blur + Canny)
2. Contour extraction
3. Polygon approximation (largest quadrilateral)
4. Corner ordering
5. Perspective rectification

Any stage-local failure falls back to the original image. Only malformed
input (DecodeError) propagates to the caller.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import numpy as np

from src.common.types import ImageBuffer
from src.rectification.config_loader import RectificationConfig, load_config
from src.rectification.contours import iter_contours
from src.rectification.corner_ordering import order_corners
from src.rectification.edge_map import build_edge_map
from src.rectification.errors import (
    DegenerateGeometry,
    NoBoundaryFound,
    TransformSolveFailure,
)
from src.rectification.polygon import find_document_quadrilateral
from src.rectification.projective import warp_to_rectangle
from src.rectification.types import (
    FailureReason,
    OrderedCorners,
    RectificationResult,
    RectificationStatus,
)

logger = logging.getLogger(__name__)


class DocumentRectifier:
    """
    Detects a photographed page and flattens it to a head-on view.

    The instance only holds configuration; each call works on its own
    buffers, so one rectifier can serve concurrent callers.

    Example:
        >>> rectifier = DocumentRectifier()
        >>> image = cv2.imread("receipt.jpg")
        >>> result = rectifier.rectify(image)
        >>> if result.is_rectified():
        ...     cv2.imwrite("receipt_flat.png", result.image)
    """

    def __init__(
        self,
        config: Optional[RectificationConfig] = None,
        config_path: Optional[Path] = None,
    ):
        """
        Initialize the rectifier.

        Args:
            config: Pre-loaded configuration object. If None, will load from file.
            config_path: Path to config file. If None, uses default location.
        """
        if config is not None:
            self.config = config
            logger.info("Using provided configuration")
        else:
            self.config = load_config(config_path)
            logger.info("Loaded configuration from file")

    def detect(self, image: np.ndarray) -> OrderedCorners:
        """
        Locate the document boundary.

        Returns:
            Ordered corners of the largest quadrilateral contour.

        Raises:
            DecodeError: If the image is malformed.
            NoBoundaryFound: If no contour simplifies to 4 vertices.
        """
        edges = build_edge_map(image, self.config.edges)
        contours = iter_contours(edges, self.config.contours)
        image_area = float(image.shape[0] * image.shape[1])

        quad = find_document_quadrilateral(
            contours, self.config.approximation, image_area=image_area
        )
        if quad is None:
            raise NoBoundaryFound("No contour approximated to 4 vertices")

        logger.info(f"Document boundary found, area={quad.area:.0f}px^2")
        return order_corners(quad.points)

    def rectify(self, image: Union[np.ndarray, ImageBuffer]) -> RectificationResult:
        """
        Execute the complete rectification pipeline.

        Args:
            image: Decoded input image, (H, W) or (H, W, C) uint8, either a bare
                array or an ImageBuffer.

        Returns:
            RectificationResult. On fallback, ``result.image`` is the input
            array itself, untouched.

        Raises:
            DecodeError: If the input image is malformed.
        """
        if isinstance(image, ImageBuffer):
            image = image.data

        corners: Optional[OrderedCorners] = None
        try:
            corners = self.detect(image)
            rectified = warp_to_rectangle(image, corners, self.config.warp)
        except NoBoundaryFound as e:
            logger.warning("No document contour found, returning original image")
            return RectificationResult(
                status=RectificationStatus.NOT_FOUND,
                image=image,
                failure_reason=FailureReason.NO_BOUNDARY_FOUND,
                message=str(e),
            )
        except DegenerateGeometry as e:
            logger.warning(f"Degenerate document geometry, returning original: {e}")
            return self._fallback(image, corners, FailureReason.DEGENERATE_GEOMETRY, e)
        except TransformSolveFailure as e:
            logger.warning(f"Transform solve failed, returning original: {e}")
            return self._fallback(
                image, corners, FailureReason.TRANSFORM_SOLVE_FAILURE, e
            )

        return RectificationResult(
            status=RectificationStatus.RECTIFIED,
            image=rectified,
            corners=corners,
        )

    @staticmethod
    def _fallback(
        image: np.ndarray,
        corners: Optional[OrderedCorners],
        reason: FailureReason,
        error: Exception,
    ) -> RectificationResult:
        return RectificationResult(
            status=RectificationStatus.FAILED,
            image=image,
            failure_reason=reason,
            corners=corners,
            message=str(error),
        )


def rectify(
    image: np.ndarray, config: Optional[RectificationConfig] = None
) -> np.ndarray:
    """
    Convenience function: flatten the page in ``image`` or return it unchanged.

    Example:
        >>> flat = rectify(cv2.imread("page.jpg"))
    """
    rectifier = DocumentRectifier(config=config or RectificationConfig())
    return rectifier.rectify(image).image
