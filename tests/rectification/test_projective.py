"""
Unit tests for projective module.

Tests target-size computation, homography solving and resampling.
"""

import numpy as np
import pytest

from src.rectification.config_loader import WarpConfig
from src.rectification.corner_ordering import order_corners
from src.rectification.errors import DegenerateGeometry, TransformSolveFailure
from src.rectification.projective import (
    compute_target_size,
    quadrilateral_area,
    solve_perspective_transform,
    warp_to_rectangle,
)


def _apply(M, point):
    x, y, w = M @ np.array([point[0], point[1], 1.0])
    return x / w, y / w


class TestComputeTargetSize:
    """Tests for compute_target_size."""

    def test_axis_aligned_rectangle(self):
        assert compute_target_size([[0, 0], [100, 0], [100, 50], [0, 50]]) == (100, 50)

    def test_uses_longer_edges(self):
        # Top edge 100, bottom edge 80; left edge 60, right edge 50
        corners = [[0, 0], [100, 0], [90, 50], [10, 60]]
        width, height = compute_target_size(corners)

        assert width == round(np.hypot(100, 0))
        assert height == round(max(np.hypot(10, 50), np.hypot(10, 60)))

    def test_rounds_to_nearest(self):
        corners = [[0, 0], [10.6, 0], [10.6, 5.4], [0, 5.4]]
        assert compute_target_size(corners) == (11, 5)

    def test_accepts_ordered_corners(self, sample_quadrilateral_points):
        corners = order_corners(sample_quadrilateral_points)
        assert compute_target_size(corners) == compute_target_size(corners.to_numpy())

    def test_invalid_shape(self):
        with pytest.raises(ValueError, match="shape"):
            compute_target_size([[0, 0], [1, 1]])


class TestSolvePerspectiveTransform:
    """Tests for solve_perspective_transform."""

    def test_maps_source_corners_onto_destination(self, sample_quadrilateral_points):
        src = order_corners(sample_quadrilateral_points).to_numpy()
        dst = np.array([[0, 0], [199, 0], [199, 249], [0, 249]], dtype=np.float64)

        M = solve_perspective_transform(src, dst)

        assert M.shape == (3, 3)
        assert M[2, 2] == 1.0
        for s, d in zip(src, dst):
            np.testing.assert_allclose(_apply(M, s), d, atol=1e-6)

    def test_identity_for_identical_points(self):
        pts = np.array([[0, 0], [10, 0], [10, 10], [0, 10]], dtype=np.float64)
        np.testing.assert_allclose(solve_perspective_transform(pts, pts), np.eye(3), atol=1e-9)

    def test_duplicate_points_raise(self):
        src = np.array([[0, 0], [0, 0], [10, 10], [0, 10]], dtype=np.float64)
        dst = np.array([[0, 0], [9, 0], [9, 9], [0, 9]], dtype=np.float64)

        with pytest.raises(TransformSolveFailure):
            solve_perspective_transform(src, dst)


class TestWarpToRectangle:
    """Tests for warp_to_rectangle."""

    def test_dimension_computation(self):
        image = np.full((200, 300, 3), 128, dtype=np.uint8)
        corners = order_corners([[0, 0], [100, 0], [100, 50], [0, 50]])

        rectified = warp_to_rectangle(image, corners)

        assert rectified.shape == (50, 100, 3)
        assert rectified.dtype == np.uint8

    def test_full_frame_is_nearly_unchanged(self, gradient_image):
        """A page boundary equal to the image frame leaves the content as is."""
        height, width = gradient_image.shape[:2]
        corners = order_corners([[0, 0], [width, 0], [width, height], [0, height]])

        rectified = warp_to_rectangle(gradient_image, corners)

        assert rectified.shape == gradient_image.shape
        diff = np.abs(
            rectified[:-1, :-1].astype(np.int16)
            - gradient_image[:-1, :-1].astype(np.int16)
        )
        assert diff.max() <= 4

    def test_flattens_skewed_page(self, sample_document_image):
        image, page = sample_document_image
        rectified = warp_to_rectangle(image, order_corners(page))

        height, width = rectified.shape[:2]
        assert (width, height) == compute_target_size(order_corners(page))
        # Interior of the flattened page is paper, not desk
        center = rectified[height // 4 : 3 * height // 4, width // 8 : width // 3]
        assert center.mean() > 200

    def test_outside_pixels_use_border_value(self):
        image = np.zeros((100, 100), dtype=np.uint8)
        corners = order_corners([[-50, -50], [149, -50], [149, 149], [-50, 149]])

        rectified = warp_to_rectangle(image, corners, WarpConfig(border_value=255))

        assert rectified[0, 0] == 255
        assert rectified[100, 100] == 0

    def test_single_channel_axis_preserved(self):
        image = np.full((40, 40, 1), 90, dtype=np.uint8)
        corners = order_corners([[0, 0], [30, 0], [30, 20], [0, 20]])

        assert warp_to_rectangle(image, corners).shape == (20, 30, 1)

    def test_input_not_modified(self, sample_document_image):
        image, page = sample_document_image
        before = image.copy()
        warp_to_rectangle(image, order_corners(page))
        np.testing.assert_array_equal(image, before)

    @pytest.mark.parametrize("interpolation", ["nearest", "linear", "cubic", "area", "lanczos"])
    def test_interpolation_options(self, interpolation):
        image = np.full((60, 60, 3), 77, dtype=np.uint8)
        corners = order_corners([[5, 5], [50, 8], [52, 55], [3, 50]])

        rectified = warp_to_rectangle(image, corners, WarpConfig(interpolation=interpolation))
        assert rectified.shape[2] == 3

    def test_collinear_corners_rejected(self):
        image = np.zeros((100, 100, 3), dtype=np.uint8)
        corners = order_corners([[0, 0], [10, 10], [20, 20], [30, 30]])

        assert quadrilateral_area(corners) == pytest.approx(0.0)
        with pytest.raises(DegenerateGeometry):
            warp_to_rectangle(image, corners)

    def test_collapsed_size_rejected(self):
        image = np.zeros((100, 100, 3), dtype=np.uint8)
        corners = np.array([[5, 5], [5, 5], [5, 5], [5, 5]], dtype=np.float32)

        with pytest.raises(DegenerateGeometry, match="collapsed"):
            warp_to_rectangle(image, corners)
