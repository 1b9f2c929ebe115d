"""
Pytest Configuration and Shared Fixtures

This file contains pytest configuration and fixtures that are available
to all test modules.
"""

import cv2
import numpy as np
import pytest


@pytest.fixture
def sample_quadrilateral_points():
    """Fixture providing sample 4-corner points in scrambled order."""
    return np.array(
        [
            [300, 150],  # Top-right area
            [100, 200],  # Top-left area
            [320, 400],  # Bottom-right area
            [80, 380],  # Bottom-left area
        ],
        dtype=np.float32,
    )


@pytest.fixture
def sample_document_image():
    """
    Fixture providing a photographed page: a skewed white sheet on a dark desk.

    Returns:
        Tuple of (image, page corners in TL, TR, BR, BL order).
    """
    image = np.full((600, 800, 3), 40, dtype=np.uint8)

    page = np.array([[150, 100], [650, 130], [620, 520], [180, 480]], dtype=np.int32)
    cv2.fillPoly(image, [page], (250, 250, 250))

    # Some "text" lines inside the page
    for y in range(180, 440, 40):
        cv2.line(image, (230, y), (560, y + 10), (90, 90, 90), 3)

    return image, page.astype(np.float32)


@pytest.fixture
def nested_quadrilaterals_image():
    """
    Fixture providing a bright page containing a dark inner box.

    Returns:
        Tuple of (image, outer area, inner area).
    """
    image = np.full((600, 800, 3), 30, dtype=np.uint8)
    cv2.rectangle(image, (100, 100), (700, 500), (240, 240, 240), -1)
    cv2.rectangle(image, (300, 200), (500, 400), (20, 20, 20), -1)
    return image, 600.0 * 400.0, 200.0 * 200.0


@pytest.fixture
def blank_image():
    """Fixture providing a featureless gray image with no edges."""
    return np.full((240, 320, 3), 180, dtype=np.uint8)


@pytest.fixture
def gradient_image():
    """Fixture providing a smooth 3-channel ramp image (no sharp edges)."""
    height, width = 120, 160
    xs = np.linspace(0, 255, width, dtype=np.float32)
    ys = np.linspace(0, 255, height, dtype=np.float32)
    image = np.zeros((height, width, 3), dtype=np.uint8)
    image[:, :, 0] = np.tile(xs, (height, 1)).astype(np.uint8)
    image[:, :, 1] = np.tile(ys[:, None], (1, width)).astype(np.uint8)
    image[:, :, 2] = 128
    return image
