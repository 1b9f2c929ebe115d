"""
Common type definitions for the document rectification pipeline.

This module provides Pydantic-based type definitions for the core data
structures shared by the rectification core and the outer workflow:
raster images and 2D points.

These types provide:
- Type validation and conversion
- Consistent interfaces across modules
- Integration with numpy arrays and OpenCV
"""

from typing import Tuple, Union

import numpy as np
from pydantic import BaseModel, Field, field_validator


class ImageBuffer(BaseModel):
    """
    Type-safe wrapper for raster images (numpy.ndarray).

    The wrapped array is owned by whoever holds the buffer. Stages never
    write into a buffer they received; use ``copy()`` to hand over an
    independent buffer.

    Attributes:
        data: The underlying numpy array containing image data.
            Shape: (H, W, C) for color images, (H, W) for grayscale.
            Dtype: uint8 (0-255), row-major.

    Example:
        >>> import cv2
        >>> image = cv2.imread("page.jpg")
        >>> buffer = ImageBuffer(data=image)
        >>> print(buffer.height, buffer.width, buffer.channels)  # 1200 900 3
    """

    data: np.ndarray = Field(..., description="Image data as numpy array")

    model_config = {"arbitrary_types_allowed": True}

    @field_validator("data")
    @classmethod
    def _validate_image(cls, v: np.ndarray) -> np.ndarray:
        """
        Validate that the numpy array is a valid 8-bit raster.

        Raises:
            ValueError: If array is not a valid image format.
        """
        if not isinstance(v, np.ndarray):
            raise ValueError(f"Expected numpy.ndarray, got {type(v)}")

        if v.size == 0:
            raise ValueError("Image array is empty")

        if len(v.shape) not in (2, 3):
            raise ValueError(
                f"Expected 2D (grayscale) or 3D (color) image, got shape {v.shape}"
            )

        if len(v.shape) == 3 and v.shape[2] not in (1, 3, 4):
            raise ValueError(
                f"Expected 1, 3, or 4 channels for color image, got {v.shape[2]}"
            )

        if v.dtype != np.uint8:
            raise ValueError(
                f"Expected uint8 dtype for image, got {v.dtype}. "
                "Images should be in range [0, 255]"
            )

        return v

    @property
    def shape(self) -> Tuple[int, ...]:
        """Get image shape (H, W) or (H, W, C)."""
        return self.data.shape

    @property
    def height(self) -> int:
        """Get image height in pixels."""
        return int(self.data.shape[0])

    @property
    def width(self) -> int:
        """Get image width in pixels."""
        return int(self.data.shape[1])

    @property
    def channels(self) -> int:
        """Get number of channels (1 for grayscale, 3 for BGR, 4 for BGRA)."""
        if len(self.data.shape) == 2:
            return 1
        return int(self.data.shape[2])

    @property
    def is_grayscale(self) -> bool:
        """Check if image is grayscale (single channel)."""
        return len(self.data.shape) == 2

    def to_numpy(self) -> np.ndarray:
        """Get the underlying numpy array."""
        return self.data

    def copy(self) -> "ImageBuffer":
        """Create a deep copy of the image buffer."""
        return ImageBuffer(data=self.data.copy())

    def __repr__(self) -> str:
        return f"ImageBuffer(shape={self.shape}, dtype={self.data.dtype})"


class Point(BaseModel):
    """
    A 2D point (x, y) in source-image coordinates.

    Coordinates are floating point; corners produced by polygon
    approximation are integral but the rectifier works in float space.

    Example:
        >>> point = Point(x=100, y=200.5)
        >>> arr = point.to_numpy()  # array([100. , 200.5], dtype=float32)
        >>> point2 = Point.from_numpy(np.array([150, 250]))
    """

    x: float = Field(..., description="X-coordinate (horizontal)")
    y: float = Field(..., description="Y-coordinate (vertical)")

    @field_validator("x", "y", mode="before")
    @classmethod
    def _convert_to_float(cls, v: Union[int, float, np.number]) -> float:
        if isinstance(v, (int, float, np.number)) and not isinstance(v, bool):
            return float(v)
        raise ValueError(f"Coordinate must be numeric, got {type(v)}")

    @classmethod
    def from_numpy(cls, arr: np.ndarray) -> "Point":
        """
        Create Point from numpy array of shape (2,).

        Raises:
            ValueError: If array shape is not (2,).
        """
        arr = np.asarray(arr).reshape(-1)
        if arr.shape != (2,):
            raise ValueError(f"Expected array of shape (2,), got {arr.shape}")
        return cls(x=float(arr[0]), y=float(arr[1]))

    def to_numpy(self, dtype: type = np.float32) -> np.ndarray:
        """Convert Point to numpy array of shape (2,)."""
        return np.array([self.x, self.y], dtype=dtype)

    def to_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def __repr__(self) -> str:
        return f"Point(x={self.x}, y={self.y})"
