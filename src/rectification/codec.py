"""
Image I/O helpers.

Decoding failures surface as DecodeError, the only hard failure of the
rectification core.
"""

import logging
from pathlib import Path
from typing import Union

import cv2
import numpy as np

from src.rectification.errors import DecodeError

logger = logging.getLogger(__name__)


def decode_image(data: bytes) -> np.ndarray:
    """
    Decode an encoded image (PNG, JPEG, ...) into a uint8 array.

    Alpha channels are preserved.

    Raises:
        DecodeError: If the bytes are empty, cannot be decoded, or hold samples
            other than 8 or 16 bit unsigned integers.
    """
    if not data:
        raise DecodeError("Cannot decode empty image data")

    buffer = np.frombuffer(data, dtype=np.uint8)
    image = cv2.imdecode(buffer, cv2.IMREAD_UNCHANGED)
    if image is None or image.size == 0:
        raise DecodeError("Image data could not be decoded")

    if image.dtype == np.uint16:
        # 16-bit PNG/TIFF: scale down to 8 bits per channel
        image = (image / 257).astype(np.uint8)
    elif image.dtype != np.uint8:
        raise DecodeError(f"Unsupported sample type {image.dtype}")

    return image


def load_image(path: Union[str, Path]) -> np.ndarray:
    """
    Read and decode an image file.

    Raises:
        DecodeError: If the file is missing or unreadable.
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise DecodeError(f"Cannot read image file {path}: {e}") from e

    image = decode_image(data)
    logger.debug(f"Loaded {path.name}: shape={image.shape}")
    return image


def encode_image(image: np.ndarray, ext: str = ".png") -> bytes:
    """
    Encode an image into the format selected by ``ext``.

    Raises:
        ValueError: If the image is empty or encoding fails.
    """
    if image is None or image.size == 0:
        raise ValueError("Cannot encode an empty image")

    ok, encoded = cv2.imencode(ext, image)
    if not ok:
        raise ValueError(f"Failed to encode image as {ext}")
    return encoded.tobytes()


def save_image(image: np.ndarray, path: Union[str, Path]) -> Path:
    """Encode ``image`` according to the file suffix and write it to ``path``."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(encode_image(image, path.suffix or ".png"))
    logger.debug(f"Saved image to {path}")
    return path
