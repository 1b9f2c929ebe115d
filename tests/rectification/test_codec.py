"""
Unit tests for codec module.
"""

import cv2
import numpy as np
import pytest

from src.rectification.codec import decode_image, encode_image, load_image, save_image
from src.rectification.errors import DecodeError


class TestDecode:
    """Tests for decode_image and load_image."""

    def test_png_preserves_pixels(self, sample_document_image):
        image, _ = sample_document_image
        decoded = decode_image(encode_image(image, ".png"))

        np.testing.assert_array_equal(decoded, image)

    def test_alpha_channel_preserved(self):
        image = np.zeros((20, 30, 4), dtype=np.uint8)
        image[:, :, 3] = 128

        decoded = decode_image(encode_image(image, ".png"))
        assert decoded.shape == (20, 30, 4)

    def test_sixteen_bit_scaled_to_eight(self):
        image16 = np.full((10, 10), 65535, dtype=np.uint16)
        ok, data = cv2.imencode(".png", image16)
        assert ok

        decoded = decode_image(data.tobytes())
        assert decoded.dtype == np.uint8
        assert decoded.max() == 255

    def test_floating_point_samples_rejected(self):
        image32 = np.full((10, 10), 0.5, dtype=np.float32)
        ok, data = cv2.imencode(".tiff", image32)
        assert ok

        with pytest.raises(DecodeError, match="Unsupported sample type"):
            decode_image(data.tobytes())

    @pytest.mark.parametrize("data", [b"", b"definitely not an image"])
    def test_garbage_raises_decode_error(self, data):
        with pytest.raises(DecodeError):
            decode_image(data)

    def test_missing_file_raises_decode_error(self, tmp_path):
        with pytest.raises(DecodeError, match="Cannot read"):
            load_image(tmp_path / "missing.jpg")


class TestEncode:
    """Tests for encode_image and save_image."""

    def test_save_and_load(self, tmp_path, gradient_image):
        path = save_image(gradient_image, tmp_path / "nested" / "out.png")

        assert path.exists()
        np.testing.assert_array_equal(load_image(path), gradient_image)

    def test_empty_image_rejected(self):
        with pytest.raises(ValueError, match="empty"):
            encode_image(np.array([], dtype=np.uint8))
