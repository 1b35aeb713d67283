"""
Unit tests for pixel sampling from decoded buffers.
"""

import numpy as np
import pytest

from app.services.colors.clustering import InvalidInputError
from app.services.colors.sampling import sample_pixels
from app.services.observability import get_metrics_collector


class TestSamplePixels:
    """Test stride sampling and alpha dropping"""

    @pytest.fixture
    def rgba_image(self):
        """4x4 RGBA image where R encodes the pixel index"""
        img = np.zeros((4, 4, 4), dtype=np.uint8)
        img[..., 0] = np.arange(16).reshape(4, 4)
        img[..., 3] = 255
        return img

    def test_every_fourth_pixel_by_default(self, rgba_image):
        points = sample_pixels(rgba_image)

        assert points.shape == (4, 3)
        assert points.dtype == np.uint8
        assert points[:, 0].tolist() == [0, 4, 8, 12]

    def test_flat_rgba_buffer(self, rgba_image):
        """A flat RGBA byte buffer samples like a 16-byte stride"""
        flat = rgba_image.reshape(-1)
        points = sample_pixels(flat, step=4)
        np.testing.assert_array_equal(points, sample_pixels(rgba_image, step=4))

    def test_rgb_image_step_one(self):
        img = np.full((2, 3, 3), 9, dtype=np.uint8)
        points = sample_pixels(img, step=1)
        assert points.shape == (6, 3)
        assert np.all(points == 9)

    def test_pixel_list(self):
        pixels = np.array([[1, 2, 3], [4, 5, 6], [7, 8, 9]], dtype=np.uint8)
        assert sample_pixels(pixels, step=2).tolist() == [[1, 2, 3], [7, 8, 9]]

    def test_invalid_step(self, rgba_image):
        with pytest.raises(InvalidInputError):
            sample_pixels(rgba_image, step=0)

    def test_flat_buffer_not_rgba(self):
        with pytest.raises(InvalidInputError):
            sample_pixels(np.zeros(6, dtype=np.uint8))

    def test_unsupported_channels(self):
        with pytest.raises(InvalidInputError):
            sample_pixels(np.zeros((2, 2, 2), dtype=np.uint8))

    def test_out_of_range_channel(self):
        """Values above 255 are rejected instead of wrapping"""
        with pytest.raises(InvalidInputError):
            sample_pixels(np.array([[300, 0, 0], [1, 2, 3]]), step=1)

    def test_negative_channel(self):
        with pytest.raises(InvalidInputError):
            sample_pixels(np.array([[-1, 0, 0]]), step=1)

    def test_fractional_channel(self):
        """Fractional floats are rejected instead of truncated"""
        with pytest.raises(InvalidInputError):
            sample_pixels(np.array([[1.0, 0.5, 0.2]]), step=1)

    def test_whole_float_channels(self):
        points = sample_pixels(np.array([[1.0, 2.0, 255.0]]), step=1)
        assert points.tolist() == [[1, 2, 255]]
        assert points.dtype == np.uint8

    def test_skipped_pixels_are_not_checked(self):
        """Only sampled pixels are validated"""
        pixels = np.array([[1, 2, 3], [999, 0, 0]])
        assert sample_pixels(pixels, step=2).tolist() == [[1, 2, 3]]

    def test_records_sampling_metrics(self, rgba_image):
        sample_pixels(rgba_image)

        recent = get_metrics_collector().get_recent_metrics(limit=1)[0]
        assert recent["operation_name"] == "pixel_sampling"
        assert recent["point_count"] == 16
