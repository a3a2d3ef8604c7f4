"""
Unit tests for ambiquad.cv.frame_processor.

Tests cover:
- Band sampling on a split-colored frame
- Preview masking
- Frame shape validation
- Behaviour before a region is configured
"""

import unittest

import numpy as np

from ambiquad.cv import Color, FrameProcessor
from ambiquad.geometry import Corners, Point

WIDTH, HEIGHT = 640, 480
RECTANGLE = Corners(Point(50, 50), Point(300, 50), Point(300, 300), Point(50, 300))


def _split_frame():
    """Red for x <= 175, blue elsewhere."""
    frame = np.zeros((HEIGHT, WIDTH, 4), dtype=np.uint8)
    frame[:, :176, 0] = 255
    frame[:, 176:, 2] = 255
    frame[..., 3] = 255
    return frame


class TestSampleBands(unittest.TestCase):

    def setUp(self):
        self.processor = FrameProcessor(WIDTH, HEIGHT, row_bands=1, column_bands=0)
        self.processor.set_corners(*RECTANGLE)

    def test_left_band_is_red(self):
        colors = self.processor.sample_bands(_split_frame())
        self.assertEqual(colors["left"], [Color(255.0, 0.0, 0.0)])

    def test_right_band_is_blue(self):
        colors = self.processor.sample_bands(_split_frame())
        (right,) = colors["right"]
        # The shared center column x = 175 is sampled by both bands
        self.assertGreater(right.b, 250)
        self.assertLess(right.r, 5)
        self.assertEqual(right.g, 0.0)

    def test_flat_buffers(self):
        frame = _split_frame()
        expected = self.processor.sample_bands(frame)

        self.assertEqual(self.processor.sample_bands(frame.reshape(-1)), expected)
        self.assertEqual(self.processor.sample_bands(frame.tobytes()), expected)
        self.assertEqual(self.processor.sample_bands(bytearray(frame.tobytes())), expected)
        self.assertEqual(expected["left"], [Color(255.0, 0.0, 0.0)])

    def test_column_bands_empty(self):
        colors = self.processor.sample_bands(_split_frame())
        self.assertEqual(colors["top"], [])
        self.assertEqual(colors["bottom"], [])

    def test_more_bands(self):
        processor = FrameProcessor(WIDTH, HEIGHT, row_bands=3, column_bands=2)
        processor.set_corners(*RECTANGLE)
        colors = processor.sample_bands(_split_frame())

        self.assertEqual(len(colors["left"]), 3)
        self.assertEqual(len(colors["top"]), 2)
        self.assertTrue(all(c is not None for band in colors.values() for c in band))

    def test_band_corners(self):
        corners = self.processor.band_corners()
        self.assertEqual(corners["left"][0].top_right, Point(175, 50))
        self.assertEqual(corners["right"][0].bottom_left, Point(175, 300))
        self.assertEqual(corners["top"], ())


class TestRegion(unittest.TestCase):

    def setUp(self):
        self.processor = FrameProcessor(WIDTH, HEIGHT)
        self.processor.set_corners(*RECTANGLE)

    def test_coordinates(self):
        self.assertEqual(self.processor.coordinates(), RECTANGLE)

    def test_contains_point(self):
        self.assertTrue(self.processor.contains_point(Point(100, 100)))
        self.assertFalse(self.processor.contains_point(Point(400, 100)))

    def test_region_mask(self):
        mask = self.processor.region_mask()
        self.assertEqual(mask.shape, (HEIGHT, WIDTH))
        self.assertEqual(int(mask.sum()), 251 * 251)

    def test_mask_frame(self):
        frame = _split_frame()
        preview = self.processor.mask_frame(frame)

        self.assertEqual(preview[100, 100, 3], 255)
        self.assertEqual(preview[10, 10, 3], 50)
        self.assertEqual(preview[100, 400, 3], 50)
        # Colors and the input frame are untouched
        np.testing.assert_array_equal(preview[..., :3], frame[..., :3])
        self.assertTrue((frame[..., 3] == 255).all())

    def test_mask_flat_frame(self):
        frame = _split_frame()
        expected = self.processor.mask_frame(frame)

        flat = self.processor.mask_frame(frame.reshape(-1))
        self.assertEqual(flat.shape, (HEIGHT * WIDTH * 4,))
        np.testing.assert_array_equal(flat, expected.reshape(-1))

        from_bytes = self.processor.mask_frame(frame.tobytes())
        self.assertEqual(from_bytes.shape, (HEIGHT, WIDTH, 4))
        np.testing.assert_array_equal(from_bytes, expected)

    def test_custom_dim_alpha(self):
        processor = FrameProcessor(WIDTH, HEIGHT, dim_alpha=0)
        processor.set_corners(*RECTANGLE)
        self.assertEqual(processor.mask_frame(_split_frame())[10, 10, 3], 0)

    def test_corner_edit_takes_effect(self):
        self.processor.set_corners(Point(400, 100), Point(500, 100), Point(500, 200), Point(400, 200))
        self.assertTrue(self.processor.contains_point(Point(450, 150)))
        self.assertFalse(self.processor.contains_point(Point(100, 100)))


class TestValidation(unittest.TestCase):

    def test_frame_shape_mismatch(self):
        processor = FrameProcessor(WIDTH, HEIGHT)
        with self.assertRaises(ValueError):
            processor.sample_bands(np.zeros((HEIGHT, WIDTH, 3), dtype=np.uint8))
        with self.assertRaises(ValueError):
            processor.mask_frame(np.zeros((100, 100, 4), dtype=np.uint8))
        with self.assertRaises(ValueError):
            processor.sample_bands(np.zeros(WIDTH * HEIGHT * 4 - 4, dtype=np.uint8))
        with self.assertRaises(ValueError):
            processor.sample_bands(bytes(100))
        with self.assertRaises(ValueError):
            processor.sample_bands(np.zeros((WIDTH, HEIGHT, 4), dtype=np.uint8))
        with self.assertRaises(ValueError):
            processor.sample_bands(np.zeros((HEIGHT, WIDTH, 4), dtype=np.float32))

    def test_invalid_canvas(self):
        with self.assertRaises(ValueError):
            FrameProcessor(0, HEIGHT)
        with self.assertRaises(ValueError):
            FrameProcessor(WIDTH, HEIGHT, dim_alpha=300)

    def test_negative_band_count(self):
        with self.assertRaises(ValueError):
            FrameProcessor(WIDTH, HEIGHT, row_bands=-1)

    def test_unconfigured_region_samples_nothing(self):
        processor = FrameProcessor(WIDTH, HEIGHT, row_bands=2)
        colors = processor.sample_bands(_split_frame())

        self.assertEqual(colors["left"], [None, None])
        self.assertEqual(colors["right"], [None, None])
        self.assertFalse(processor.contains_point(Point(0, 0)))
        self.assertFalse(processor.region_mask().any())


if __name__ == '__main__':
    unittest.main(verbosity=2)
