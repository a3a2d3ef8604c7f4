"""
Unit tests for ambiquad.cv.region_sampler.

Tests cover:
- Mean color of uniform and graded regions
- Inclusive floor/ceil column range per row
- Clipping to the buffer and empty regions
- Accepted buffer types
"""

import unittest

import numpy as np

from ambiquad.cv.region_sampler import Color, RegionSampler, color_to_dict
from ambiquad.geometry import CoveredRow


def _uniform_frame(width, height, rgb):
    frame = np.zeros((height, width, 4), dtype=np.uint8)
    frame[..., :3] = rgb
    frame[..., 3] = 255
    return frame


def _graded_frame(width, height):
    """Red channel is 10 * x, green is 10 * y."""
    frame = np.zeros((height, width, 4), dtype=np.uint8)
    frame[..., 0] = (np.arange(width) * 10)[None, :]
    frame[..., 1] = (np.arange(height) * 10)[:, None]
    frame[..., 3] = 255
    return frame


class TestMeanColor(unittest.TestCase):

    def test_uniform_region_is_exact(self):
        frame = _uniform_frame(20, 10, (30, 60, 90))
        sampler = RegionSampler([CoveredRow(y, 2.0, 15.0) for y in range(1, 9)])

        self.assertEqual(sampler.process(frame, 20 * 4), Color(30.0, 60.0, 90.0))

    def test_mean_over_rows(self):
        frame = _graded_frame(20, 10)
        sampler = RegionSampler([CoveredRow(2, 0, 3), CoveredRow(4, 0, 3)])
        color = sampler.process(frame, 20 * 4)

        self.assertAlmostEqual(color.r, 15.0)
        self.assertAlmostEqual(color.g, 30.0)
        self.assertEqual(color.b, 0.0)

    def test_alpha_is_ignored(self):
        frame = _uniform_frame(8, 8, (10, 20, 30))
        frame[..., 3] = 7
        sampler = RegionSampler([CoveredRow(3, 1, 6)])
        self.assertEqual(sampler.process(frame, 8 * 4), Color(10.0, 20.0, 30.0))


class TestColumnRange(unittest.TestCase):

    def test_fractional_bounds_are_widened(self):
        frame = _graded_frame(20, 10)
        sampler = RegionSampler([CoveredRow(2, 2.5, 4.2)])

        # x = 2, 3, 4, 5
        self.assertEqual(sampler.pixel_count(20 * 4, frame.size), 4)
        self.assertAlmostEqual(sampler.process(frame, 20 * 4).r, 35.0)

    def test_single_pixel_row(self):
        frame = _graded_frame(20, 10)
        sampler = RegionSampler([CoveredRow(5, 7, 7)])
        self.assertEqual(sampler.process(frame, 20 * 4), Color(70.0, 50.0, 0.0))

    def test_columns_clipped_to_width(self):
        frame = _graded_frame(10, 10)
        sampler = RegionSampler([CoveredRow(0, -3.5, 100)])
        self.assertEqual(sampler.pixel_count(10 * 4, frame.size), 10)
        self.assertAlmostEqual(sampler.process(frame, 10 * 4).r, 45.0)

    def test_rows_past_buffer_skipped(self):
        frame = _graded_frame(10, 10)
        sampler = RegionSampler([CoveredRow(9, 0, 0), CoveredRow(10, 0, 9), CoveredRow(50, 0, 9)])
        self.assertEqual(sampler.pixel_count(10 * 4, frame.size), 1)
        self.assertEqual(sampler.process(frame, 10 * 4), Color(0.0, 90.0, 0.0))


class TestNoSample(unittest.TestCase):

    def test_empty_rows_return_none(self):
        frame = _uniform_frame(10, 10, (1, 2, 3))
        self.assertIsNone(RegionSampler([]).process(frame, 10 * 4))

    def test_region_outside_buffer_returns_none(self):
        frame = _uniform_frame(10, 10, (1, 2, 3))
        sampler = RegionSampler([CoveredRow(3, 20, 30)])
        self.assertIsNone(sampler.process(frame, 10 * 4))

    def test_color_to_dict(self):
        self.assertIsNone(color_to_dict(None))
        self.assertEqual(color_to_dict(Color(1.0, 2.0, 3.0)), {"r": 1.0, "g": 2.0, "b": 3.0})


class TestBuffers(unittest.TestCase):

    def setUp(self):
        self.frame = _uniform_frame(6, 4, (200, 100, 50))
        self.sampler = RegionSampler([CoveredRow(1, 1, 4), CoveredRow(2, 1, 4)])

    def test_bytes(self):
        self.assertEqual(self.sampler.process(self.frame.tobytes(), 6 * 4), Color(200.0, 100.0, 50.0))

    def test_bytearray(self):
        buf = bytearray(self.frame.tobytes())
        self.assertEqual(self.sampler.process(buf, 6 * 4), Color(200.0, 100.0, 50.0))

    def test_flat_array(self):
        self.assertEqual(self.sampler.process(self.frame.reshape(-1), 6 * 4), Color(200.0, 100.0, 50.0))

    def test_offsets_reused_for_same_geometry(self):
        first = self.sampler._offsets(6 * 4, self.frame.size)
        second = self.sampler._offsets(6 * 4, self.frame.size)
        self.assertIs(first, second)


if __name__ == '__main__':
    unittest.main(verbosity=2)
