"""
Unit tests for ambiquad.cv.frame_buffer.
"""

import threading
import unittest

import numpy as np

from ambiquad.cv import FrameBuffer


def _frame(width=8, height=6, value=0):
    return np.full((height, width, 4), value, dtype=np.uint8)


class TestFrameBuffer(unittest.TestCase):

    def setUp(self):
        self.buffer = FrameBuffer()

    def test_empty(self):
        self.assertFalse(self.buffer.has_frame())
        self.assertIsNone(self.buffer.get_latest())

    def test_update_and_get(self):
        frame = _frame(value=7)
        metadata = self.buffer.update(frame, timestamp=12.5)

        self.assertEqual((metadata.width, metadata.height), (8, 6))
        self.assertEqual(metadata.timestamp, 12.5)
        self.assertEqual(metadata.index, 1)

        stored, stored_meta = self.buffer.get_latest()
        self.assertIs(stored, frame)
        self.assertEqual(stored_meta, metadata)

    def test_index_increments(self):
        self.buffer.update(_frame())
        self.assertEqual(self.buffer.update(_frame()).index, 2)

    def test_rejects_non_rgba(self):
        with self.assertRaises(ValueError):
            self.buffer.update(np.zeros((6, 8, 3), dtype=np.uint8))
        with self.assertRaises(ValueError):
            self.buffer.update(np.zeros((6, 8), dtype=np.uint8))

    def test_clear(self):
        self.buffer.update(_frame())
        self.buffer.clear()
        self.assertFalse(self.buffer.has_frame())
        self.assertIsNone(self.buffer.get_latest())

    def test_concurrent_updates(self):
        def writer():
            for _ in range(50):
                self.buffer.update(_frame())

        threads = [threading.Thread(target=writer) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        _, metadata = self.buffer.get_latest()
        self.assertEqual(metadata.index, 200)


if __name__ == '__main__':
    unittest.main(verbosity=2)
