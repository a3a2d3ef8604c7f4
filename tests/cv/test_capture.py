"""
Unit tests for ambiquad.cv.capture with a mocked OpenCV device.
"""

import time
import unittest
from unittest import mock

import numpy as np

from ambiquad.cv import CameraCapture, CaptureError, FrameBuffer


def _bgr_frame(width=32, height=24):
    frame = np.zeros((height, width, 3), dtype=np.uint8)
    frame[..., 0] = 200  # blue
    frame[..., 2] = 10   # red
    return frame


def _fake_device(opened=True, frame=None):
    device = mock.MagicMock()
    device.isOpened.return_value = opened
    device.read.return_value = (frame is not None, frame)
    return device


class TestOpen(unittest.TestCase):

    def test_open_publishes_rgba(self):
        device = _fake_device(frame=_bgr_frame())
        buffer = FrameBuffer()
        with mock.patch("ambiquad.cv.capture.cv2.VideoCapture", return_value=device):
            capture = CameraCapture(device=1, width=32, height=24, frame_buffer=buffer)
            size = capture.open()

        self.assertEqual(size, (32, 24))
        self.assertEqual(capture.frame_size, (32, 24))
        frame, metadata = buffer.get_latest()
        self.assertEqual(frame.shape, (24, 32, 4))
        self.assertEqual(tuple(frame[0, 0]), (10, 0, 200, 255))
        self.assertEqual(metadata.width, 32)

    def test_open_failure(self):
        device = _fake_device(opened=False)
        with mock.patch("ambiquad.cv.capture.cv2.VideoCapture", return_value=device):
            with self.assertRaises(CaptureError):
                CameraCapture().open()

    def test_unreadable_device_is_released(self):
        device = _fake_device(frame=None)
        with mock.patch("ambiquad.cv.capture.cv2.VideoCapture", return_value=device):
            with self.assertRaises(CaptureError):
                CameraCapture().open()
        device.release.assert_called_once()


class TestCaptureLoop(unittest.TestCase):

    def test_start_and_stop(self):
        device = _fake_device(frame=_bgr_frame())
        with mock.patch("ambiquad.cv.capture.cv2.VideoCapture", return_value=device):
            capture = CameraCapture()
            capture.start()
            try:
                deadline = time.time() + 2.0
                while capture.get_status()["frames_captured"] < 3 and time.time() < deadline:
                    time.sleep(0.01)
                self.assertTrue(capture.running)
                self.assertGreaterEqual(capture.get_status()["frames_captured"], 3)
            finally:
                capture.stop()

        self.assertFalse(capture.running)
        device.release.assert_called_once()
        status = capture.get_status()
        self.assertFalse(status["capturing"])
        self.assertTrue(status["has_frame"])


if __name__ == '__main__':
    unittest.main(verbosity=2)
