"""
Webcam capture using OpenCV.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Optional, Tuple

import cv2
import numpy as np

from .frame_buffer import FrameBuffer

logger = logging.getLogger(__name__)


class CaptureError(Exception):
    """Camera could not be opened or read."""
    pass


class CameraCapture:
    """
    Continuous webcam capture in a background thread.

    Every frame is converted from OpenCV's BGR to RGBA and published into the
    frame buffer. The actual frame size is known once ``open()`` has read a
    test frame; the requested size is only a hint to the driver.
    """

    def __init__(
        self,
        device: int = 0,
        width: int = 640,
        height: int = 480,
        frame_buffer: Optional[FrameBuffer] = None,
    ):
        self.device = device
        self.requested_size = (width, height)
        self.frame_buffer = frame_buffer or FrameBuffer()
        self.frame_size: Optional[Tuple[int, int]] = None

        self._capture: Optional[cv2.VideoCapture] = None
        self._capture_thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._running = False

        # Statistics
        self._frames_captured = 0
        self._frames_failed = 0

    @property
    def running(self) -> bool:
        return self._running

    def open(self) -> Tuple[int, int]:
        """
        Open the device and read a test frame.

        Returns:
            Actual (width, height) of captured frames

        Raises:
            CaptureError: If the device cannot be opened or read
        """
        logger.info(f"Opening camera {self.device}")
        cap = cv2.VideoCapture(self.device)
        if cap is None or not cap.isOpened():
            raise CaptureError(f"Failed to open camera {self.device}")

        width, height = self.requested_size
        cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)

        ret, test_frame = cap.read()
        if not ret or test_frame is None:
            cap.release()
            raise CaptureError(f"Opened camera {self.device} but could not read frames")

        self._capture = cap
        frame_height, frame_width = test_frame.shape[:2]
        self.frame_size = (frame_width, frame_height)
        self._publish(test_frame)
        logger.info(f"Capture initialized: {frame_width}x{frame_height}")
        return self.frame_size

    def start(self) -> None:
        """Start the capture thread (opens the device first if needed)."""
        if self._running:
            logger.warning(f"Camera {self.device} is already capturing")
            return
        if self._capture is None:
            self.open()

        self._stop_event.clear()
        self._running = True
        self._capture_thread = threading.Thread(target=self._capture_loop, daemon=True, name="Camera-Capture")
        self._capture_thread.start()
        logger.debug(f"Capture thread for camera {self.device} running")

    def stop(self) -> None:
        """Stop the capture thread and release the device."""
        self._stop_event.set()
        if self._capture_thread:
            self._capture_thread.join(timeout=5.0)
            self._capture_thread = None
        if self._capture:
            self._capture.release()
            self._capture = None
        if self._running:
            logger.info(
                f"Capture stopped (captured={self._frames_captured}, failed={self._frames_failed})"
            )
        self._running = False

    def get_status(self) -> dict:
        return {
            "capturing": self._running,
            "device": self.device,
            "frame_size": self.frame_size,
            "frames_captured": self._frames_captured,
            "frames_failed": self._frames_failed,
            "has_frame": self.frame_buffer.has_frame(),
        }

    def _publish(self, frame: np.ndarray) -> None:
        rgba = cv2.cvtColor(frame, cv2.COLOR_BGR2RGBA)
        self.frame_buffer.update(rgba)
        self._frames_captured += 1

    def _capture_loop(self) -> None:
        """Read frames until stopped; a failed read backs off briefly."""
        logger.info(f"Streaming camera {self.device}")
        while not self._stop_event.is_set():
            ret, frame = self._capture.read()
            if not ret or frame is None:
                self._frames_failed += 1
                logger.warning(f"Camera {self.device}: frame read failed")
                time.sleep(0.5)
                continue
            self._publish(frame)
        logger.info(f"Camera {self.device} streaming ended")
