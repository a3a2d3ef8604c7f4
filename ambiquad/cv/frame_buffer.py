"""
Latest-frame handoff between the capture thread and the sampling tick.
"""

import threading
import time
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np


@dataclass
class FrameMetadata:
    """Capture time, size and sequence number of a stored frame."""
    timestamp: float
    width: int
    height: int
    index: int


class FrameBuffer:
    """
    Thread-safe in-memory storage for the latest captured RGBA frame.

    The capture thread publishes a new array for every frame and never writes
    into an array after handing it over, so readers get the stored array
    itself rather than a copy.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._frame: Optional[np.ndarray] = None
        self._metadata: Optional[FrameMetadata] = None
        self._count = 0

    def update(self, frame: np.ndarray, timestamp: Optional[float] = None) -> FrameMetadata:
        """
        Replace the stored frame.

        Args:
            frame: RGBA frame, shape (height, width, 4), dtype uint8
            timestamp: Optional precomputed capture timestamp

        Returns:
            Metadata recorded for the frame
        """
        if frame.ndim != 3 or frame.shape[2] != 4:
            raise ValueError(f"Expected an RGBA frame, got shape {frame.shape}")

        height, width = frame.shape[:2]
        with self._lock:
            self._count += 1
            metadata = FrameMetadata(
                timestamp=timestamp if timestamp is not None else time.time(),
                width=width,
                height=height,
                index=self._count,
            )
            self._frame = frame
            self._metadata = metadata
        return metadata

    def get_latest(self) -> Optional[Tuple[np.ndarray, FrameMetadata]]:
        """
        Most recent frame together with its metadata.

        Returns:
            Tuple of (frame, metadata) or None if no frame available
        """
        with self._lock:
            if self._frame is None or self._metadata is None:
                return None
            return (self._frame, self._metadata)

    def clear(self) -> None:
        """Drop the stored frame."""
        with self._lock:
            self._frame = None
            self._metadata = None

    def has_frame(self) -> bool:
        with self._lock:
            return self._frame is not None
