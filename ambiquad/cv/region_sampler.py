"""
Average color of a region described by covered rows.

Pixel buffers are RGBA8, row-major, with a caller-supplied row stride in
bytes. Region coordinates are canvas coordinates, identical to the buffer's;
no scaling is applied.
"""

import math
from typing import Dict, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from ..geometry.scanline import CoveredRow

_RGB = np.arange(3)


class Color(NamedTuple):
    """Mean RGB color, channels in 0-255 (floats)."""
    r: float
    g: float
    b: float

    def to_dict(self) -> Dict[str, float]:
        return self._asdict()


def color_to_dict(color: Optional[Color]) -> Optional[Dict[str, float]]:
    """JSON form of a sample; None stays None ("no sample")."""
    return color.to_dict() if color is not None else None


def as_flat_buffer(pixels) -> np.ndarray:
    """View ``pixels`` (array, bytes, bytearray or memoryview) as a flat array."""
    if isinstance(pixels, (bytes, bytearray, memoryview)):
        return np.frombuffer(pixels, dtype=np.uint8)
    return np.asarray(pixels).reshape(-1)


class RegionSampler:
    """
    Averages pixel color over a fixed set of covered rows.

    For each row every integer x from ``floor(min)`` to ``ceil(max)`` is
    sampled. Columns are clipped to the buffer width and rows past the end of
    the buffer are skipped. The gather offsets are computed once per buffer
    geometry and reused for every frame.
    """

    def __init__(self, rows: Sequence[CoveredRow]):
        self.rows: Tuple[CoveredRow, ...] = tuple(rows)
        self._offsets_cache: Optional[Tuple[Tuple[int, int], np.ndarray]] = None

    def __len__(self) -> int:
        return len(self.rows)

    def _offsets(self, row_stride: int, buffer_len: int) -> np.ndarray:
        key = (row_stride, buffer_len)
        cached = self._offsets_cache
        if cached is not None and cached[0] == key:
            return cached[1]

        width = row_stride // 4
        row_count = buffer_len // row_stride if row_stride > 0 else 0
        chunks = []
        for row in self.rows:
            if row.y < 0 or row.y >= row_count:
                continue
            x0 = max(math.floor(row.min), 0)
            x1 = min(math.ceil(row.max), width - 1)
            if x0 > x1:
                continue
            chunks.append(row_stride * row.y + 4 * np.arange(x0, x1 + 1, dtype=np.int64))

        offsets = np.concatenate(chunks) if chunks else np.empty(0, dtype=np.int64)
        self._offsets_cache = (key, offsets)
        return offsets

    def pixel_count(self, row_stride: int, buffer_len: int) -> int:
        """Number of pixels this sampler reads from a buffer of the given shape."""
        return int(self._offsets(row_stride, buffer_len).size)

    def process(self, pixels, row_stride: int) -> Optional[Color]:
        """
        Mean color of the region in ``pixels``.

        Args:
            pixels: Flat RGBA8 buffer (numpy array, bytes or bytearray); an
                    (H, W, 4) array is flattened
            row_stride: Bytes per row (``width * 4``)

        Returns:
            Color, or None when the region covers no pixel
        """
        buf = as_flat_buffer(pixels)
        offsets = self._offsets(row_stride, buf.size)
        if offsets.size == 0:
            return None
        rgb = buf[offsets[:, None] + _RGB]
        sums = rgb.sum(axis=0, dtype=np.int64)
        count = offsets.size
        return Color(int(sums[0]) / count, int(sums[1]) / count, int(sums[2]) / count)
