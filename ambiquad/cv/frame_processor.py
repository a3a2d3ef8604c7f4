"""
Per-frame processing: preview masking and band color sampling.

Geometry edits (a few per second while the user drags a handle) and frame
reads (tens per second) meet here. Each edit rebuilds the grid and every
band sampler, then publishes them as one immutable snapshot; frame reads
grab the snapshot reference once and do no geometry work.
"""

import logging
import threading
from typing import Dict, List, NamedTuple, Optional, Tuple

import numpy as np

from ..geometry import BAND_NAMES, Corners, Grid, Point
from ..geometry.scanline import BoundaryTable
from .region_sampler import Color, RegionSampler, as_flat_buffer

logger = logging.getLogger(__name__)

BandColors = Dict[str, List[Optional[Color]]]


class _Snapshot(NamedTuple):
    corners: Corners
    table: BoundaryTable
    samplers: Dict[str, Tuple[RegionSampler, ...]]
    band_corners: Dict[str, Tuple[Corners, ...]]


class FrameProcessor:
    """
    Owns the region grid for a canvas of fixed size.

    Args:
        width: Canvas (frame) width in pixels
        height: Canvas (frame) height in pixels
        row_bands: Sub-regions in the left and right bands
        column_bands: Sub-regions in the top and bottom bands
        dim_alpha: Alpha written to pixels outside the region in previews
    """

    def __init__(
        self,
        width: int,
        height: int,
        row_bands: int = 1,
        column_bands: int = 0,
        dim_alpha: int = 50,
    ):
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid canvas size: {width}x{height}")
        if not 0 <= dim_alpha <= 255:
            raise ValueError(f"dim_alpha must be within 0-255, got {dim_alpha}")

        self.width = width
        self.height = height
        self.dim_alpha = dim_alpha
        self.grid = Grid(row_bands, column_bands, height)
        self._edit_lock = threading.Lock()
        self._snapshot = self._build_snapshot()

    @property
    def row_stride(self) -> int:
        return self.width * 4

    def set_corners(
        self,
        top_left: Point,
        top_right: Point,
        bottom_right: Point,
        bottom_left: Point,
    ) -> None:
        """Move the region and rebuild the grid and every sampler."""
        with self._edit_lock:
            self.grid.set_corners(top_left, top_right, bottom_right, bottom_left)
            self._snapshot = self._build_snapshot()
        logger.debug(f"Region set to {self._snapshot.corners}")

    def coordinates(self) -> Corners:
        return self._snapshot.corners

    def contains_point(self, point: Point) -> bool:
        return self._snapshot.table.contains(point.x, point.y)

    def band_corners(self) -> Dict[str, Tuple[Corners, ...]]:
        """Corners of every sub-region, keyed by band."""
        return self._snapshot.band_corners

    def region_mask(self) -> np.ndarray:
        """Boolean (height, width) mask of the main region."""
        return self._snapshot.table.mask(self.width)

    def mask_frame(self, frame) -> np.ndarray:
        """
        Preview copy of ``frame`` with pixels outside the region dimmed.

        Args:
            frame: RGBA8 pixels of the canvas, either an (height, width, 4)
                   array or a flat row-major buffer with stride ``width * 4``

        Returns:
            New array shaped like an array input ((height, width, 4) for
            bytes-like input); alpha is set to ``dim_alpha`` outside the region
        """
        pixels = self._frame_pixels(frame)
        mask = self._snapshot.table.mask(self.width)
        preview = pixels.reshape(self.height, self.width, 4).copy()
        preview[..., 3][~mask] = self.dim_alpha
        if isinstance(frame, np.ndarray):
            return preview.reshape(frame.shape)
        return preview

    def sample_bands(self, frame) -> BandColors:
        """
        Mean color of every sub-region in ``frame``.

        Args:
            frame: RGBA8 pixels of the canvas, as accepted by ``mask_frame``

        Returns:
            ``{"top": [...], "bottom": [...], "left": [...], "right": [...]}``;
            an entry is None when its sub-region covers no pixel
        """
        pixels = self._frame_pixels(frame)
        samplers = self._snapshot.samplers
        return {
            name: [sampler.process(pixels, self.row_stride) for sampler in samplers[name]]
            for name in BAND_NAMES
        }

    def _frame_pixels(self, frame) -> np.ndarray:
        """Flat uint8 view of ``frame``, checked against the canvas size."""
        if isinstance(frame, np.ndarray) and frame.ndim != 1:
            if frame.shape != (self.height, self.width, 4):
                raise ValueError(
                    f"Frame shape {frame.shape} does not match canvas "
                    f"{self.width}x{self.height} RGBA"
                )
        pixels = as_flat_buffer(frame)
        expected = self.row_stride * self.height
        if pixels.dtype != np.uint8 or pixels.size != expected:
            raise ValueError(
                f"Frame of {pixels.size} {pixels.dtype} values does not match canvas "
                f"{self.width}x{self.height} RGBA8 ({expected} bytes)"
            )
        return pixels

    def _build_snapshot(self) -> _Snapshot:
        main, bands = self.grid.layout
        samplers = {
            name: tuple(RegionSampler(quad.covered_rows()) for quad in getattr(bands, name))
            for name in BAND_NAMES
        }
        band_corners = {
            name: tuple(quad.corners for quad in getattr(bands, name)) for name in BAND_NAMES
        }
        return _Snapshot(main.corners, main.table, samplers, band_corners)
