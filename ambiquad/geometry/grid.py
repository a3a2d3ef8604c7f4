"""
Subdivision of a region into directional sampling bands.

Two center lines split the main quad: the vertical center line joins the
midpoints of the left and right edges and separates the top band from the
bottom band; the horizontal center line joins the midpoints of the top and
bottom edges and separates the left band from the right band. Each band is
then cut into equal sub-quads by interpolating along its two long sides.

The bands are not a tiling of the main quad: near the center they may
overlap, and part of the center may belong to no band at all. Each band
samples the population next to its own edge, so this is fine.
"""

import logging
import threading
from typing import Dict, List, NamedTuple, Optional, Tuple

from .point import Corners, EdgeFunction, Point
from .quadrilateral import Quadrilateral
from .scanline import CoveredRow, ScanlineRegionTest

logger = logging.getLogger(__name__)

BAND_NAMES = ("top", "bottom", "left", "right")


class CenterLine(NamedTuple):
    start: Point
    end: Point


class Bands(NamedTuple):
    """Sub-quads of the four bands, each ordered along its band."""
    top: Tuple[Quadrilateral, ...] = ()
    bottom: Tuple[Quadrilateral, ...] = ()
    left: Tuple[Quadrilateral, ...] = ()
    right: Tuple[Quadrilateral, ...] = ()


class GridLayout(NamedTuple):
    """Main quad and bands published together."""
    main: Quadrilateral
    bands: Bands


def center_line(a: EdgeFunction, b: EdgeFunction) -> CenterLine:
    """Segment joining the midpoints of two opposite edges."""
    return CenterLine(a.midpoint(), b.midpoint())


def _make_quad(corners: Corners, height: int) -> Quadrilateral:
    return Quadrilateral(corners, ScanlineRegionTest(height))


def split_horizontally(
    top_left: Point,
    top_right: Point,
    bottom_right: Point,
    bottom_left: Point,
    count: int,
    height: int,
) -> Tuple[Quadrilateral, ...]:
    """Cut a quad into ``count`` sub-quads from left to right."""
    quads = []
    for i in range(count):
        corners = Corners(
            top_left.lerp(top_right, count, i),
            top_left.lerp(top_right, count, i + 1),
            bottom_left.lerp(bottom_right, count, i + 1),
            bottom_left.lerp(bottom_right, count, i),
        )
        quads.append(_make_quad(corners, height))
    return tuple(quads)


def split_vertically(
    top_left: Point,
    top_right: Point,
    bottom_right: Point,
    bottom_left: Point,
    count: int,
    height: int,
) -> Tuple[Quadrilateral, ...]:
    """Cut a quad into ``count`` sub-quads from top to bottom."""
    quads = []
    for i in range(count):
        corners = Corners(
            top_left.lerp(bottom_left, count, i),
            top_right.lerp(bottom_right, count, i),
            top_right.lerp(bottom_right, count, i + 1),
            top_left.lerp(bottom_left, count, i + 1),
        )
        quads.append(_make_quad(corners, height))
    return tuple(quads)


class Grid:
    """
    Main region plus its top, bottom, left and right bands.

    Args:
        row_bands: Number of sub-quads in the left and right bands
        column_bands: Number of sub-quads in the top and bottom bands
        height: Canvas height (rows of every boundary table)

    Each ``set_corners`` builds a new main quad and new bands, then
    publishes them together with one assignment.
    """

    def __init__(self, row_bands: int, column_bands: int, height: int):
        if row_bands < 0 or column_bands < 0:
            raise ValueError(
                f"Band counts must be >= 0 (row_bands={row_bands}, column_bands={column_bands})"
            )
        self.row_bands = row_bands
        self.column_bands = column_bands
        self.height = height
        self._edit_lock = threading.Lock()
        main = Quadrilateral(strategy=ScanlineRegionTest(height))
        self._layout = GridLayout(main, self._build_bands(main))

    @property
    def layout(self) -> GridLayout:
        return self._layout

    @property
    def main(self) -> Quadrilateral:
        return self._layout.main

    @property
    def bands(self) -> Bands:
        return self._layout.bands

    @property
    def corners(self) -> Corners:
        return self._layout.main.corners

    def set_corners(
        self,
        top_left: Point,
        top_right: Point,
        bottom_right: Point,
        bottom_left: Point,
    ) -> None:
        corners = Corners(top_left, top_right, bottom_right, bottom_left)
        with self._edit_lock:
            main = _make_quad(corners, self.height)
            self._layout = GridLayout(main, self._build_bands(main))
        logger.debug(
            "Grid rebuilt: %d covered rows, bands top=%d bottom=%d left=%d right=%d",
            len(main.covered_rows()), self.column_bands, self.column_bands,
            self.row_bands, self.row_bands,
        )

    def contains_point(self, point: Point) -> bool:
        return self._layout.main.contains_point(point)

    def center_lines(self, main: Optional[Quadrilateral] = None) -> Tuple[CenterLine, CenterLine]:
        """Return ``(vertical_center_line, horizontal_center_line)``."""
        edges = (main or self._layout.main).edges
        vertical = center_line(edges.left, edges.right)
        horizontal = center_line(edges.top, edges.bottom)
        return vertical, horizontal

    def regions(self) -> Dict[str, List]:
        """Covered rows of the main quad and of every sub-quad, per band."""
        layout = self._layout
        regions: Dict[str, List] = {"main": layout.main.covered_rows()}
        regions.update(band_rows(layout.bands))
        return regions

    def _build_bands(self, main: Quadrilateral) -> Bands:
        tl, tr, br, bl = main.corners
        vertical, horizontal = self.center_lines(main)
        return Bands(
            top=split_horizontally(
                tl, tr, vertical.end, vertical.start, self.column_bands, self.height
            ),
            bottom=split_horizontally(
                vertical.start, vertical.end, br, bl, self.column_bands, self.height
            ),
            left=split_vertically(
                tl, horizontal.start, horizontal.end, bl, self.row_bands, self.height
            ),
            right=split_vertically(
                horizontal.start, tr, br, horizontal.end, self.row_bands, self.height
            ),
        )


def band_rows(bands: Bands) -> Dict[str, List[List[CoveredRow]]]:
    """Covered rows of every sub-quad, keyed by band name."""
    return {name: [quad.covered_rows() for quad in getattr(bands, name)] for name in BAND_NAMES}
