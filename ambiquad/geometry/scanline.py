"""
Scanline containment test for convex quadrilaterals.

The quad is rasterised once per geometry edit into a BoundaryTable holding,
for every integer row of the canvas, the [min, max] x-span the quad covers
(or None when the row is uncovered). Containment queries are then a row
lookup plus a range check, and full-canvas masks are a single vectorised
comparison.
"""

import logging
import math
from abc import ABC, abstractmethod
from typing import Dict, List, NamedTuple, Optional, Sequence

import numpy as np

from .point import AffineEdge, Corners, EdgeFunction, Point, QuadEdges, VerticalEdge

logger = logging.getLogger(__name__)


class Span(NamedTuple):
    """Covered x-range of a single row."""
    min: float
    max: float


class CoveredRow(NamedTuple):
    """A covered row: its y index and x-span."""
    y: int
    min: float
    max: float

    def to_dict(self) -> Dict[str, float]:
        return self._asdict()


class BoundaryTable:
    """
    Row-indexed boundaries of a region.

    Immutable once built: a rebuild creates a new table instead of touching
    this one, so a reader holding a reference always sees a consistent set of
    rows.
    """

    def __init__(self, spans: Sequence[Optional[Span]]):
        height = len(spans)
        covered = np.zeros(height, dtype=bool)
        mins = np.full(height, np.nan)
        maxs = np.full(height, np.nan)
        for y, span in enumerate(spans):
            if span is not None:
                covered[y] = True
                mins[y] = span.min
                maxs[y] = span.max
        for arr in (covered, mins, maxs):
            arr.flags.writeable = False
        self._covered = covered
        self._mins = mins
        self._maxs = maxs
        self._masks: Dict[int, np.ndarray] = {}

    @classmethod
    def uncovered(cls, height: int) -> "BoundaryTable":
        return cls([None] * height)

    @property
    def height(self) -> int:
        return len(self._covered)

    def __len__(self) -> int:
        return self.height

    def __eq__(self, other) -> bool:
        if not isinstance(other, BoundaryTable):
            return NotImplemented
        return (
            np.array_equal(self._covered, other._covered)
            and np.array_equal(self._mins, other._mins, equal_nan=True)
            and np.array_equal(self._maxs, other._maxs, equal_nan=True)
        )

    def row(self, y: int) -> Optional[Span]:
        """Span of row ``y``, or None if the row is uncovered or out of range."""
        if y < 0 or y >= self.height or not self._covered[y]:
            return None
        return Span(float(self._mins[y]), float(self._maxs[y]))

    def contains(self, x: float, y: float) -> bool:
        if not math.isfinite(y):
            return False
        row = math.floor(y)
        if row < 0 or row >= self.height or not self._covered[row]:
            return False
        return bool(self._mins[row] <= x <= self._maxs[row])

    def covered_rows(self) -> List[CoveredRow]:
        return [
            CoveredRow(int(y), float(self._mins[y]), float(self._maxs[y]))
            for y in np.flatnonzero(self._covered)
        ]

    def is_empty(self) -> bool:
        return not self._covered.any()

    def mask(self, width: int) -> np.ndarray:
        """
        Boolean (height, width) array, True where the pixel is inside.

        Computed once per width and cached; the table never changes so the
        cached mask stays valid for the table's lifetime.
        """
        cached = self._masks.get(width)
        if cached is not None:
            return cached
        xs = np.arange(width)
        with np.errstate(invalid="ignore"):
            mask = (
                self._covered[:, None]
                & (self._mins[:, None] <= xs)
                & (xs <= self._maxs[:, None])
            )
        mask.flags.writeable = False
        self._masks[width] = mask
        return mask


def _row_candidates(
    edges: Sequence[EdgeFunction], y: int, min_x: float, max_x: float
) -> List[float]:
    """X coordinates where the quad's edges cross row ``y``."""
    results: List[float] = []
    for edge in edges:
        if (edge.a.y < y and edge.b.y < y) or (edge.a.y > y and edge.b.y > y):
            continue

        if isinstance(edge, VerticalEdge):
            if edge.a.y <= y <= edge.b.y:
                results.append(edge.x)
        elif edge.slope == 0:
            # A horizontal edge lying on the row supplies both endpoints and
            # ends the scan for this row.
            if edge.intercept == y:
                results.extend((edge.a.x, edge.b.x))
                break
        else:
            x = edge.x_at(y)
            if min_x <= x <= max_x:
                results.append(x)
    return results


def build_boundary_table(corners: Corners, height: int) -> BoundaryTable:
    """Rasterise a quad into a BoundaryTable of ``height`` rows."""
    xs = [p.x for p in corners]
    ys = [p.y for p in corners]
    min_x, max_x = min(xs), max(xs)
    min_y, max_y = min(ys), max(ys)

    if min_x == max_x and min_y == max_y:
        # All four corners coincide: zero area, nothing to cover.
        return BoundaryTable.uncovered(height)

    edges = QuadEdges.from_corners(corners)
    spans: List[Optional[Span]] = []
    for y in range(height):
        if y < min_y or y > max_y:
            spans.append(None)
            continue
        candidates = _row_candidates(edges, y, min_x, max_x)
        if not candidates:
            spans.append(None)
        else:
            spans.append(Span(min(candidates), max(candidates)))
    return BoundaryTable(spans)


class ContainmentStrategy(ABC):
    """
    How a quadrilateral answers containment queries.

    Strategies are immutable: ``rebuild`` returns a strategy for the new
    corners and leaves the receiver untouched, so one instance can seed any
    number of quads without them affecting each other.
    """

    kind: str = ""

    @abstractmethod
    def rebuild(self, corners: Corners) -> "ContainmentStrategy":
        """Strategy of the same kind for ``corners``."""

    @abstractmethod
    def contains_point(self, point: Point) -> bool:
        ...

    @abstractmethod
    def covered_rows(self) -> List[CoveredRow]:
        ...

    @property
    @abstractmethod
    def table(self) -> BoundaryTable:
        ...


class NeverContains(ContainmentStrategy):
    """Placeholder strategy used before a region is configured."""

    kind = "never"

    def __init__(self, height: int = 0):
        self._table = BoundaryTable.uncovered(height)

    def rebuild(self, corners: Corners) -> "NeverContains":
        return self

    def contains_point(self, point: Point) -> bool:
        return False

    def covered_rows(self) -> List[CoveredRow]:
        return []

    @property
    def table(self) -> BoundaryTable:
        return self._table


class ScanlineRegionTest(ContainmentStrategy):
    """
    Convex-quad containment backed by a BoundaryTable.

    A fresh instance covers nothing; ``rebuild`` rasterises the corners into
    a new table and wraps it in a new instance.
    """

    kind = "scanline"

    def __init__(self, height: int, table: Optional[BoundaryTable] = None):
        if height < 0:
            raise ValueError(f"Invalid canvas height: {height}")
        self.height = height
        self._table = table if table is not None else BoundaryTable.uncovered(height)

    def rebuild(self, corners: Corners) -> "ScanlineRegionTest":
        return ScanlineRegionTest(self.height, build_boundary_table(corners, self.height))

    def contains_point(self, point: Point) -> bool:
        return self._table.contains(point.x, point.y)

    def covered_rows(self) -> List[CoveredRow]:
        return self._table.covered_rows()

    @property
    def table(self) -> BoundaryTable:
        return self._table
