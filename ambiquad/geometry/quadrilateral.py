"""
Ordered four-corner region with a pluggable containment strategy.
"""

import logging
from typing import List, NamedTuple, Optional

from .point import ORIGIN, Corners, Point, QuadEdges
from .scanline import BoundaryTable, ContainmentStrategy, CoveredRow, NeverContains

logger = logging.getLogger(__name__)


class _QuadState(NamedTuple):
    corners: Corners
    edges: QuadEdges
    strategy: ContainmentStrategy


class Quadrilateral:
    """
    A quad with corners ``top_left, top_right, bottom_right, bottom_left``.

    Corners must describe a simple, ideally convex, shape. Concave or
    self-intersecting corners do not raise, but the covered area is then
    unspecified.

    The quad owns its strategy: a strategy passed in only seeds the kind,
    the quad keeps the rebuilt copy. Corners, edges and strategy are
    replaced together with one assignment.
    """

    def __init__(
        self,
        corners: Optional[Corners] = None,
        strategy: Optional[ContainmentStrategy] = None,
    ):
        corners = corners or Corners(ORIGIN, ORIGIN, ORIGIN, ORIGIN)
        seed = strategy if strategy is not None else NeverContains()
        self._state = _QuadState(corners, QuadEdges.from_corners(corners), seed.rebuild(corners))

    @property
    def corners(self) -> Corners:
        return self._state.corners

    @property
    def edges(self) -> QuadEdges:
        """Edge functions for the current corners."""
        return self._state.edges

    def set_corners(
        self,
        top_left: Point,
        top_right: Point,
        bottom_right: Point,
        bottom_left: Point,
    ) -> None:
        """Move the corners and rebuild the containment strategy."""
        corners = Corners(top_left, top_right, bottom_right, bottom_left)
        strategy = self._state.strategy.rebuild(corners)
        self._state = _QuadState(corners, QuadEdges.from_corners(corners), strategy)

    @property
    def strategy(self) -> ContainmentStrategy:
        return self._state.strategy

    @strategy.setter
    def strategy(self, strategy: ContainmentStrategy) -> None:
        state = self._state
        self._state = state._replace(strategy=strategy.rebuild(state.corners))

    @property
    def table(self) -> BoundaryTable:
        return self._state.strategy.table

    def contains_point(self, point: Point) -> bool:
        return self._state.strategy.contains_point(point)

    def covered_rows(self) -> List[CoveredRow]:
        return self._state.strategy.covered_rows()

    def __repr__(self) -> str:
        tl, tr, br, bl = self._state.corners
        return (
            f"Quadrilateral(tl=({tl.x}, {tl.y}), tr=({tr.x}, {tr.y}), "
            f"br=({br.x}, {br.y}), bl=({bl.x}, {bl.y}), strategy={self._state.strategy.kind})"
        )
