"""
Region geometry: points, quadrilaterals, scanline containment and band
subdivision.
"""

from .point import AffineEdge, Corners, EdgeFunction, Point, QuadEdges, VerticalEdge, edge_function
from .scanline import (
    BoundaryTable,
    ContainmentStrategy,
    CoveredRow,
    NeverContains,
    ScanlineRegionTest,
    Span,
    build_boundary_table,
)
from .quadrilateral import Quadrilateral
from .grid import BAND_NAMES, Bands, CenterLine, Grid, band_rows

__all__ = [
    # Primitives
    "Point",
    "Corners",
    "EdgeFunction",
    "VerticalEdge",
    "AffineEdge",
    "QuadEdges",
    "edge_function",

    # Containment
    "BoundaryTable",
    "ContainmentStrategy",
    "CoveredRow",
    "NeverContains",
    "ScanlineRegionTest",
    "Span",
    "build_boundary_table",

    # Shapes
    "Quadrilateral",
    "Grid",
    "Bands",
    "CenterLine",
    "BAND_NAMES",
    "band_rows",
]
