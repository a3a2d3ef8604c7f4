"""
Point and edge primitives for quadrilateral regions.

Points are immutable values, so a quad, its sub-quads and its containment
table never share mutable state: deriving a corner always produces a new
Point.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, NamedTuple, Union


@dataclass(frozen=True)
class Point:
    """A 2D coordinate in canvas space (pixels, real-valued)."""
    x: float
    y: float

    def lerp(self, other: "Point", count: int, step: int) -> "Point":
        """Point ``step/count`` of the way from this point to ``other``."""
        return Point(
            self.x + ((other.x - self.x) / count) * step,
            self.y + ((other.y - self.y) / count) * step,
        )

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Dict[str, float]) -> "Point":
        return cls(float(data["x"]), float(data["y"]))


ORIGIN = Point(0.0, 0.0)


class Corners(NamedTuple):
    """Ordered quad corners: clockwise starting at the top-left."""
    top_left: Point
    top_right: Point
    bottom_right: Point
    bottom_left: Point

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        return {name: point.to_dict() for name, point in self._asdict().items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Dict[str, float]]) -> "Corners":
        return cls(*(Point.from_dict(data[name]) for name in cls._fields))


@dataclass(frozen=True)
class VerticalEdge:
    """Edge whose endpoints share an x coordinate (``x = const``)."""
    a: Point
    b: Point

    @property
    def x(self) -> float:
        return self.a.x

    def midpoint(self) -> Point:
        return Point(self.x, (self.a.y + self.b.y) / 2)


@dataclass(frozen=True)
class AffineEdge:
    """Edge described by ``y = slope * x + intercept``."""
    a: Point
    b: Point
    slope: float
    intercept: float

    def y_at(self, x: float) -> float:
        return self.intercept + self.slope * x

    def x_at(self, y: float) -> float:
        return (y - self.intercept) / self.slope

    def midpoint(self) -> Point:
        x = (self.a.x + self.b.x) / 2
        return Point(x, self.y_at(x))


EdgeFunction = Union[VerticalEdge, AffineEdge]


def edge_function(a: Point, b: Point) -> EdgeFunction:
    """Derive the line through ``a`` and ``b``."""
    if a.x - b.x == 0:
        return VerticalEdge(a, b)
    slope = (a.y - b.y) / (a.x - b.x)
    return AffineEdge(a, b, slope, a.y - slope * a.x)


class QuadEdges(NamedTuple):
    """The four edges of a quad, in scanning order."""
    top: EdgeFunction
    left: EdgeFunction
    right: EdgeFunction
    bottom: EdgeFunction

    @classmethod
    def from_corners(cls, corners: Corners) -> "QuadEdges":
        tl, tr, br, bl = corners
        return cls(
            top=edge_function(tl, tr),
            left=edge_function(tl, bl),
            right=edge_function(tr, br),
            bottom=edge_function(bl, br),
        )
