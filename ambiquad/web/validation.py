from __future__ import annotations

from ..cv.region_store import parse_corners
from ..geometry import Corners, Point


def clamp_point(point: Point, width: int, height: int) -> Point:
    """Keep a dragged handle on the canvas."""
    return Point(min(width, max(0.0, point.x)), min(height, max(0.0, point.y)))


def validate_region_payload(data, width: int, height: int) -> Corners:
    """
    Validate a region API payload and clamp its corners to the canvas.

    Raises:
        ValueError: If the payload is not a complete set of numeric corners
    """
    if not isinstance(data, dict):
        raise ValueError("payload must be an object")
    corners = parse_corners(data)
    return Corners(*(clamp_point(p, width, height) for p in corners))
