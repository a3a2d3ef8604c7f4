"""
Persistence of the user-defined sampling region.

Corners are stored as JSON (``region.json`` under the config directory) so
the region survives restarts:

    {"top_left": {"x": 50, "y": 50}, "top_right": {...}, ...}
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ..geometry import Corners, Point
from ..utils.config import SETTINGS

logger = logging.getLogger(__name__)

DEFAULT_CORNERS = Corners(
    top_left=Point(50, 50),
    top_right=Point(300, 50),
    bottom_right=Point(300, 300),
    bottom_left=Point(50, 300),
)


def get_region_path(config_dir: Optional[Path] = None) -> Path:
    """Get path to the region file, creating the config directory if needed."""
    directory = Path(config_dir or SETTINGS.config_dir)
    directory.mkdir(parents=True, exist_ok=True)
    return directory / "region.json"


def parse_corners(data: Dict[str, Any]) -> Corners:
    """
    Build Corners from a ``{name: {"x": .., "y": ..}}`` mapping.

    Raises:
        ValueError: If a corner is missing or not numeric
    """
    if not isinstance(data, dict):
        raise ValueError("corners must be an object")
    points = []
    for name in Corners._fields:
        raw = data.get(name)
        if not isinstance(raw, dict):
            raise ValueError(f"missing corner '{name}'")
        try:
            x, y = float(raw["x"]), float(raw["y"])
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"corner '{name}' needs numeric x and y") from e
        points.append(Point(x, y))
    return Corners(*points)


def parse_corner_list(text: str) -> Corners:
    """
    Parse ``"x,y x,y x,y x,y"`` (top-left, top-right, bottom-right,
    bottom-left) into Corners.

    Raises:
        ValueError: If the text does not hold exactly four numeric pairs
    """
    pairs = text.split()
    if len(pairs) != 4:
        raise ValueError(f"expected 4 corners, got {len(pairs)}")
    points = []
    for pair in pairs:
        parts = pair.split(",")
        if len(parts) != 2:
            raise ValueError(f"invalid corner '{pair}', expected x,y")
        points.append(Point(float(parts[0]), float(parts[1])))
    return Corners(*points)


def load_corners(config_dir: Optional[Path] = None) -> Corners:
    """
    Load the saved region.

    Returns:
        Saved corners, or DEFAULT_CORNERS when nothing valid is stored
    """
    path = get_region_path(config_dir)
    if not path.exists():
        return DEFAULT_CORNERS
    try:
        with open(path) as f:
            corners = parse_corners(json.load(f))
        logger.info(f"Loaded region from {path}")
        return corners
    except (OSError, ValueError) as e:
        logger.warning(f"Failed to load region file {path}: {e} - using defaults")
        return DEFAULT_CORNERS


def save_corners(corners: Corners, config_dir: Optional[Path] = None) -> Path:
    """
    Save the region (atomic write: temp file + rename).

    Raises:
        IOError: If the file cannot be written
    """
    path = get_region_path(config_dir)
    try:
        temp_path = path.with_suffix(".json.tmp")
        with open(temp_path, "w") as f:
            json.dump(corners.to_dict(), f, indent=2)
        temp_path.replace(path)
        logger.debug(f"Saved region to {path}")
    except OSError as e:
        logger.error(f"Failed to save region to {path}: {e}", exc_info=True)
        raise IOError(f"Failed to save region: {e}") from e
    return path
