"""
Color post-processing between band sampling and the light.
"""

from typing import Iterable, Optional, Tuple

from .region_sampler import Color


def mix_colors(colors: Iterable[Optional[Color]]) -> Optional[Color]:
    """
    Average of the available colors.

    None entries (bands that produced no sample) are ignored; if nothing is
    left the result is None.
    """
    available = [c for c in colors if c is not None]
    if not available:
        return None
    count = len(available)
    return Color(
        sum(c.r for c in available) / count,
        sum(c.g for c in available) / count,
        sum(c.b for c in available) / count,
    )


def boost_color(color: Color) -> Color:
    """Saturate the dominant channel(s) to 255, leave the others unchanged."""
    peak = max(color)
    return Color(*(255.0 if channel == peak else channel for channel in color))


def to_rgb8(color: Color) -> Tuple[int, int, int]:
    """Round and clamp each channel into 0-255."""
    return tuple(min(255, max(0, int(round(channel)))) for channel in color)
