"""
Frame-level processing for ambient color extraction.

This module provides:
- Webcam capture using OpenCV
- In-memory frame buffering
- Region color sampling over covered rows
- Preview masking and per-band color sampling
- Color post-processing and region persistence
"""

from .capture import CameraCapture, CaptureError
from .color import boost_color, mix_colors, to_rgb8
from .frame_buffer import FrameBuffer, FrameMetadata
from .frame_processor import BandColors, FrameProcessor
from .region_sampler import Color, RegionSampler, color_to_dict
from .region_store import DEFAULT_CORNERS, load_corners, save_corners

__all__ = [
    # Capture
    "CameraCapture",
    "CaptureError",

    # Frame buffer
    "FrameBuffer",
    "FrameMetadata",

    # Sampling
    "Color",
    "RegionSampler",
    "color_to_dict",
    "FrameProcessor",
    "BandColors",

    # Color helpers
    "boost_color",
    "mix_colors",
    "to_rgb8",

    # Region persistence
    "DEFAULT_CORNERS",
    "load_corners",
    "save_corners",
]
