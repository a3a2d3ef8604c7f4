"""Ambient light color extraction from a user-defined webcam region."""

__version__ = "0.1.0"
