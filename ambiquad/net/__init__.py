"""Network transport to the smart light.

This module provides:
- UDP color streaming to WiZ lights
- A log-only stand-in for running without a light
"""

from .light_client import LogOnlyLight, WizLightClient

__all__ = ["LogOnlyLight", "WizLightClient"]
