"""Logging configuration for the ambiquad daemon and CLI."""
import logging
from typing import Optional

from ..utils.config import SETTINGS

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logger(level: Optional[str] = None) -> logging.Logger:
    """
    Attach a stderr handler to the root logger and set the level.

    Args:
        level: Level name; defaults to ``SETTINGS.log_level`` (AMBIQUAD_LOGLEVEL)

    Returns:
        The ``ambiquad`` package logger
    """
    resolved = getattr(logging, (level or SETTINGS.log_level).upper(), logging.INFO)

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(handler)
    root.setLevel(resolved)

    # The preview UI polls the API several times a second
    logging.getLogger("aiohttp.access").setLevel(max(resolved, logging.WARNING))

    app_logger = logging.getLogger("ambiquad")
    app_logger.setLevel(resolved)
    return app_logger
